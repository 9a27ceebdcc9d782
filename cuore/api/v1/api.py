from fastapi import APIRouter

from cuore.api.v1.endpoints import onboarding

api_router = APIRouter()

api_router.include_router(onboarding.router, prefix="/onboarding", tags=["onboarding"])
