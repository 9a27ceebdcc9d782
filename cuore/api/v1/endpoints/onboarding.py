import logging

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from cuore.api import deps
from cuore.onboarding_scoring.errors import ErrorKind, OnboardingError, RecordNotFound
from cuore.onboarding_scoring.services import OnboardingSubmissionService
from cuore.schemas.onboarding import (
    OnboardingPayload,
    OnboardingRecordResponse,
    ScoreHistoryResponse,
    SubmissionData,
    SubmissionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _error_response(exc: OnboardingError) -> JSONResponse:
    if isinstance(exc, RecordNotFound):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=exc.to_dict())
    if exc.kind is ErrorKind.DOMAIN:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.to_dict())
    # Internal details stay in the server log
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Internal server error"})


def _submit(db: Session, user_id: str, payload: OnboardingPayload, response: Response):
    try:
        result = OnboardingSubmissionService(db).submit(user_id, payload.model_dump())
    except OnboardingError as e:
        return _error_response(e)

    if result.created:
        response.status_code = status.HTTP_201_CREATED
        message = "Onboarding completed successfully"
    else:
        response.status_code = status.HTTP_200_OK
        message = "Reassessment completed successfully"
    return SubmissionResponse(
        message=message,
        data=SubmissionData(cuore_score=result.record.cuore_score, user_id=result.record.user_id),
    )


@router.post("/submit", response_model=SubmissionResponse, response_model_by_alias=True, status_code=201)
def submit(
    *,
    db: Session = Depends(deps.get_db),
    payload: OnboardingPayload,
    response: Response,
    user_id: str = Depends(deps.get_current_user_id),
):
    """Submit the full questionnaire. Creates the user's record, or overwrites it on reassessment."""
    return _submit(db, user_id, payload, response)


@router.put("/submit", response_model=SubmissionResponse, response_model_by_alias=True)
def reassess(
    *,
    db: Session = Depends(deps.get_db),
    payload: OnboardingPayload,
    response: Response,
    user_id: str = Depends(deps.get_current_user_id),
):
    """Reassessment alias of POST /submit."""
    return _submit(db, user_id, payload, response)


@router.get("", response_model=OnboardingRecordResponse)
def get_onboarding(
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
):
    """Stored record for the current user; estimated lab values are not shown."""
    try:
        return OnboardingSubmissionService(db).get_record(user_id)
    except OnboardingError as e:
        return _error_response(e)


@router.get("/history", response_model=ScoreHistoryResponse)
def get_history(
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
):
    try:
        history = OnboardingSubmissionService(db).get_score_history(user_id)
    except OnboardingError as e:
        return _error_response(e)
    latest = history[-1]["cuore_score"] if history else None
    return {"user_id": user_id, "latest_score": latest, "history": history}


@router.get("/metrics", response_model=dict)
def get_metrics(
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
):
    """Dashboard metrics (targets, statuses, recommendations) derived from the stored record."""
    try:
        return OnboardingSubmissionService(db).get_metrics(user_id)
    except OnboardingError as e:
        return _error_response(e)
