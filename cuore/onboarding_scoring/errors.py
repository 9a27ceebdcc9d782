"""Error taxonomy for the onboarding pipeline.

Two kinds only:
- DOMAIN: a field outside its valid range/enumeration, or an incomplete
  biomarker submission. Reported to the caller verbatim, never retried.
- INTERNAL: storage failure or any unexpected exception. Logged in full,
  reported opaquely.

Callers branch on ``exc.kind`` rather than on the concrete class.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    DOMAIN = "domain"
    INTERNAL = "internal"


class OnboardingError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class DomainError(OnboardingError, ValueError):
    kind = ErrorKind.DOMAIN

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.field:
            body["field"] = self.field
        return body


class RecordNotFound(DomainError):
    """No onboarding record exists for the user."""

    def __init__(self, user_id: str):
        super().__init__("Onboarding data not found for this user.")
        self.user_id = user_id


class InternalError(OnboardingError):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
