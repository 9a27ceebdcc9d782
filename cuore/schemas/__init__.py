from .onboarding import (
    TokenPayload,
    OnboardingPayload,
    SubmissionData,
    SubmissionResponse,
    OnboardingRecordResponse,
    ScoreHistoryPoint,
    ScoreHistoryResponse,
)
