from .onboarding import OnboardingRecord, OnboardingHistory

__all__ = ["OnboardingRecord", "OnboardingHistory"]
