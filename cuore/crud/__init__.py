from .onboarding import onboarding

__all__ = ["onboarding"]
