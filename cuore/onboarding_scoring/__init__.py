"""Onboarding health-risk scoring package.

This module contains:
- Validators for the six questionnaire modules (M2..M7)
- Pure module scorers and biomarker band functions
- Biomarker imputation for withheld lab values
- The composite (Cuore Score) normalization
- The submission service that persists one record per user
"""

from .errors import DomainError, ErrorKind, InternalError, OnboardingError, RecordNotFound
from .tables import DEFAULT_TABLES, ScoringTables
from .composite import compose
from .imputation import impute, normalize_supplied
from .validators import validate

__all__ = [
    "DomainError",
    "ErrorKind",
    "InternalError",
    "OnboardingError",
    "RecordNotFound",
    "DEFAULT_TABLES",
    "ScoringTables",
    "compose",
    "impute",
    "normalize_supplied",
    "validate",
]
