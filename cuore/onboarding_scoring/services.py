from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from cuore.core.config import settings
from cuore.crud.onboarding import OnboardingCRUD, onboarding
from cuore.models.onboarding import OnboardingHistory, OnboardingRecord
from cuore.utils.timezone import utcnow_naive

from .composite import compose
from .domain import ScoreSet
from .engine import (
    score_basic_info,
    score_biomarkers,
    score_exercise_diet,
    score_lifestyle,
    score_risk_history,
    score_sleep_stress,
)
from .errors import DomainError, InternalError, RecordNotFound
from .imputation import impute, normalize_supplied
from .metrics import calculate_all_metrics
from .tables import DEFAULT_TABLES, ScoringTables
from .validators import (
    validate_basic_info,
    validate_biomarkers,
    validate_exercise_diet,
    validate_lifestyle,
    validate_risk_history,
    validate_sleep_stress,
)

logger = logging.getLogger(__name__)

REQUIRED_MODULES = ("m2", "m3", "m4", "m5", "m6")


@dataclass
class SubmissionResult:
    record: OnboardingRecord
    created: bool  # False on reassessment


def serialize_record(record: OnboardingRecord, hide_imputed: bool = False) -> Dict[str, Any]:
    m7_data = dict(record.m7_data or {})
    if hide_imputed and m7_data.get("imputed"):
        # Synthesized lab values are kept for scoring but shown to the user as blank
        m7_data = {"imputed": True}
    return {
        "user_id": record.user_id,
        "onboarding_version": record.onboarding_version,
        "m2_data": record.m2_data,
        "m3_data": record.m3_data,
        "m4_data": record.m4_data,
        "m5_data": record.m5_data,
        "m6_data": record.m6_data,
        "m7_data": m7_data,
        "derived_metrics": record.derived_metrics,
        "scores": record.scores,
        "timestamp": record.timestamp,
    }


class OnboardingSubmissionService:
    """Validate → score → impute → compose → persist for one user's questionnaire."""

    def __init__(
        self,
        db: Session,
        tables: ScoringTables = DEFAULT_TABLES,
        clock: Callable[[], datetime] = utcnow_naive,
        store: OnboardingCRUD = onboarding,
        onboarding_version: Optional[str] = None,
    ):
        self.db = db
        self.tables = tables
        self.clock = clock
        self.store = store
        self.onboarding_version = onboarding_version or settings.ONBOARDING_VERSION

    # --- Pipeline (pure) ---
    def build_record(self, payload: Any) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Return (record values, history snapshot) for a payload.

        All six modules are validated before any scoring happens, so the
        first invalid field aborts with no partial computation.
        """
        if not isinstance(payload, Mapping):
            raise DomainError("Onboarding payload must be an object")
        for module in REQUIRED_MODULES:
            if payload.get(module) is None:
                raise DomainError(f"Missing required module: {module}", module)

        tables = self.tables
        basic = validate_basic_info(payload["m2"], tables)
        history = validate_risk_history(payload["m3"], tables)
        lifestyle = validate_lifestyle(payload["m4"], tables)
        exercise_diet = validate_exercise_diet(payload["m5"], tables)
        sleep_stress = validate_sleep_stress(payload["m6"], tables)
        biomarkers = validate_biomarkers(payload.get("m7"), tables)

        m2 = score_basic_info(basic)
        m3 = score_risk_history(history, tables)
        m4_score = score_lifestyle(lifestyle, tables)
        m5 = score_exercise_diet(exercise_diet, tables)
        m6 = score_sleep_stress(sleep_stress, tables)

        if biomarkers is None:
            subtotal = (
                m2.age_score
                + m2.gender_score
                + m2.bmi_score
                + m2.wthr_score
                + m3.score
                + m4_score
                + m5.total
                + m6.total
            )
            panel = impute(subtotal)
            logger.info(f"[Onboarding] No biomarkers supplied; imputed panel from subtotal {subtotal}")
        else:
            panel = normalize_supplied(biomarkers)
        m7 = score_biomarkers(panel)

        score_set = ScoreSet(
            age_score=m2.age_score,
            gender_score=m2.gender_score,
            bmi_score=m2.bmi_score,
            wthr_score=m2.wthr_score,
            m3_score=m3.score,
            m4_score=m4_score,
            m5_score=m5.total,
            m6_score=m6.total,
            m7_score=m7.total,
        )
        cuore_score = compose(score_set, tables)

        scores = score_set.to_dict()
        scores.update({
            "exercise_score": m5.exercise_score,
            "foods_score": m5.foods_score,
            "sleep_score": m6.sleep_score,
            "stress_score": m6.stress_score,
            "m7_breakdown": m7.to_dict(),
            "cuore_score": cuore_score,
        })

        m3_data = asdict(history)
        m3_data["has_hypertension"] = m3.has_hypertension
        m3_data["has_diabetes"] = m3.has_diabetes

        now = self.clock()
        values = {
            "onboarding_version": self.onboarding_version,
            "m2_data": asdict(basic),
            "m3_data": m3_data,
            "m4_data": asdict(lifestyle),
            "m5_data": asdict(exercise_diet),
            "m6_data": asdict(sleep_stress),
            "m7_data": panel.to_dict(),
            "derived_metrics": {"bmi": m2.bmi, "wthr": m2.wthr},
            "scores": scores,
            "cuore_score": cuore_score,
            "timestamp": now,
        }
        snapshot = {
            "recorded_at": now,
            "cuore_score": cuore_score,
            "weight_kg": basic.weight_kg,
            "bmi": m2.bmi,
            "m5_score": m5.total,
            "m6_score": m6.total,
            "m7_snapshot": panel.to_dict(),
        }
        return values, snapshot

    # --- Write path ---
    def submit(self, user_id: str, payload: Any) -> SubmissionResult:
        try:
            existing = self.store.find_by_user(self.db, user_id)
            values, snapshot = self.build_record(payload)
            record = self.store.upsert_by_user(self.db, user_id, values, snapshot)
        except DomainError as e:
            logger.info(f"[Onboarding] Rejected submission for user {user_id}: {e.message}")
            raise
        except Exception as e:
            logger.exception(f"[Onboarding] Submission failed for user {user_id}: {e}")
            raise InternalError() from e

        created = existing is None
        logger.info(
            f"[Onboarding] {'Created' if created else 'Reassessed'} record for user {user_id} "
            f"(cuore_score={record.cuore_score})"
        )
        return SubmissionResult(record=record, created=created)

    # --- Read path ---
    def _load(self, user_id: str) -> OnboardingRecord:
        try:
            record = self.store.find_by_user(self.db, user_id)
        except Exception as e:
            logger.exception(f"[Onboarding] Failed to load record for user {user_id}: {e}")
            raise InternalError() from e
        if record is None:
            raise RecordNotFound(user_id)
        return record

    def get_record(self, user_id: str) -> Dict[str, Any]:
        return serialize_record(self._load(user_id), hide_imputed=True)

    def get_metrics(self, user_id: str) -> Dict[str, Any]:
        record = serialize_record(self._load(user_id), hide_imputed=True)
        return calculate_all_metrics(record, self.tables)

    def get_score_history(self, user_id: str) -> List[Dict[str, Any]]:
        try:
            rows: List[OnboardingHistory] = self.store.list_history(self.db, user_id)
        except Exception as e:
            logger.exception(f"[Onboarding] Failed to load history for user {user_id}: {e}")
            raise InternalError() from e
        return [
            {
                "date": row.recorded_at,
                "cuore_score": row.cuore_score,
                "weight_kg": row.weight_kg,
                "bmi": row.bmi,
                "m5_score": row.m5_score,
                "m6_score": row.m6_score,
            }
            for row in rows
        ]
