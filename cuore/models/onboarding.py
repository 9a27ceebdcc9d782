from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    DateTime,
    JSON,
    Index,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB

from cuore.db.base import Base
from cuore.utils.timezone import utcnow_naive

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class OnboardingRecord(Base):
    """The single current onboarding record of a user; overwritten on reassessment."""
    __tablename__ = "onboarding_records"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False)
    onboarding_version = Column(String(16), nullable=False)

    m2_data = Column(JSONType, nullable=False)  # age, gender, height_cm, weight_kg, waist_cm
    m3_data = Column(JSONType, nullable=False)  # q1..q6, other_conditions, has_hypertension, has_diabetes
    m4_data = Column(JSONType, nullable=False)
    m5_data = Column(JSONType, nullable=False)
    m6_data = Column(JSONType, nullable=False)
    m7_data = Column(JSONType, nullable=False)  # ten biomarkers + A1C + trig_hdl_ratio + imputed
    derived_metrics = Column(JSONType, nullable=False)  # bmi, wthr
    scores = Column(JSONType, nullable=False)

    cuore_score = Column(Float, nullable=False, index=True)
    timestamp = Column(DateTime, nullable=False, default=utcnow_naive)

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_onboarding_records_user_id"),
    )


class OnboardingHistory(Base):
    """Append-only snapshot per submission, used for trend charts."""
    __tablename__ = "onboarding_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    recorded_at = Column(DateTime, nullable=False, default=utcnow_naive)

    cuore_score = Column(Float, nullable=False)
    weight_kg = Column(Float, nullable=True)
    bmi = Column(Float, nullable=True)
    m5_score = Column(Float, nullable=True)
    m6_score = Column(Float, nullable=True)
    m7_snapshot = Column(JSONType, nullable=True)

    __table_args__ = (
        Index("idx_onboarding_history_user_recorded", "user_id", "recorded_at"),
    )
