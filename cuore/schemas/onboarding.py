from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class TokenPayload(BaseModel):
    sub: Optional[str] = None


class OnboardingPayload(BaseModel):
    """Full questionnaire submitted in one request.

    Module bodies are checked by the per-module models in
    ``cuore.onboarding_scoring.schemas`` once the pipeline runs, so that every
    field error comes back in the same {"error", "field"} shape.
    """
    m2: Optional[Dict[str, Any]] = Field(None, description="age, gender, height_cm, weight_kg, waist_cm")
    m3: Optional[Dict[str, Any]] = Field(None, description="selectedOptions, other_conditions")
    m4: Optional[Dict[str, Any]] = Field(None, description="smoking, alcohol")
    m5: Optional[Dict[str, Any]] = Field(None, description="min_exercise_per_week, fruits_veg, processed_food, high_fiber")
    m6: Optional[Dict[str, Any]] = Field(None, description="sleep_hours, problems_overwhelming, enjoyable, felt_nervous")
    m7: Optional[Dict[str, Any]] = Field(None, description="biomarkers; send {} to have them estimated")


class SubmissionData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cuore_score: float = Field(..., alias="cuoreScore")
    user_id: str = Field(..., alias="userId")


class SubmissionResponse(BaseModel):
    status: str = "success"
    message: str
    data: SubmissionData


class OnboardingRecordResponse(BaseModel):
    user_id: str
    onboarding_version: str
    m2_data: Dict[str, Any]
    m3_data: Dict[str, Any]
    m4_data: Dict[str, Any]
    m5_data: Dict[str, Any]
    m6_data: Dict[str, Any]
    m7_data: Dict[str, Any]
    derived_metrics: Dict[str, Any]
    scores: Dict[str, Any]
    timestamp: datetime


class ScoreHistoryPoint(BaseModel):
    date: datetime
    cuore_score: float
    weight_kg: Optional[float] = None
    bmi: Optional[float] = None
    m5_score: Optional[float] = None
    m6_score: Optional[float] = None


class ScoreHistoryResponse(BaseModel):
    user_id: str
    latest_score: Optional[float] = None
    history: List[ScoreHistoryPoint] = []
