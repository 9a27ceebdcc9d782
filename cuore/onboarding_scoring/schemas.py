"""Pydantic models for the raw questionnaire modules (M2..M7).

Each model checks presence, type and range/enumeration of its fields. The
categorical answers are ``Literal`` types built from the scoring table keys,
so an answer that validates always has a score.
"""

import math
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from .tables import (
    ALCOHOL_SCORES,
    EXERCISE_SCORES,
    FOOD_FREQUENCY_SCORES,
    SLEEP_SCORES,
    SMOKING_SCORES,
    STRESS_FREQUENCY_SCORES,
)


MIN_AGE, MAX_AGE = 18, 88
MIN_HEIGHT, MAX_HEIGHT = 120, 210
MIN_WEIGHT, MAX_WEIGHT = 25, 200
MIN_WAIST, MAX_WAIST = 15, 75

GenderEnum = Literal["male", "female", "other"]
HsCRPUnitEnum = Literal["mg/dl", "mg/l"]
SmokingEnum = Literal[tuple(SMOKING_SCORES)]
AlcoholEnum = Literal[tuple(ALCOHOL_SCORES)]
ExerciseEnum = Literal[tuple(EXERCISE_SCORES)]
FoodFrequencyEnum = Literal[tuple(FOOD_FREQUENCY_SCORES)]
SleepEnum = Literal[tuple(SLEEP_SCORES)]
StressFrequencyEnum = Literal[tuple(STRESS_FREQUENCY_SCORES)]

# The ten biomarkers a manual panel must carry; A1C is optional and derived when absent
BIOMARKER_FIELDS = (
    "o2_sat",
    "pulse",
    "bp_upper",
    "bp_lower",
    "bs_f",
    "bs_am",
    "HDL",
    "LDL",
    "Trig",
    "HsCRP",
)


def _numeric_input(value: Any) -> Any:
    """Reject booleans and integers too large to represent as a float."""
    if isinstance(value, bool):
        raise PydanticCustomError("float_type", "Input should be a valid number")
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            raise PydanticCustomError("finite_number", "Input should be a finite number") from None
    return value


def _normalized_choice(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class BasicInfoIn(BaseModel):
    """M2."""
    age: int = Field(..., ge=MIN_AGE, le=MAX_AGE)
    gender: GenderEnum
    height_cm: float = Field(..., ge=MIN_HEIGHT, le=MAX_HEIGHT, allow_inf_nan=False)
    weight_kg: float = Field(..., ge=MIN_WEIGHT, le=MAX_WEIGHT, allow_inf_nan=False)
    waist_cm: float = Field(..., ge=MIN_WAIST, le=MAX_WAIST, allow_inf_nan=False)

    @field_validator("age", mode="before")
    @classmethod
    def truncate_age(cls, value: Any) -> Any:
        # Fractional ages are cut to whole years, never rounded up
        value = _numeric_input(value)
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                raise PydanticCustomError("int_parsing", "Input should be a valid integer") from None
        if isinstance(value, float):
            if not math.isfinite(value):
                raise PydanticCustomError("finite_number", "Input should be a finite number")
            return int(value)
        return value

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, value: Any) -> Any:
        return _normalized_choice(value)

    @field_validator("height_cm", "weight_kg", "waist_cm", mode="before")
    @classmethod
    def check_measurement(cls, value: Any) -> Any:
        return _numeric_input(value)


class RiskHistoryIn(BaseModel):
    """M3. Options outside the six scored statements are accepted and carry no weight."""
    model_config = ConfigDict(populate_by_name=True)

    selected_options: List[str] = Field(default_factory=list, alias="selectedOptions")
    other_conditions: str = ""

    @field_validator("selected_options", mode="before")
    @classmethod
    def default_options(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("other_conditions", mode="before")
    @classmethod
    def default_conditions(cls, value: Any) -> Any:
        return "" if value is None else value


class LifestyleIn(BaseModel):
    """M4."""
    smoking: SmokingEnum
    alcohol: AlcoholEnum


class ExerciseDietIn(BaseModel):
    """M5."""
    min_exercise_per_week: ExerciseEnum
    fruits_veg: FoodFrequencyEnum
    processed_food: FoodFrequencyEnum
    high_fiber: FoodFrequencyEnum


class SleepStressIn(BaseModel):
    """M6."""
    sleep_hours: SleepEnum
    problems_overwhelming: StressFrequencyEnum
    enjoyable: StressFrequencyEnum
    felt_nervous: StressFrequencyEnum


class BiomarkerPanelIn(BaseModel):
    """M7: either empty (values are estimated) or all ten biomarkers present."""
    o2_sat: Optional[float] = Field(None, gt=0, le=100, allow_inf_nan=False)
    pulse: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    bp_upper: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    bp_lower: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    bs_f: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    bs_am: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    HDL: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    LDL: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    Trig: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    HsCRP: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    A1C: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    hscrp_unit: Optional[HsCRPUnitEnum] = None

    @field_validator(*BIOMARKER_FIELDS, "A1C", mode="before")
    @classmethod
    def check_value(cls, value: Any) -> Any:
        return _numeric_input(value)

    @field_validator("hscrp_unit", mode="before")
    @classmethod
    def normalize_unit(cls, value: Any) -> Any:
        return _normalized_choice(value)

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in BIOMARKER_FIELDS + ("A1C",))

    @model_validator(mode="after")
    def empty_or_complete(self) -> "BiomarkerPanelIn":
        # A partial panel is never topped up with estimated values
        if self.is_empty:
            return self
        for name in BIOMARKER_FIELDS:
            if getattr(self, name) is None:
                raise PydanticCustomError(
                    "incomplete_panel",
                    "Incomplete biomarker submission: missing {field}",
                    {"field": name},
                )
        return self
