"""Validated module fields and the score values computed from them."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class BasicInfo:
    age: int
    gender: str
    height_cm: float
    weight_kg: float
    waist_cm: float


@dataclass(frozen=True)
class RiskHistory:
    q1: bool
    q2: bool
    q3: bool
    q4: bool
    q5: bool
    q6: bool
    other_conditions: str = ""


@dataclass(frozen=True)
class Lifestyle:
    smoking: str
    alcohol: str


@dataclass(frozen=True)
class ExerciseDiet:
    min_exercise_per_week: str
    fruits_veg: str
    processed_food: str
    high_fiber: str


@dataclass(frozen=True)
class SleepStress:
    sleep_hours: str
    problems_overwhelming: str
    enjoyable: str
    felt_nervous: str


@dataclass(frozen=True)
class BiomarkerInput:
    """A complete user-supplied panel, before unit normalization."""
    o2_sat: float
    pulse: float
    bp_upper: float
    bp_lower: float
    bs_f: float
    bs_am: float
    HDL: float
    LDL: float
    Trig: float
    HsCRP: float
    A1C: Optional[float] = None
    hscrp_unit: Optional[str] = None


@dataclass(frozen=True)
class BiomarkerPanel:
    """The stored panel: always fully populated."""
    o2_sat: float
    pulse: float
    bp_upper: float
    bp_lower: float
    bs_f: float
    bs_am: float
    HDL: float
    LDL: float
    Trig: float
    HsCRP: float
    A1C: float
    trig_hdl_ratio: float
    imputed: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BasicInfoScores:
    bmi: float
    wthr: float
    age_score: int
    gender_score: int
    bmi_score: int
    wthr_score: int


@dataclass(frozen=True)
class RiskHistoryResult:
    score: int
    has_hypertension: bool
    has_diabetes: bool


@dataclass(frozen=True)
class ExerciseDietScores:
    exercise_score: float
    foods_score: float

    @property
    def total(self) -> float:
        return self.exercise_score + self.foods_score


@dataclass(frozen=True)
class SleepStressScores:
    sleep_score: float
    stress_score: float  # average of the three stress answers

    @property
    def total(self) -> float:
        return self.sleep_score + self.stress_score


@dataclass(frozen=True)
class BiomarkerScores:
    o2_sat: float
    pulse: float
    bp: float        # mean of systolic and diastolic band scores
    glucose: float   # mean of fasting, post-meal and A1C band scores
    HDL: float
    LDL: float
    Trig: float
    HsCRP: float
    trig_hdl_ratio: float

    @property
    def total(self) -> float:
        return (
            self.o2_sat
            + self.pulse
            + self.bp
            + self.glucose
            + self.HDL
            + self.LDL
            + self.Trig
            + self.HsCRP
            + self.trig_hdl_ratio
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class ScoreSet:
    """Every sub-score group the composite is derived from."""
    age_score: float
    gender_score: float
    bmi_score: float
    wthr_score: float
    m3_score: float
    m4_score: float
    m5_score: float
    m6_score: float
    m7_score: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, scores: Dict[str, Any]) -> "ScoreSet":
        return cls(
            age_score=scores["age_score"],
            gender_score=scores["gender_score"],
            bmi_score=scores["bmi_score"],
            wthr_score=scores["wthr_score"],
            m3_score=scores["m3_score"],
            m4_score=scores["m4_score"],
            m5_score=scores["m5_score"],
            m6_score=scores["m6_score"],
            m7_score=scores["m7_score"],
        )
