"""Module scorers: pure functions from validated fields to sub-scores.

Every function here is deterministic and free of I/O so it can be
unit-tested independently of the service layer.
"""

import math
import re

from .domain import (
    BasicInfo,
    BasicInfoScores,
    BiomarkerPanel,
    BiomarkerScores,
    ExerciseDiet,
    ExerciseDietScores,
    Lifestyle,
    RiskHistory,
    RiskHistoryResult,
    SleepStress,
    SleepStressScores,
)
from .tables import DEFAULT_TABLES, ScoringTables


def round_to(value: float, decimals: int) -> float:
    """Round half up on the binary float value; ties go toward +inf (-1.25 -> -1.2)."""
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


# --- M2: age, gender, BMI, waist-to-height ---

def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    return round_to(weight_kg / (height_cm ** 2) * 10000.0, 1)


def calculate_wthr(waist_cm: float, height_cm: float) -> float:
    # 0.393 converts height to inches; kept as the questionnaire defines it
    return round_to(waist_cm / (height_cm * 0.393), 2)


def _is_male_band(gender: str) -> bool:
    return gender in ("male", "other")


def score_age(age: int, gender: str) -> int:
    if _is_male_band(gender):
        return 0 if age < 20 else 4 if age > 45 else 2
    if gender == "female":
        return 0 if age < 30 else 4 if age > 55 else 2
    return 0


def score_gender(gender: str) -> int:
    return 1 if _is_male_band(gender) else 0


def score_bmi(bmi: float, gender: str) -> int:
    if _is_male_band(gender):
        return -1 if bmi < 22.5 else 4 if bmi > 25.5 else 2
    if gender == "female":
        return -1 if bmi < 23.5 else 4 if bmi > 26.5 else 2
    return 0


def score_wthr(wthr: float) -> int:
    return -1 if wthr < 0.47 else 4 if wthr > 0.52 else 2


def score_basic_info(info: BasicInfo) -> BasicInfoScores:
    bmi = calculate_bmi(info.weight_kg, info.height_cm)
    wthr = calculate_wthr(info.waist_cm, info.height_cm)
    return BasicInfoScores(
        bmi=bmi,
        wthr=wthr,
        age_score=score_age(info.age, info.gender),
        gender_score=score_gender(info.gender),
        bmi_score=score_bmi(bmi, info.gender),
        wthr_score=score_wthr(wthr),
    )


# --- M3: risk history ---

def score_risk_history(history: RiskHistory, tables: ScoringTables = DEFAULT_TABLES) -> RiskHistoryResult:
    score = sum(weight for key, _, weight in tables.risk_history_options if getattr(history, key))

    # The free-text scan runs after scoring: it can raise a stored flag but
    # never changes the score computed from the structured answers.
    has_hypertension = history.q3
    has_diabetes = history.q4
    if re.search(tables.hypertension_pattern, history.other_conditions, re.IGNORECASE):
        has_hypertension = True
    if re.search(tables.diabetes_pattern, history.other_conditions, re.IGNORECASE):
        has_diabetes = True

    return RiskHistoryResult(score=score, has_hypertension=has_hypertension, has_diabetes=has_diabetes)


# --- M4 / M5 / M6: categorical tables ---

def score_lifestyle(lifestyle: Lifestyle, tables: ScoringTables = DEFAULT_TABLES) -> float:
    return tables.smoking[lifestyle.smoking] + tables.alcohol[lifestyle.alcohol]


def score_exercise_diet(answers: ExerciseDiet, tables: ScoringTables = DEFAULT_TABLES) -> ExerciseDietScores:
    foods = tables.food_frequency
    return ExerciseDietScores(
        exercise_score=tables.exercise[answers.min_exercise_per_week],
        foods_score=foods[answers.fruits_veg] + foods[answers.processed_food] + foods[answers.high_fiber],
    )


def score_sleep_stress(answers: SleepStress, tables: ScoringTables = DEFAULT_TABLES) -> SleepStressScores:
    stress = tables.stress_frequency
    stress_avg = (
        stress[answers.problems_overwhelming]
        + stress[answers.enjoyable]
        + stress[answers.felt_nervous]
    ) / 3
    return SleepStressScores(sleep_score=tables.sleep[answers.sleep_hours], stress_score=stress_avg)


# --- M7: biomarker bands ---

def score_o2_sat(value_pct: float) -> int:
    if value_pct > 95:
        return 0
    if value_pct >= 93:
        return 4
    if value_pct >= 91:
        return 6
    return 10


def score_pulse(hr: float) -> int:
    return 4 if hr < 65 or hr > 95 else 0


def score_bp_upper(val: float) -> int:
    if val < 100:
        return 2
    if val <= 124:
        return 0
    if val <= 139:
        return 3
    if val <= 160:
        return 6
    return 8


def score_bp_lower(val: float) -> int:
    if val < 70:
        return 2
    if val <= 84:
        return 0
    if val <= 99:
        return 3
    if val <= 110:
        return 6
    return 8


def score_bs_f(val: float) -> int:
    if val < 80:
        return 2
    if val <= 100:
        return 0
    if val <= 130:
        return 2
    if val <= 160:
        return 6
    return 8


def score_bs_am(val: float) -> int:
    if val < 110:
        return 2
    if val <= 140:
        return 0
    if val <= 190:
        return 2
    if val <= 240:
        return 6
    return 8


def score_a1c(val: float) -> int:
    return 0 if val < 5.8 else 4 if val <= 8.6 else 8


def score_hdl(val: float) -> int:
    return 4 if val < 50 else -1 if val > 60 else 2


def score_ldl(val: float) -> int:
    return 0 if val < 71 else 4 if val > 139 else 2


def score_trig(val: float) -> int:
    return 0 if val < 131 else 4 if val > 159 else 2


def score_hscrp(val: float) -> int:
    return 0 if val < 1 else 2 if val <= 3 else 4


def score_trig_hdl_ratio(val: float) -> int:
    return 0 if val < 2.5 else 8 if val > 4.0 else 3


def score_biomarkers(panel: BiomarkerPanel) -> BiomarkerScores:
    return BiomarkerScores(
        o2_sat=score_o2_sat(panel.o2_sat),
        pulse=score_pulse(panel.pulse),
        bp=(score_bp_upper(panel.bp_upper) + score_bp_lower(panel.bp_lower)) / 2,
        glucose=(score_bs_f(panel.bs_f) + score_bs_am(panel.bs_am) + score_a1c(panel.A1C)) / 3,
        HDL=score_hdl(panel.HDL),
        LDL=score_ldl(panel.LDL),
        Trig=score_trig(panel.Trig),
        HsCRP=score_hscrp(panel.HsCRP),
        trig_hdl_ratio=score_trig_hdl_ratio(panel.trig_hdl_ratio),
    )
