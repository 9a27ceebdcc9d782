"""Lookup tables for the categorical questionnaire answers.

Tables are read-only mappings bundled in a frozen ``ScoringTables`` value so
a scorer can be handed an alternative set (e.g. in tests) without touching
module globals.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple


def _frozen(mapping: dict) -> Mapping[str, float]:
    return MappingProxyType(dict(mapping))


SMOKING_SCORES = _frozen({
    "Never": 0,
    "Quit >6 months ago": 2,
    "Occasionally": 6,
    "Daily": 10,
})

ALCOHOL_SCORES = _frozen({
    "Never": 0,
    "Quit >6 months ago": 2,
    "1-2 drinks occasionally": 4,
    "2 or more drinks at least twice per week": 8,
})

EXERCISE_SCORES = _frozen({
    "Less than 75 min": 8,
    "75 to 150 min": 3,
    "More than 150 min": -1,
})

# Shared by fruits_veg, processed_food and high_fiber
FOOD_FREQUENCY_SCORES = _frozen({
    "Rarely": 8,
    "Sometimes": 6,
    "Often": 2,
    "Daily": 0,
})

SLEEP_SCORES = _frozen({
    "Less than 6 hours": 8,
    "Between 6 to 7 hours": 4,
    "Between 7 to 8 hours": 0,
    "Between 8 to 9 hours": 1,
    "More than 9 hours": 4,
})

# Shared by problems_overwhelming, enjoyable and felt_nervous
STRESS_FREQUENCY_SCORES = _frozen({
    "Never": 0,
    "Sometimes": 3,
    "Often": 6,
    "Always": 8,
})

# Risk-history option texts, in q1..q6 order, with their weights
RISK_HISTORY_OPTIONS: Tuple[Tuple[str, str, int], ...] = (
    ("q1", "One of my parents was diagnosed with diabetes before the age of 60", 2),
    ("q2", "One of my parents had a heart attack before the age of 60", 2),
    ("q3", "I have Hypertension (High blood pressure)", 4),
    ("q4", "I have Diabetes (High blood sugar)", 6),
    ("q5", "I feel short of breath or experience chest discomfort even during mild activity or at rest", 8),
    ("q6", "I've noticed an increase in hunger, thirst, or the need to urinate frequently", 4),
)

# Case-insensitive synonyms scanned in the free-text "other conditions" answer
HYPERTENSION_PATTERN = r"hypertension|htn|high\sblood\spressure|bp"
DIABETES_PATTERN = r"diabetes|dm|high\sblood\ssugar|sugar"


@dataclass(frozen=True)
class ScoringTables:
    smoking: Mapping[str, float] = field(default_factory=lambda: SMOKING_SCORES)
    alcohol: Mapping[str, float] = field(default_factory=lambda: ALCOHOL_SCORES)
    exercise: Mapping[str, float] = field(default_factory=lambda: EXERCISE_SCORES)
    food_frequency: Mapping[str, float] = field(default_factory=lambda: FOOD_FREQUENCY_SCORES)
    sleep: Mapping[str, float] = field(default_factory=lambda: SLEEP_SCORES)
    stress_frequency: Mapping[str, float] = field(default_factory=lambda: STRESS_FREQUENCY_SCORES)
    risk_history_options: Tuple[Tuple[str, str, int], ...] = RISK_HISTORY_OPTIONS
    hypertension_pattern: str = HYPERTENSION_PATTERN
    diabetes_pattern: str = DIABETES_PATTERN
    # Normalization denominator of the composite score
    max_total: float = 132.0
    composite_floor: float = 5.0
    composite_ceiling: float = 95.0


DEFAULT_TABLES = ScoringTables()
