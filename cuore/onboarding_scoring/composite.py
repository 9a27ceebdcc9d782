from .domain import ScoreSet
from .engine import round_to
from .tables import DEFAULT_TABLES, ScoringTables


def weighted_total(scores: ScoreSet) -> float:
    """Sum of all sub-score groups; age and gender enter as their mean.

    m5/m6/m7 already hold the exercise+foods, sleep+stress-average and
    biomarker totals (BP pair and glucose trio pre-averaged).
    """
    return (
        (scores.age_score + scores.gender_score) / 2
        + scores.bmi_score
        + scores.wthr_score
        + scores.m3_score
        + scores.m4_score
        + scores.m5_score
        + scores.m6_score
        + scores.m7_score
    )


def compose(scores: ScoreSet, tables: ScoringTables = DEFAULT_TABLES) -> float:
    """Normalize the weighted total into the Cuore Score, clamped and rounded to 1 decimal."""
    total = weighted_total(scores)
    raw = 100 - (total / tables.max_total * 100)
    clamped = min(max(raw, tables.composite_floor), tables.composite_ceiling)
    return round_to(clamped, 1)
