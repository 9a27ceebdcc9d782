"""Dashboard metrics derived from a stored onboarding record.

All functions take the serialized record (``m2_data`` .. ``m7_data``,
``derived_metrics``, ``scores``) and are side-effect free. Biomarker values
may be absent when the stored panel was imputed and is hidden from the user;
statuses then read "unknown".
"""

from typing import Any, Dict, List, Optional

from .engine import round_to
from .imputation import LOW_RISK_PROFILE
from .tables import DEFAULT_TABLES, ScoringTables

Record = Dict[str, Any]


def _traffic_light(difference_pct: float) -> str:
    if difference_pct < 5:
        return "green"
    if difference_pct < 15:
        return "orange"
    return "red"


def _range_status(value: Optional[float], low: float, high: float) -> str:
    if value is None:
        return "unknown"
    if value < low:
        return "orange"
    if value <= high:
        return "green"
    return "red"


def target_weight(height_cm: float, gender: str) -> float:
    height_in = (height_cm - 152.4) / 2.4
    if gender == "male":
        return 52 + 1.9 * height_in
    return 50 + 1.7 * height_in


def calculate_time_to_target(record: Record) -> int:
    """Months to reach target: slowest of weight, systolic BP and post-meal glucose, plus one."""
    m2 = record["m2_data"]
    m7 = record.get("m7_data") or {}
    bp_upper = m7.get("bp_upper")
    if bp_upper is None:
        bp_upper = LOW_RISK_PROFILE["bp_upper"]
    bs_am = m7.get("bs_am")
    if bs_am is None:
        bs_am = LOW_RISK_PROFILE["bs_am"]

    weight_diff = abs(m2["weight_kg"] - target_weight(m2["height_cm"], m2["gender"])) / 1.2
    bp_diff = abs(bp_upper - 120) / 2
    bs_diff = abs(bs_am - 160) / 10
    return int(round_to(max(weight_diff, bp_diff, bs_diff) + 1, 0))


def calculate_metabolic_age(record: Record) -> Dict[str, int]:
    age = record["m2_data"]["age"]
    cuore_score = record["scores"]["cuore_score"]

    multiplier = 1.2
    if cuore_score >= 75:
        multiplier = 0.95
    elif 50 < cuore_score < 75:
        multiplier = 1.1

    metabolic_age = age * multiplier
    return {
        "metabolic_age": int(round_to(metabolic_age, 0)),
        "gap": int(round_to(metabolic_age - age, 0)),
    }


def calculate_weight_metrics(record: Record) -> Dict[str, Any]:
    m2 = record["m2_data"]
    target = target_weight(m2["height_cm"], m2["gender"])
    difference = (m2["weight_kg"] - target) / target * 100
    return {
        "current": m2["weight_kg"],
        "target": round_to(target, 1),
        "difference": round_to(difference, 1),
        "status": _traffic_light(difference),
    }


def calculate_bmi_metrics(record: Record) -> Dict[str, Any]:
    bmi = record["derived_metrics"]["bmi"]
    target = 22.5 if record["m2_data"]["gender"] == "male" else 23.5
    difference = (bmi - target) / target * 100
    return {
        "current": bmi,
        "target": target,
        "difference": round_to(difference, 1),
        "status": _traffic_light(difference),
    }


def calculate_lifestyle_score(record: Record, tables: ScoringTables = DEFAULT_TABLES) -> Dict[str, Any]:
    m5 = record["m5_data"]
    m6 = record["m6_data"]
    foods = tables.food_frequency
    stress = tables.stress_frequency

    food_score = (foods[m5["fruits_veg"]] + foods[m5["processed_food"]] + foods[m5["high_fiber"]]) / 3
    exercise_score = tables.exercise[m5["min_exercise_per_week"]]
    sleep_score = tables.sleep[m6["sleep_hours"]]
    stress_score = (stress[m6["problems_overwhelming"]] + stress[m6["enjoyable"]] + stress[m6["felt_nervous"]]) / 3

    lifestyle = (
        (100 - food_score * 12)
        + (100 - exercise_score * 12)
        + (100 - sleep_score * 12)
        + (100 - stress_score * 12)
    ) / 4

    if lifestyle > 70:
        status = "green"
    elif lifestyle > 55:
        status = "orange"
    else:
        status = "red"
    return {"score": int(round_to(lifestyle, 0)), "status": status}


def calculate_recommended_calories(record: Record) -> int:
    m2 = record["m2_data"]
    bmi = record["derived_metrics"]["bmi"]
    age, weight, height = m2["age"], m2["weight_kg"], m2["height_cm"]

    if m2["gender"] == "male":
        calories = 66.47 + 13.75 * weight + 5 * height - 6.75 * age
    else:
        calories = 665.1 + 9.563 * weight + 1.85 * height - 4.67 * age

    if bmi < 21:
        calories *= 1.15
    elif bmi > 24:
        calories *= 0.8

    return int(round_to(calories / 100, 0)) * 100


RECOMMENDED_EXERCISE_MINUTES = {
    "Less than 75 min": 15,
    "75 to 150 min": 30,
    "More than 150 min": 45,
}


def calculate_recommended_exercise(m5_data: Dict[str, Any]) -> int:
    return RECOMMENDED_EXERCISE_MINUTES.get(m5_data.get("min_exercise_per_week"), 15)


def calculate_bp_status(record: Record) -> Dict[str, Any]:
    m7 = record.get("m7_data") or {}
    bp_upper = m7.get("bp_upper")
    bp_lower = m7.get("bp_lower")
    return {
        "upper": {"current": bp_upper, "target": 120, "status": _range_status(bp_upper, 100, 130)},
        "lower": {"current": bp_lower, "target": 80, "status": _range_status(bp_lower, 64, 82)},
    }


def calculate_blood_sugar(record: Record) -> Dict[str, Any]:
    m7 = record.get("m7_data") or {}
    has_diabetes = bool((record.get("m3_data") or {}).get("has_diabetes"))

    fasting_high = 130 if has_diabetes else 100
    after_meal_high = 180 if has_diabetes else 140
    return {
        "fasting": {
            "value": m7.get("bs_f"),
            "target": fasting_high,
            "status": _range_status(m7.get("bs_f"), 70, fasting_high),
        },
        "after_meal": {
            "value": m7.get("bs_am"),
            "target": after_meal_high,
            "status": _range_status(m7.get("bs_am"), 90, after_meal_high),
        },
        "A1C": {
            "value": m7.get("A1C"),
            "target": 5.6,
            "status": _range_status(m7.get("A1C"), 4.5, 5.6),
        },
    }


def calculate_trig_hdl_ratio(record: Record) -> Dict[str, Any]:
    m7 = record.get("m7_data") or {}
    trig = m7.get("Trig")
    hdl = m7.get("HDL")
    if trig is None or hdl is None or hdl == 0:
        return {"current": None, "target": 2.6, "status": "unknown"}

    ratio = round_to(trig / hdl, 1)
    if ratio > 4.0:
        status = "red"
    elif ratio >= 2.8:
        status = "orange"
    else:
        status = "green"
    return {"current": ratio, "target": 2.6, "status": status}


def calculate_body_fat(record: Record) -> Dict[str, Any]:
    m2 = record["m2_data"]
    bmi = record["derived_metrics"]["bmi"]
    if m2["gender"] == "male":
        body_fat = 1.2 * bmi + 0.23 * m2["age"] - 16.2
        target = 23
    else:
        body_fat = 1.2 * bmi + 0.23 * m2["age"] - 5.4
        target = 30
    difference = (body_fat - target) / target * 100
    return {
        "current": round_to(body_fat, 1),
        "target": target,
        "difference": round_to(difference, 1),
        "status": _traffic_light(difference),
    }


def calculate_main_focus(record: Record, tables: ScoringTables = DEFAULT_TABLES) -> List[str]:
    """The two habit areas carrying the most risk points."""
    m4, m5, m6 = record["m4_data"], record["m5_data"], record["m6_data"]
    foods = tables.food_frequency
    stress = tables.stress_frequency
    candidates = [
        ("Tobacco Cessation", tables.smoking[m4["smoking"]]),
        ("Nutrition", (foods[m5["fruits_veg"]] + foods[m5["processed_food"]] + foods[m5["high_fiber"]]) / 3),
        ("Fitness", tables.exercise[m5["min_exercise_per_week"]]),
        ("Sleep", tables.sleep[m6["sleep_hours"]]),
        ("Meditation", (stress[m6["problems_overwhelming"]] + stress[m6["enjoyable"]] + stress[m6["felt_nervous"]]) / 3),
    ]
    ranked = sorted(candidates, key=lambda item: item[1], reverse=True)
    return [name for name, _ in ranked[:2]]


def calculate_all_metrics(record: Record, tables: ScoringTables = DEFAULT_TABLES) -> Dict[str, Any]:
    return {
        "age": record["m2_data"]["age"],
        "cuore_score": record["scores"]["cuore_score"],
        "time_to_target": calculate_time_to_target(record),
        "metabolic_age": calculate_metabolic_age(record),
        "weight": calculate_weight_metrics(record),
        "bmi": calculate_bmi_metrics(record),
        "lifestyle": calculate_lifestyle_score(record, tables),
        "recommended_calories": calculate_recommended_calories(record),
        "recommended_exercise": calculate_recommended_exercise(record["m5_data"]),
        "bp_status": calculate_bp_status(record),
        "blood_sugar": calculate_blood_sugar(record),
        "trig_hdl_ratio": calculate_trig_hdl_ratio(record),
        "body_fat": calculate_body_fat(record),
        "main_focus": calculate_main_focus(record, tables),
    }
