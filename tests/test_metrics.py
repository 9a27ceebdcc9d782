import pytest

from cuore.onboarding_scoring import metrics
from cuore.onboarding_scoring.services import OnboardingSubmissionService


@pytest.fixture
def record(db, clock, payload_with_biomarkers):
    values, _ = OnboardingSubmissionService(db, clock=clock).build_record(payload_with_biomarkers)
    return values


def test_all_metrics_keys(record):
    result = metrics.calculate_all_metrics(record)
    assert set(result) == {
        "age", "cuore_score", "time_to_target", "metabolic_age", "weight", "bmi", "lifestyle",
        "recommended_calories", "recommended_exercise", "bp_status", "blood_sugar",
        "trig_hdl_ratio", "body_fat", "main_focus",
    }
    assert result["age"] == 40
    assert result["cuore_score"] == 77.7


def test_time_to_target(record):
    # Post-meal glucose 130 is furthest from target: 30 / 10 + 1
    assert metrics.calculate_time_to_target(record) == 4


def test_metabolic_age_for_good_score(record):
    assert metrics.calculate_metabolic_age(record) == {"metabolic_age": 38, "gap": -2}


def test_metabolic_age_for_poor_score(record):
    record["scores"]["cuore_score"] = 40.0
    assert metrics.calculate_metabolic_age(record) == {"metabolic_age": 48, "gap": 8}


def test_weight_and_bmi(record):
    weight = metrics.calculate_weight_metrics(record)
    assert weight["target"] == 69.9
    assert weight["status"] == "green"

    bmi = metrics.calculate_bmi_metrics(record)
    assert bmi == {"current": 22.9, "target": 22.5, "difference": 1.8, "status": "green"}


def test_lifestyle_score(record):
    assert metrics.calculate_lifestyle_score(record) == {"score": 72, "status": "green"}


def test_recommendations(record):
    assert metrics.calculate_recommended_calories(record) == 1600
    assert metrics.calculate_recommended_exercise(record["m5_data"]) == 30
    assert metrics.calculate_recommended_exercise({}) == 15


def test_supplied_biomarker_statuses(record):
    bp = metrics.calculate_bp_status(record)
    assert bp["upper"]["status"] == "green"
    assert bp["lower"]["status"] == "green"

    sugar = metrics.calculate_blood_sugar(record)
    assert sugar["fasting"]["status"] == "green"
    assert sugar["after_meal"]["status"] == "green"
    assert sugar["A1C"]["value"] == 5.49

    assert metrics.calculate_trig_hdl_ratio(record) == {"current": 2.2, "target": 2.6, "status": "green"}


def test_diabetic_targets_are_relaxed(record):
    record["m3_data"]["has_diabetes"] = True
    sugar = metrics.calculate_blood_sugar(record)
    assert sugar["fasting"]["target"] == 130
    assert sugar["after_meal"]["target"] == 180


def test_body_fat(record):
    assert metrics.calculate_body_fat(record) == {"current": 20.5, "target": 23, "difference": -11.0, "status": "green"}


def test_main_focus_picks_two_highest_risk_habits(record):
    assert metrics.calculate_main_focus(record) == ["Nutrition", "Fitness"]

    record["m4_data"]["smoking"] = "Daily"
    assert metrics.calculate_main_focus(record)[0] == "Tobacco Cessation"
