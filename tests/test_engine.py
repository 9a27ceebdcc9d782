from types import MappingProxyType

import pytest

from cuore.onboarding_scoring.domain import BasicInfo, BiomarkerPanel, Lifestyle, RiskHistory
from cuore.onboarding_scoring.engine import (
    calculate_bmi,
    calculate_wthr,
    round_to,
    score_age,
    score_basic_info,
    score_biomarkers,
    score_a1c,
    score_bmi,
    score_bp_lower,
    score_bp_upper,
    score_bs_am,
    score_bs_f,
    score_hdl,
    score_hscrp,
    score_ldl,
    score_pulse,
    score_trig,
    score_trig_hdl_ratio,
    score_wthr,
    score_gender,
    score_lifestyle,
    score_o2_sat,
    score_risk_history,
    score_sleep_stress,
    score_exercise_diet,
)
from cuore.onboarding_scoring.tables import DEFAULT_TABLES, ScoringTables
from cuore.onboarding_scoring.validators import validate_exercise_diet, validate_sleep_stress

from .conftest import VALID_PAYLOAD


@pytest.mark.parametrize(
    "value,decimals,expected",
    [(2.25, 1, 2.3), (0.125, 2, 0.13), (5.2, 0, 5.0), (-1.25, 1, -1.2), (1.005, 2, 1.0), (65.0253, 1, 65.0)],
)
def test_round_half_up(value, decimals, expected):
    assert round_to(value, decimals) == expected


def test_bmi_and_wthr():
    assert calculate_bmi(70, 175) == 22.9
    assert calculate_wthr(34, 175) == 0.49
    # Deterministic for identical inputs
    assert calculate_bmi(70, 175) == calculate_bmi(70.0, 175.0)


@pytest.mark.parametrize(
    "age,gender,expected",
    [
        (19, "male", 0), (20, "male", 2), (45, "male", 2), (46, "male", 4),
        (29, "female", 0), (30, "female", 2), (55, "female", 2), (56, "female", 4),
        (46, "other", 4),
    ],
)
def test_age_band_edges(age, gender, expected):
    assert score_age(age, gender) == expected


def test_gender_score():
    assert score_gender("male") == 1
    assert score_gender("other") == 1
    assert score_gender("female") == 0


def test_basic_info_scores():
    scores = score_basic_info(BasicInfo(age=40, gender="male", height_cm=175, weight_kg=70, waist_cm=34))
    assert (scores.age_score, scores.gender_score, scores.bmi_score, scores.wthr_score) == (2, 1, 2, 2)
    assert scores.bmi == 22.9

    low = score_basic_info(BasicInfo(age=25, gender="female", height_cm=170, weight_kg=50, waist_cm=25))
    assert (low.age_score, low.gender_score, low.bmi_score, low.wthr_score) == (0, 0, -1, -1)


class TestRiskHistory:
    def test_weights_are_summed(self):
        history = RiskHistory(q1=True, q2=False, q3=True, q4=False, q5=True, q6=True)
        assert score_risk_history(history).score == 2 + 4 + 8 + 4

    def test_all_options(self):
        history = RiskHistory(q1=True, q2=True, q3=True, q4=True, q5=True, q6=True)
        assert score_risk_history(history).score == 26

    def test_structured_answers_set_flags(self):
        result = score_risk_history(RiskHistory(q1=False, q2=False, q3=True, q4=True, q5=False, q6=False))
        assert result.has_hypertension
        assert result.has_diabetes

    @pytest.mark.parametrize(
        "text,hypertension,diabetes",
        [
            ("Doctor says my BP is high", True, False),
            ("borderline high blood pressure", True, False),
            ("Type 2 Diabetes", False, True),
            ("my sugar levels are up", False, True),
            ("asthma", False, False),
        ],
    )
    def test_free_text_raises_flags_without_scoring(self, text, hypertension, diabetes):
        history = RiskHistory(q1=False, q2=False, q3=False, q4=False, q5=False, q6=False, other_conditions=text)
        result = score_risk_history(history)
        assert result.score == 0
        assert result.has_hypertension is hypertension
        assert result.has_diabetes is diabetes


def test_lifestyle_uses_injected_tables():
    lifestyle = Lifestyle(smoking="Daily", alcohol="Never")
    assert score_lifestyle(lifestyle) == 10

    custom = ScoringTables(smoking=MappingProxyType({"Never": 0, "Daily": 20}))
    assert score_lifestyle(lifestyle, custom) == 20
    assert DEFAULT_TABLES.smoking["Daily"] == 10


def test_exercise_diet_and_sleep_stress():
    m5 = score_exercise_diet(validate_exercise_diet(VALID_PAYLOAD["m5"]))
    assert (m5.exercise_score, m5.foods_score, m5.total) == (3, 10, 13)

    m6 = score_sleep_stress(validate_sleep_stress(VALID_PAYLOAD["m6"]))
    assert m6.sleep_score == 0
    assert m6.stress_score == 3.0
    assert m6.total == 3.0


@pytest.mark.parametrize("value,expected", [(96, 0), (95, 4), (93, 4), (92, 6), (91, 6), (90, 10)])
def test_o2_saturation_bands(value, expected):
    assert score_o2_sat(value) == expected


@pytest.mark.parametrize("value,expected", [(99, 2), (124, 0), (139, 3), (160, 6), (161, 8)])
def test_systolic_bands(value, expected):
    assert score_bp_upper(value) == expected


def test_biomarker_scores_average_bp_and_glucose():
    panel = BiomarkerPanel(
        o2_sat=95, pulse=84, bp_upper=134, bp_lower=86, bs_f=120, bs_am=160,
        HDL=50, LDL=150, Trig=160, HsCRP=0.2, A1C=6.51, trig_hdl_ratio=3.2, imputed=True,
    )
    scores = score_biomarkers(panel)
    assert scores.bp == 3.0
    assert scores.glucose == pytest.approx(8 / 3)
    assert (scores.o2_sat, scores.pulse, scores.HDL, scores.LDL, scores.Trig, scores.HsCRP) == (4, 0, 2, 4, 4, 0)
    assert scores.trig_hdl_ratio == 3
    assert scores.total == pytest.approx(20 + 8 / 3)


@pytest.mark.parametrize(
    "bmi,gender,expected",
    [
        (22.4, "male", -1), (22.5, "male", 2), (25.5, "male", 2), (25.6, "male", 4),
        (22.4, "other", -1), (25.6, "other", 4),
        (23.4, "female", -1), (23.5, "female", 2), (26.5, "female", 2), (26.6, "female", 4),
    ],
)
def test_bmi_band_edges(bmi, gender, expected):
    assert score_bmi(bmi, gender) == expected


@pytest.mark.parametrize("value,expected", [(0.46, -1), (0.47, 2), (0.52, 2), (0.53, 4)])
def test_wthr_band_edges(value, expected):
    assert score_wthr(value) == expected


@pytest.mark.parametrize("value,expected", [(64, 4), (65, 0), (95, 0), (96, 4)])
def test_pulse_bands(value, expected):
    assert score_pulse(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [(69, 2), (70, 0), (84, 0), (85, 3), (99, 3), (100, 6), (110, 6), (111, 8)],
)
def test_diastolic_bands(value, expected):
    assert score_bp_lower(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [(79, 2), (80, 0), (100, 0), (101, 2), (130, 2), (131, 6), (160, 6), (161, 8)],
)
def test_fasting_glucose_bands(value, expected):
    assert score_bs_f(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [(109, 2), (110, 0), (140, 0), (141, 2), (190, 2), (191, 6), (240, 6), (241, 8)],
)
def test_post_meal_glucose_bands(value, expected):
    assert score_bs_am(value) == expected


@pytest.mark.parametrize("value,expected", [(5.7, 0), (5.8, 4), (8.6, 4), (8.7, 8)])
def test_a1c_bands(value, expected):
    assert score_a1c(value) == expected


@pytest.mark.parametrize("value,expected", [(49, 4), (50, 2), (60, 2), (61, -1)])
def test_hdl_bands(value, expected):
    assert score_hdl(value) == expected


@pytest.mark.parametrize("value,expected", [(70, 0), (71, 2), (139, 2), (140, 4)])
def test_ldl_bands(value, expected):
    assert score_ldl(value) == expected


@pytest.mark.parametrize("value,expected", [(130, 0), (131, 2), (159, 2), (160, 4)])
def test_triglyceride_bands(value, expected):
    assert score_trig(value) == expected


@pytest.mark.parametrize("value,expected", [(0.9, 0), (1, 2), (3, 2), (3.1, 4)])
def test_hscrp_bands(value, expected):
    assert score_hscrp(value) == expected


@pytest.mark.parametrize("value,expected", [(2.49, 0), (2.5, 3), (4.0, 3), (4.01, 8)])
def test_trig_hdl_ratio_bands(value, expected):
    assert score_trig_hdl_ratio(value) == expected
