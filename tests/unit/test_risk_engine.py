"""
Unit Tests for Inference Module

Tests for risk scoring, clamping and urgency classification.
"""
import pytest

from wellnessai.core import catalog
from wellnessai.core.intake import AssessmentInput, ProfileRequiredError, Vitals
from wellnessai.core.inference import (
    RiskEngine, RiskScore, UrgencyTier, classify, compute_risk_score
)
from wellnessai.core.inference.risk_engine import (
    TIER_REASONING, heart_rate_status, is_blood_pressure_elevated, is_spo2_low
)
from tests.conftest import make_profile


@pytest.fixture
def engine() -> RiskEngine:
    return RiskEngine()


class TestUrgencyTier:
    """Tests for UrgencyTier enum."""

    def test_from_score_low(self):
        assert UrgencyTier.from_score(0) == UrgencyTier.LOW
        assert UrgencyTier.from_score(3) == UrgencyTier.LOW

    def test_from_score_moderate(self):
        assert UrgencyTier.from_score(4) == UrgencyTier.MODERATE
        assert UrgencyTier.from_score(6) == UrgencyTier.MODERATE

    def test_from_score_urgent(self):
        assert UrgencyTier.from_score(7) == UrgencyTier.URGENT
        assert UrgencyTier.from_score(10) == UrgencyTier.URGENT


class TestClassify:
    """Tests for classify()."""

    def test_reasoning_texts(self):
        assert classify(8).reasoning == (
            "High-risk symptoms and factors present; immediate specialist consultation recommended."
        )
        assert classify(5).reasoning == (
            "Several risk factors identified; consultation within 2–4 weeks recommended."
        )
        assert classify(1).reasoning == "Routine follow-up recommended."

    def test_pure_function_of_score(self):
        """Same score always gives the same classification."""
        for score in range(0, 11):
            assert classify(score) == classify(score)
            assert classify(score).reasoning == TIER_REASONING[classify(score).tier]

    def test_engine_delegates(self, engine):
        assert engine.classify(7) == classify(7)

    def test_to_dict(self):
        data = classify(9).to_dict()
        assert data["tier"] == "URGENT"
        assert "24 hours" in data["action"]


class TestWorkedExamples:
    """The three reference patients."""

    def test_urgent_example(self, engine, urgent_profile, urgent_assessment):
        """70y, BMI 32, two high-risk symptoms, two factors, bad vitals: 16 capped to 10."""
        risk = engine.compute_risk(urgent_profile, urgent_assessment)

        assert risk.raw_total == 16
        assert risk.score == 10
        assert classify(risk.score).tier == UrgencyTier.URGENT

    def test_healthy_example(self, engine, healthy_profile, healthy_assessment):
        risk = engine.compute_risk(healthy_profile, healthy_assessment)

        assert risk.score == 0
        assert risk.contributions == ()
        assert classify(risk.score).tier == UrgencyTier.LOW

    def test_borderline_example(self, engine, borderline_profile, borderline_assessment):
        """55y and BMI 27 score one point each; Fatigue and Stress carry no points."""
        risk = engine.compute_risk(borderline_profile, borderline_assessment)

        assert risk.score == 2
        assert risk.points_for("age") == 1
        assert risk.points_for("bmi") == 1
        assert risk.points_for("symptom") == 0
        assert classify(risk.score).tier == UrgencyTier.LOW

    def test_breakdown_order_and_labels(self, engine, urgent_profile, urgent_assessment):
        risk = engine.compute_risk(urgent_profile, urgent_assessment)

        assert [c.rule for c in risk.contributions] == [
            "age", "bmi", "symptom", "symptom", "risk_factor", "risk_factor",
            "blood_pressure", "heart_rate", "spo2",
        ]
        labels = [c.label for c in risk.contributions]
        assert labels[0] == "Age 70 (over 65)"
        assert labels[1] == "BMI 32.0 (over 30)"
        assert "High-risk symptom: Chest Pain" in labels
        assert "Elevated blood pressure (150/95 mmHg)" in labels
        assert "Abnormal heart rate (110 BPM, tachycardia)" in labels
        assert "Low oxygen saturation (92%)" in labels

    def test_functional_entry_point(self, urgent_profile, urgent_assessment):
        risk = compute_risk_score(urgent_profile, urgent_assessment)
        assert isinstance(risk, RiskScore)
        assert risk.score == 10


class TestScoringRules:
    """Tests for individual rules and thresholds."""

    def test_age_thresholds_are_strict(self, engine):
        empty = AssessmentInput()
        assert engine.compute_risk(make_profile(age=50), empty).points_for("age") == 0
        assert engine.compute_risk(make_profile(age=51), empty).points_for("age") == 1
        assert engine.compute_risk(make_profile(age=65), empty).points_for("age") == 1
        assert engine.compute_risk(make_profile(age=66), empty).points_for("age") == 2

    def test_bmi_thresholds_are_strict(self, engine):
        empty = AssessmentInput()
        assert engine.compute_risk(make_profile(weight_kg=72.25), empty).points_for("bmi") == 0  # 25.0
        assert engine.compute_risk(make_profile(weight_kg=86.7), empty).points_for("bmi") == 1  # 30.0
        assert engine.compute_risk(make_profile(weight_kg=90.0), empty).points_for("bmi") == 2  # 31.1

    def test_each_high_risk_symptom_scores_two(self, engine):
        profile = make_profile()
        for symptom in catalog.HIGH_RISK_SYMPTOM_POINTS:
            risk = engine.compute_risk(profile, AssessmentInput(symptoms={symptom}))
            assert risk.score == 2

    def test_other_symptoms_score_nothing(self, engine):
        others = set(catalog.SYMPTOM_CATALOG) - set(catalog.HIGH_RISK_SYMPTOM_POINTS)
        risk = engine.compute_risk(make_profile(), AssessmentInput(symptoms=others))
        assert risk.score == 0

    def test_critical_risk_factors(self, engine):
        risk = engine.compute_risk(
            make_profile(),
            AssessmentInput(risk_factors=set(catalog.RISK_FACTOR_CATALOG)),
        )
        assert risk.points_for("risk_factor") == 4

    def test_diastolic_alone_elevates_bp(self, engine):
        risk = engine.compute_risk(make_profile(), AssessmentInput(vitals=Vitals(diastolic_bp=95)))
        assert risk.points_for("blood_pressure") == 2

    def test_bp_boundaries(self):
        assert not is_blood_pressure_elevated(Vitals(systolic_bp=140, diastolic_bp=90))
        assert is_blood_pressure_elevated(Vitals(systolic_bp=141, diastolic_bp=80))

    def test_heart_rate_status(self):
        assert heart_rate_status(Vitals(heart_rate=101)) == "tachycardia"
        assert heart_rate_status(Vitals(heart_rate=59)) == "bradycardia"
        assert heart_rate_status(Vitals(heart_rate=60)) == "normal"
        assert heart_rate_status(Vitals(heart_rate=100)) == "normal"
        assert heart_rate_status(Vitals()) is None

    def test_spo2_boundary(self):
        assert is_spo2_low(Vitals(spo2=94))
        assert not is_spo2_low(Vitals(spo2=95))

    def test_bradycardia_scores(self, engine):
        risk = engine.compute_risk(make_profile(), AssessmentInput(vitals=Vitals(heart_rate=48)))
        assert risk.points_for("heart_rate") == 1


class TestMissingVitals:
    """Unrecorded vitals never score; recorded zeros are taken as entered."""

    def test_unrecorded_vitals_score_nothing(self, engine):
        risk = engine.compute_risk(make_profile(), AssessmentInput(vitals=Vitals()))
        assert risk.score == 0

    def test_literal_zero_is_scored(self, engine):
        risk = engine.compute_risk(make_profile(), AssessmentInput(vitals=Vitals(heart_rate=0, spo2=0)))
        assert risk.points_for("heart_rate") == 1
        assert risk.points_for("spo2") == 3

    def test_malformed_form_values(self, engine):
        """Non-numeric form input is coerced to unset and does not score."""
        vitals = Vitals.from_raw({"heart_rate": "n/a", "spo2": "", "systolic_bp": "abc"})
        risk = engine.compute_risk(make_profile(), AssessmentInput(vitals=vitals))
        assert risk.score == 0


class TestBoundsAndMonotonicity:
    """Score range and monotonicity."""

    def test_score_clamped(self, engine):
        worst = AssessmentInput(
            symptoms=set(catalog.SYMPTOM_CATALOG),
            risk_factors=set(catalog.RISK_FACTOR_CATALOG),
            vitals=Vitals(systolic_bp=200, diastolic_bp=120, heart_rate=150, spo2=80),
        )
        risk = engine.compute_risk(make_profile(age=90, weight_kg=120), worst)

        assert risk.raw_total > catalog.MAX_RISK_SCORE
        assert risk.score == catalog.MAX_RISK_SCORE

    def test_adding_inputs_never_lowers_score(self, engine):
        profile = make_profile(age=45)
        symptoms, factors = set(), set()
        previous = engine.compute_risk(profile, AssessmentInput()).score

        for symptom in catalog.SYMPTOM_CATALOG:
            symptoms.add(symptom)
            score = engine.compute_risk(profile, AssessmentInput(symptoms=symptoms)).score
            assert score >= previous
            previous = score

        for factor in catalog.RISK_FACTOR_CATALOG:
            factors.add(factor)
            score = engine.compute_risk(
                profile, AssessmentInput(symptoms=symptoms, risk_factors=factors)
            ).score
            assert score >= previous
            previous = score

    def test_age_and_weight_monotone(self, engine):
        empty = AssessmentInput()
        by_age = [engine.compute_risk(make_profile(age=a), empty).score for a in range(0, 100, 5)]
        by_weight = [engine.compute_risk(make_profile(weight_kg=w), empty).score for w in range(50, 130, 5)]

        assert by_age == sorted(by_age)
        assert by_weight == sorted(by_weight)

    def test_systolic_monotone(self, engine):
        scores = [
            engine.compute_risk(make_profile(), AssessmentInput(vitals=Vitals(systolic_bp=s))).score
            for s in range(90, 200, 10)
        ]
        assert scores == sorted(scores)


class TestPrecondition:
    """Tests for the profile-required precondition."""

    def test_missing_profile_raises(self, engine, urgent_assessment):
        with pytest.raises(ProfileRequiredError, match="Please complete patient details first."):
            engine.compute_risk(None, urgent_assessment)

    def test_engine_is_stateless(self, engine, urgent_profile, urgent_assessment, healthy_profile, healthy_assessment):
        """Repeated and interleaved calls give identical results and leave no state behind."""
        first = engine.compute_risk(urgent_profile, urgent_assessment)
        engine.compute_risk(healthy_profile, healthy_assessment)
        second = engine.compute_risk(urgent_profile, urgent_assessment)

        assert first == second
        assert vars(engine) == {}
