"""
Shared fixtures: patient profiles and assessment inputs for the worked
examples.
"""
import pytest
from datetime import datetime

from wellnessai.core.intake import PatientProfile, AssessmentInput, Vitals


def make_profile(**overrides) -> PatientProfile:
    """Profile with sensible defaults (170 cm so BMI is easy to target)."""
    fields = dict(
        first_name="Jane",
        last_name="Doe",
        age=40,
        gender="female",
        height_cm=170.0,
        weight_kg=63.6,  # BMI 22.0
    )
    fields.update(overrides)
    return PatientProfile(**fields)


@pytest.fixture
def fixed_time() -> datetime:
    return datetime(2026, 3, 14, 9, 26, 53, 589793)


@pytest.fixture
def urgent_profile() -> PatientProfile:
    """70y, BMI 32.0."""
    return make_profile(first_name="Robert", last_name="Hale", age=70, gender="male", weight_kg=92.5)


@pytest.fixture
def urgent_assessment() -> AssessmentInput:
    return AssessmentInput(
        symptoms={"Chest Pain", "Palpitations"},
        risk_factors={"Diabetes", "Smoking"},
        vitals=Vitals(systolic_bp=150, diastolic_bp=95, heart_rate=110, spo2=92),
        additional_symptoms="Tightness when climbing stairs",
        family_history="Father had a heart attack at 58",
    )


@pytest.fixture
def healthy_profile() -> PatientProfile:
    """30y, BMI 22.0."""
    return make_profile(age=30)


@pytest.fixture
def healthy_assessment() -> AssessmentInput:
    return AssessmentInput(vitals=Vitals(systolic_bp=118, diastolic_bp=76, heart_rate=70, spo2=98))


@pytest.fixture
def borderline_profile() -> PatientProfile:
    """55y, BMI 27.0."""
    return make_profile(age=55, weight_kg=78.0)


@pytest.fixture
def borderline_assessment() -> AssessmentInput:
    return AssessmentInput(
        symptoms={"Fatigue"},
        risk_factors={"Stress"},
        vitals=Vitals(systolic_bp=130, diastolic_bp=85, heart_rate=65, spo2=97),
    )
