"""
Unit Tests for Report Synthesis

Tests for narrative sections, diagnostics, candidate conditions and
report identity.
"""
import re
from datetime import datetime

import pytest

from wellnessai.core import catalog
from wellnessai.core.intake import AssessmentInput, ProfileRequiredError, Vitals
from wellnessai.core.inference import RiskEngine, classify
from wellnessai.core.reports import Report, assess, synthesize
from wellnessai.core.reports.narrative import (
    age_bracket,
    bmi_category,
    build_vitals_interpretation,
    candidate_conditions,
    make_report_id,
    suggest_diagnostics,
)
from tests.conftest import make_profile


@pytest.fixture
def urgent_report(urgent_profile, urgent_assessment, fixed_time) -> Report:
    return assess(urgent_profile, urgent_assessment, generated_at=fixed_time)


def _section(report: Report, key: str):
    return next(s for s in report.sections if s.key == key)


class TestClassifiers:
    """Tests for age bracket and BMI category."""

    def test_age_bracket(self):
        assert age_bracket(17) == "Pediatric"
        assert age_bracket(18) == "Adult"
        assert age_bracket(64) == "Adult"
        assert age_bracket(65) == "Senior"

    def test_bmi_category(self):
        assert bmi_category(18.4) == "Underweight"
        assert bmi_category(18.5) == "Normal"
        assert bmi_category(24.9) == "Normal"
        assert bmi_category(25.0) == "Overweight"
        assert bmi_category(29.9) == "Overweight"
        assert bmi_category(30.0) == "Obese"


class TestCandidateConditions:
    """Tests for the symptom -> condition union."""

    def test_shortness_of_breath(self):
        conditions = candidate_conditions(AssessmentInput(symptoms={"Shortness of Breath"}))
        assert set(conditions) == {"Mitral Valve Disease", "Heart Failure", "Pulmonary Hypertension"}

    def test_union_is_deduplicated_in_catalog_order(self):
        conditions = candidate_conditions(AssessmentInput(symptoms={"Syncope (Fainting)", "Chest Pain"}))
        assert conditions == (
            "Coronary Artery Disease",
            "Aortic Stenosis",
            "Hypertrophic Cardiomyopathy",
            "Heart Block",
            "Ventricular Arrhythmia",
        )

    def test_unmapped_symptoms_contribute_nothing(self):
        assert candidate_conditions(AssessmentInput(symptoms={"Fatigue", "Nausea"})) == ()

    def test_empty_conditions_section_placeholder(self, healthy_profile, fixed_time):
        report = assess(healthy_profile, AssessmentInput(symptoms={"Fatigue"}), generated_at=fixed_time)
        section = _section(report, "candidate_conditions")

        assert report.candidate_conditions == ()
        assert section.lines == ("No specific conditions indicated by reported symptoms.",)


class TestSuggestedDiagnostics:
    """Tests for the diagnostic test list."""

    def _tests_for(self, profile, assessment):
        risk = RiskEngine().compute_risk(profile, assessment)
        return risk, suggest_diagnostics(risk, classify(risk.score))

    def test_low_risk_gets_base_list(self, healthy_profile, healthy_assessment):
        _, tests = self._tests_for(healthy_profile, healthy_assessment)
        assert tests == catalog.BASE_DIAGNOSTICS

    def test_moderate_score_five_adds_stress_test(self):
        # 66y (+2), Chest Pain (+2), Smoking (+1) = 5
        risk, tests = self._tests_for(
            make_profile(age=66),
            AssessmentInput(symptoms={"Chest Pain"}, risk_factors={"Smoking"}),
        )
        assert risk.score == 5
        assert len(tests) == 8
        assert catalog.ELEVATED_SCORE_DIAGNOSTIC in tests
        assert catalog.URGENT_DIAGNOSTIC not in tests

    def test_moderate_score_four_has_base_list(self):
        risk, tests = self._tests_for(make_profile(), AssessmentInput(symptoms={"Chest Pain", "Palpitations"}))
        assert risk.score == 4
        assert len(tests) == 7

    def test_urgent_gets_both_additions(self, urgent_profile, urgent_assessment):
        _, tests = self._tests_for(urgent_profile, urgent_assessment)
        assert len(tests) == 9
        assert tests[-2:] == (catalog.URGENT_DIAGNOSTIC, catalog.ELEVATED_SCORE_DIAGNOSTIC)


class TestVitalsInterpretation:
    """Tests for the vitals section."""

    def test_abnormal_flags(self, urgent_assessment):
        lines = build_vitals_interpretation(urgent_assessment.vitals).lines
        assert lines[0] == "Blood pressure: 150/95 mmHg (ELEVATED)"
        assert lines[1] == "Heart rate: 110 BPM (Tachycardia)"
        assert lines[2] == "Oxygen saturation (SpO2): 92% (LOW)"
        assert lines[3] == "Temperature: Not recorded"

    def test_normal_flags(self, healthy_assessment):
        lines = build_vitals_interpretation(healthy_assessment.vitals).lines
        assert lines[0].endswith("(Normal range)")
        assert lines[1].endswith("(Normal)")
        assert lines[2].endswith("(Normal)")

    def test_bradycardia(self):
        lines = build_vitals_interpretation(Vitals(heart_rate=52)).lines
        assert lines[1] == "Heart rate: 52 BPM (Bradycardia)"

    @pytest.mark.parametrize("temperature,flag", [
        (98.6, "(Normal)"),
        (100.3, "(Normal)"),
        (100.4, "(Fever)"),
        (102, "(Fever)"),
    ])
    def test_temperature(self, temperature, flag):
        lines = build_vitals_interpretation(Vitals(temperature_f=temperature)).lines
        assert lines[3].endswith(flag)

    def test_unrecorded(self):
        lines = build_vitals_interpretation(Vitals()).lines
        assert all("Not recorded" in line for line in lines)


class TestReportSections:
    """Tests for the assembled report."""

    def test_section_order(self, urgent_report):
        assert [s.key for s in urgent_report.sections] == [
            "patient_summary",
            "risk_breakdown",
            "vitals_interpretation",
            "urgency_statement",
            "suggested_diagnostics",
            "candidate_conditions",
            "doctor_script",
            "clinician_summary",
            "disclaimer",
        ]

    def test_patient_summary(self, urgent_report):
        lines = _section(urgent_report, "patient_summary").lines
        assert "Name: Robert Hale" in lines
        assert "Age: 70 (Senior)" in lines
        assert "Physical profile: 170 cm, 92.5 kg, BMI 32.0 (Obese)" in lines
        assert "Blood type: Not provided" in lines

    def test_risk_breakdown_notes_cap(self, urgent_report):
        lines = _section(urgent_report, "risk_breakdown").lines
        assert lines[0] == "Risk score: 10/10"
        assert "- Age 70 (over 65): +2" in lines
        assert lines[-1] == "(Total of 16 points capped at 10.)"

    def test_risk_breakdown_without_factors(self, healthy_profile, healthy_assessment, fixed_time):
        report = assess(healthy_profile, healthy_assessment, generated_at=fixed_time)
        assert _section(report, "risk_breakdown").lines == (
            "Risk score: 0/10",
            "No contributing risk factors identified.",
        )

    def test_urgency_statement(self, urgent_report):
        lines = _section(urgent_report, "urgency_statement").lines
        assert lines[0] == "Urgency level: URGENT"
        assert "24 hours" in lines[2]

    def test_doctor_script_echoes_input(self, urgent_report):
        text = _section(urgent_report, "doctor_script").text
        assert "Chest Pain, Palpitations" in text
        assert "Diabetes, Smoking" in text
        assert "Tightness when climbing stairs" in text
        assert "Father had a heart attack at 58" in text
        assert "score of 10/10" in text

    def test_clinician_summary(self, urgent_report):
        lines = _section(urgent_report, "clinician_summary").lines
        assert lines[1] == "VITALS: BP 150/95 | HR 110 | SpO2 92 | T Not recorded"
        assert lines[-1] == "SCORE: 10/10 (URGENT)"

    def test_disclaimer_always_present(self, urgent_report):
        assert _section(urgent_report, "disclaimer").lines == (catalog.DISCLAIMER,)

    def test_to_dict(self, urgent_report):
        data = urgent_report.to_dict()
        assert data["risk"]["score"] == 10
        assert data["urgency"]["tier"] == "URGENT"
        assert data["patient"]["bmi"] == 32.0
        assert len(data["sections"]) == 9


class TestReportIdentity:
    """Tests for report IDs and idempotence."""

    def test_report_id_format(self, fixed_time):
        assert make_report_id(fixed_time) == "WR-20260314-092653-589793"

    def test_regeneration_is_idempotent(self, urgent_profile, urgent_assessment):
        risk = RiskEngine().compute_risk(urgent_profile, urgent_assessment)
        urgency = classify(risk.score)

        first = synthesize(urgent_profile, urgent_assessment, risk, urgency, generated_at=datetime(2026, 1, 1, 8, 0))
        second = synthesize(urgent_profile, urgent_assessment, risk, urgency, generated_at=datetime(2026, 1, 2, 8, 0))

        assert first.report_id != second.report_id
        assert first.narrative_text == second.narrative_text
        assert first.sections == second.sections

    def test_default_id_format(self, healthy_profile, healthy_assessment):
        ids = {assess(healthy_profile, healthy_assessment).report_id for _ in range(3)}
        assert all(re.fullmatch(r"WR-\d{8}-\d{6}-\d{6}", i) for i in ids)

    def test_synthesize_requires_profile(self, urgent_assessment):
        risk = RiskEngine().compute_risk(make_profile(), urgent_assessment)
        with pytest.raises(ProfileRequiredError):
            synthesize(None, urgent_assessment, risk, classify(risk.score))

    def test_assess_requires_profile(self, urgent_assessment):
        with pytest.raises(ProfileRequiredError):
            assess(None, urgent_assessment)
