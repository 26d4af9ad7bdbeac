"""
Report Synthesis

Builds the immutable, sectioned risk assessment report. Every section is an
independent pure function of the profile, the assessment input, the score
and the urgency classification, so each can be tested and rendered on its
own.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, List, Optional, Tuple

from wellnessai.core import catalog
from wellnessai.core.intake.profile import PatientProfile, ProfileRequiredError
from wellnessai.core.intake.assessment import AssessmentInput, Vitals
from wellnessai.core.inference.risk_engine import (
    RiskEngine,
    RiskScore,
    UrgencyClassification,
    UrgencyTier,
    classify,
    heart_rate_status,
    is_blood_pressure_elevated,
    is_febrile,
    is_spo2_low,
)
from wellnessai.utils import get_logger

logger = get_logger(__name__)

NONE_REPORTED = "None reported"
NOT_RECORDED = "Not recorded"
NOT_PROVIDED = "Not provided"


@dataclass(frozen=True)
class ReportSection:
    """One titled block of narrative lines."""
    key: str
    title: str
    lines: Tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "title": self.title, "lines": list(self.lines)}


@dataclass(frozen=True)
class Report:
    """Immutable risk assessment report."""
    report_id: str
    generated_at: datetime
    profile: PatientProfile
    assessment: AssessmentInput
    risk: RiskScore
    urgency: UrgencyClassification
    patient_summary: ReportSection
    risk_breakdown: ReportSection
    vitals_interpretation: ReportSection
    urgency_statement: ReportSection
    suggested_diagnostics: Tuple[str, ...]
    candidate_conditions: Tuple[str, ...]
    doctor_script: ReportSection
    clinician_summary: ReportSection
    disclaimer: str = field(default=catalog.DISCLAIMER)

    @property
    def sections(self) -> Tuple[ReportSection, ...]:
        """All narrative sections in display order."""
        return (
            self.patient_summary,
            self.risk_breakdown,
            self.vitals_interpretation,
            self.urgency_statement,
            ReportSection("suggested_diagnostics", "Suggested Diagnostic Tests", self.suggested_diagnostics),
            ReportSection(
                "candidate_conditions",
                "Conditions to Discuss",
                self.candidate_conditions or ("No specific conditions indicated by reported symptoms.",),
            ),
            self.doctor_script,
            self.clinician_summary,
            ReportSection("disclaimer", "Disclaimer", (self.disclaimer,)),
        )

    @property
    def narrative_text(self) -> str:
        """All section text, excluding report ID and timestamp."""
        return "\n\n".join(f"{s.title}\n{s.text}" for s in self.sections)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "generated_at": self.generated_at.isoformat(),
            "patient": self.profile.to_dict(),
            "assessment": self.assessment.to_dict(),
            "risk": self.risk.to_dict(),
            "urgency": self.urgency.to_dict(),
            "suggested_diagnostics": list(self.suggested_diagnostics),
            "candidate_conditions": list(self.candidate_conditions),
            "sections": [s.to_dict() for s in self.sections],
            "disclaimer": self.disclaimer,
        }


# ---- Classifiers ----

def age_bracket(age: int) -> str:
    if age < 18:
        return "Pediatric"
    if age < 65:
        return "Adult"
    return "Senior"


def bmi_category(bmi: float) -> str:
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Normal"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def _or_default(value: str, default: str = NOT_PROVIDED) -> str:
    value = (value or "").strip()
    return value if value else default


def _join(items: List[str]) -> str:
    return ", ".join(items) if items else NONE_REPORTED


def _reading(value: Optional[float], unit: str = "") -> str:
    if value is None:
        return NOT_RECORDED
    return f"{value:g}{unit}"


def make_report_id(generated_at: datetime) -> str:
    """Display-only identifier derived from the generation timestamp."""
    return f"WR-{generated_at.strftime('%Y%m%d-%H%M%S-%f')}"


# ---- Sections ----

def build_patient_summary(profile: PatientProfile) -> ReportSection:
    bmi = profile.bmi
    lines = (
        f"Name: {profile.full_name}",
        f"Age: {profile.age} ({age_bracket(profile.age)})",
        f"Gender: {_or_default(profile.gender)}",
        f"Physical profile: {profile.height_cm:g} cm, {profile.weight_kg:g} kg, "
        f"BMI {bmi} ({bmi_category(bmi)})",
        f"Blood type: {_or_default(profile.blood_group)}",
        f"Email: {_or_default(profile.email)}",
        f"Phone: {_or_default(profile.phone)}",
        f"Insurance: {_or_default(profile.insurance_provider)} (Policy {_or_default(profile.policy_number)})",
        f"Emergency contact: {_or_default(profile.emergency_contact)} ({_or_default(profile.emergency_phone)})",
    )
    return ReportSection("patient_summary", "Patient Summary", lines)


def build_risk_breakdown(risk: RiskScore) -> ReportSection:
    lines = [f"Risk score: {risk.score}/{catalog.MAX_RISK_SCORE}"]
    factors = [c for c in risk.contributions if c.points > 0]
    if factors:
        lines.append("Contributing factors:")
        lines.extend(f"- {c.label}: +{c.points}" for c in factors)
    else:
        lines.append("No contributing risk factors identified.")
    if risk.raw_total > risk.score:
        lines.append(f"(Total of {risk.raw_total} points capped at {catalog.MAX_RISK_SCORE}.)")
    return ReportSection("risk_breakdown", "Risk Breakdown", tuple(lines))


def build_vitals_interpretation(vitals: Vitals) -> ReportSection:
    if vitals.systolic_bp is None and vitals.diastolic_bp is None:
        bp_line = f"Blood pressure: {NOT_RECORDED}"
    else:
        flag = "(ELEVATED)" if is_blood_pressure_elevated(vitals) else "(Normal range)"
        systolic = "--" if vitals.systolic_bp is None else f"{vitals.systolic_bp:g}"
        diastolic = "--" if vitals.diastolic_bp is None else f"{vitals.diastolic_bp:g}"
        bp_line = f"Blood pressure: {systolic}/{diastolic} mmHg {flag}"

    hr_flags = {"tachycardia": "(Tachycardia)", "bradycardia": "(Bradycardia)", "normal": "(Normal)"}
    hr_status = heart_rate_status(vitals)
    hr_line = f"Heart rate: {_reading(vitals.heart_rate, ' BPM')}"
    if hr_status:
        hr_line += f" {hr_flags[hr_status]}"

    spo2_line = f"Oxygen saturation (SpO2): {_reading(vitals.spo2, '%')}"
    if vitals.spo2 is not None:
        spo2_line += " (LOW)" if is_spo2_low(vitals) else " (Normal)"

    temp_line = f"Temperature: {_reading(vitals.temperature_f, ' °F')}"
    if vitals.temperature_f is not None:
        temp_line += " (Fever)" if is_febrile(vitals) else " (Normal)"

    return ReportSection("vitals_interpretation", "Vitals Interpretation", (bp_line, hr_line, spo2_line, temp_line))


def build_urgency_statement(urgency: UrgencyClassification) -> ReportSection:
    lines = (
        f"Urgency level: {urgency.tier.value}",
        urgency.reasoning,
        urgency.action,
    )
    return ReportSection("urgency_statement", "Urgency Assessment", lines)


def suggest_diagnostics(risk: RiskScore, urgency: UrgencyClassification) -> Tuple[str, ...]:
    tests = list(catalog.BASE_DIAGNOSTICS)
    if urgency.tier == UrgencyTier.URGENT:
        tests.append(catalog.URGENT_DIAGNOSTIC)
    if risk.score >= catalog.ELEVATED_SCORE_THRESHOLD:
        tests.append(catalog.ELEVATED_SCORE_DIAGNOSTIC)
    return tuple(tests)


def candidate_conditions(assessment: AssessmentInput) -> Tuple[str, ...]:
    """Union of mapped conditions across present symptoms, first occurrence wins."""
    conditions: List[str] = []
    for symptom in assessment.ordered_symptoms:
        for condition in catalog.SYMPTOM_CONDITIONS.get(symptom, ()):
            if condition not in conditions:
                conditions.append(condition)
    return tuple(conditions)


def build_doctor_script(assessment: AssessmentInput, risk: RiskScore) -> ReportSection:
    lines = (
        f"Symptoms I have been experiencing: {_join(assessment.ordered_symptoms)}",
        f"My risk factors: {_join(assessment.ordered_risk_factors)}",
        f"Additional symptoms: {_or_default(assessment.additional_symptoms, NONE_REPORTED)}",
        f"Family history: {_or_default(assessment.family_history, NONE_REPORTED)}",
        f"A preliminary cardiac risk screening gave me a score of {risk.score}/{catalog.MAX_RISK_SCORE}. "
        "I would like to discuss what tests are appropriate and what my next steps should be.",
    )
    return ReportSection("doctor_script", "What to Tell Your Doctor", lines)


def build_clinician_summary(
    profile: PatientProfile,
    assessment: AssessmentInput,
    risk: RiskScore,
    urgency: UrgencyClassification
) -> ReportSection:
    v = assessment.vitals
    bp = (
        NOT_RECORDED if v.systolic_bp is None and v.diastolic_bp is None
        else f"{_reading(v.systolic_bp)}/{_reading(v.diastolic_bp)}"
    )
    lines = (
        f"PT: {profile.full_name} | {profile.age}y | {_or_default(profile.gender)} | "
        f"BMI {profile.bmi} | Blood {_or_default(profile.blood_group)}",
        f"VITALS: BP {bp} | HR {_reading(v.heart_rate)} | SpO2 {_reading(v.spo2)} | T {_reading(v.temperature_f, 'F')}",
        f"SX: {_join(assessment.ordered_symptoms)}",
        f"ADDL SX: {_or_default(assessment.additional_symptoms, NONE_REPORTED)}",
        f"RF: {_join(assessment.ordered_risk_factors)}",
        f"FHX: {_or_default(assessment.family_history, NONE_REPORTED)}",
        f"MEDS: {_or_default(profile.medications, NONE_REPORTED)}",
        f"ALLERGIES: {_or_default(profile.allergies, NONE_REPORTED)}",
        f"PMH: {_or_default(profile.medical_history, NONE_REPORTED)}",
        f"SCORE: {risk.score}/{catalog.MAX_RISK_SCORE} ({urgency.tier.value})",
    )
    return ReportSection("clinician_summary", "Clinician Summary", lines)


# ---- Synthesis ----

def synthesize(
    profile: Optional[PatientProfile],
    assessment: AssessmentInput,
    risk: RiskScore,
    urgency: UrgencyClassification,
    generated_at: Optional[datetime] = None
) -> Report:
    """
    Assemble a report from already-computed score and urgency.

    Raises:
        ProfileRequiredError: if profile is None
    """
    if profile is None:
        raise ProfileRequiredError()

    generated_at = generated_at or datetime.now()
    report = Report(
        report_id=make_report_id(generated_at),
        generated_at=generated_at,
        profile=profile,
        assessment=assessment,
        risk=risk,
        urgency=urgency,
        patient_summary=build_patient_summary(profile),
        risk_breakdown=build_risk_breakdown(risk),
        vitals_interpretation=build_vitals_interpretation(assessment.vitals),
        urgency_statement=build_urgency_statement(urgency),
        suggested_diagnostics=suggest_diagnostics(risk, urgency),
        candidate_conditions=candidate_conditions(assessment),
        doctor_script=build_doctor_script(assessment, risk),
        clinician_summary=build_clinician_summary(profile, assessment, risk, urgency),
    )
    logger.debug(f"Report {report.report_id} synthesized (score={risk.score}, tier={urgency.tier.value})")
    return report


def assess(
    profile: Optional[PatientProfile],
    assessment: AssessmentInput,
    engine: Optional[RiskEngine] = None,
    generated_at: Optional[datetime] = None
) -> Report:
    """Score, classify and synthesize in one call."""
    engine = engine or RiskEngine()
    risk = engine.compute_risk(profile, assessment)
    return synthesize(profile, assessment, risk, classify(risk.score), generated_at=generated_at)
