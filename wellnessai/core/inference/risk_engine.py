"""
Risk Engine Module

Computes a bounded cardiac risk score from a patient profile and the
per-assessment symptoms, risk factors and vitals, and classifies it into an
urgency tier.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Tuple
from enum import Enum
import numpy as np

from wellnessai.core import catalog
from wellnessai.core.intake.profile import PatientProfile, ProfileRequiredError
from wellnessai.core.intake.assessment import AssessmentInput, Vitals
from wellnessai.utils import get_logger

logger = get_logger(__name__)


class UrgencyTier(str, Enum):
    """Urgency categories."""
    LOW = "LOW"
    MODERATE = "MODERATE"
    URGENT = "URGENT"

    @classmethod
    def from_score(cls, score: int) -> "UrgencyTier":
        """Convert numeric score (0-10) to urgency tier."""
        if score >= URGENT_THRESHOLD:
            return cls.URGENT
        elif score >= MODERATE_THRESHOLD:
            return cls.MODERATE
        else:
            return cls.LOW


URGENT_THRESHOLD = 7
MODERATE_THRESHOLD = 4

TIER_REASONING: Dict[UrgencyTier, str] = {
    UrgencyTier.URGENT: "High-risk symptoms and factors present; immediate specialist consultation recommended.",
    UrgencyTier.MODERATE: "Several risk factors identified; consultation within 2–4 weeks recommended.",
    UrgencyTier.LOW: "Routine follow-up recommended.",
}

TIER_ACTIONS: Dict[UrgencyTier, str] = {
    UrgencyTier.URGENT: "Contact a cardiologist or your physician within 24 hours.",
    UrgencyTier.MODERATE: "Schedule an appointment with your physician within the next 2–4 weeks.",
    UrgencyTier.LOW: "Continue healthy habits and keep up with annual cardiac screening.",
}


@dataclass(frozen=True)
class RiskContribution:
    """One fired scoring rule."""
    rule: str
    label: str
    points: int

    def to_dict(self) -> Dict[str, Any]:
        return {"rule": self.rule, "label": self.label, "points": self.points}


@dataclass(frozen=True)
class RiskScore:
    """Clamped risk score with an auditable breakdown."""
    score: int  # 0-10 scale
    raw_total: int
    contributions: Tuple[RiskContribution, ...] = field(default_factory=tuple)

    def points_for(self, rule: str) -> int:
        return sum(c.points for c in self.contributions if c.rule == rule)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "score": self.score,
            "max_score": catalog.MAX_RISK_SCORE,
            "raw_total": self.raw_total,
            "contributions": [c.to_dict() for c in self.contributions],
        }


@dataclass(frozen=True)
class UrgencyClassification:
    """Urgency tier plus its fixed reasoning text."""
    tier: UrgencyTier
    reasoning: str

    @property
    def action(self) -> str:
        return TIER_ACTIONS[self.tier]

    def to_dict(self) -> Dict[str, Any]:
        return {"tier": self.tier.value, "reasoning": self.reasoning, "action": self.action}


# ---- Vital predicates (shared with report synthesis) ----

def is_blood_pressure_elevated(vitals: Vitals) -> bool:
    """True when systolic > 140 or diastolic > 90. Unrecorded readings never fire."""
    systolic_high = vitals.systolic_bp is not None and vitals.systolic_bp > catalog.SYSTOLIC_BP_LIMIT
    diastolic_high = vitals.diastolic_bp is not None and vitals.diastolic_bp > catalog.DIASTOLIC_BP_LIMIT
    return systolic_high or diastolic_high


def heart_rate_status(vitals: Vitals) -> Optional[str]:
    """Return 'tachycardia', 'bradycardia', 'normal', or None if not recorded."""
    hr = vitals.heart_rate
    if hr is None:
        return None
    if hr > catalog.TACHYCARDIA_LIMIT:
        return "tachycardia"
    if hr < catalog.BRADYCARDIA_LIMIT:
        return "bradycardia"
    return "normal"


def is_spo2_low(vitals: Vitals) -> bool:
    return vitals.spo2 is not None and vitals.spo2 < catalog.SPO2_LOW_LIMIT


def is_febrile(vitals: Vitals) -> bool:
    return vitals.temperature_f is not None and vitals.temperature_f >= catalog.FEVER_LIMIT_F


def _threshold_points(value: float, table: Tuple[Tuple[float, int], ...]) -> Tuple[int, Optional[float]]:
    """Return (points, threshold crossed) for the highest threshold exceeded."""
    for threshold, points in table:
        if value > threshold:
            return points, threshold
    return 0, None


def _format_reading(value: Optional[float]) -> str:
    if value is None:
        return "--"
    return f"{value:g}"


class RiskEngine:
    """
    Rule-based cardiac risk scoring.

    Rules are additive and evaluated in a fixed order so the breakdown is
    reproducible:
    age, BMI, high-risk symptoms, critical risk factors, blood pressure,
    heart rate, SpO2. Holds no state between calls.
    """

    def compute_risk(
        self,
        profile: Optional[PatientProfile],
        assessment: AssessmentInput
    ) -> RiskScore:
        """
        Compute the risk score for one patient assessment.

        Args:
            profile: Resolved patient profile (required)
            assessment: Symptoms, risk factors and vitals

        Returns:
            RiskScore clamped to 0-10 with itemized contributions

        Raises:
            ProfileRequiredError: if profile is None
        """
        if profile is None:
            raise ProfileRequiredError()

        contributions: List[RiskContribution] = []

        age_points, age_limit = _threshold_points(profile.age, catalog.AGE_POINTS)
        if age_points:
            contributions.append(RiskContribution(
                "age", f"Age {profile.age} (over {age_limit:g})", age_points
            ))

        bmi = profile.bmi
        bmi_points, bmi_limit = _threshold_points(bmi, catalog.BMI_POINTS)
        if bmi_points:
            contributions.append(RiskContribution(
                "bmi", f"BMI {bmi} (over {bmi_limit:g})", bmi_points
            ))

        for symptom in assessment.ordered_symptoms:
            points = catalog.HIGH_RISK_SYMPTOM_POINTS.get(symptom, 0)
            if points:
                contributions.append(RiskContribution("symptom", f"High-risk symptom: {symptom}", points))

        for factor in assessment.ordered_risk_factors:
            points = catalog.CRITICAL_RISK_FACTOR_POINTS.get(factor, 0)
            if points:
                contributions.append(RiskContribution("risk_factor", f"Risk factor: {factor}", points))

        vitals = assessment.vitals
        if is_blood_pressure_elevated(vitals):
            contributions.append(RiskContribution(
                "blood_pressure",
                f"Elevated blood pressure ({_format_reading(vitals.systolic_bp)}/"
                f"{_format_reading(vitals.diastolic_bp)} mmHg)",
                catalog.BLOOD_PRESSURE_POINTS,
            ))

        hr_status = heart_rate_status(vitals)
        if hr_status in ("tachycardia", "bradycardia"):
            contributions.append(RiskContribution(
                "heart_rate",
                f"Abnormal heart rate ({_format_reading(vitals.heart_rate)} BPM, {hr_status})",
                catalog.HEART_RATE_POINTS,
            ))

        if is_spo2_low(vitals):
            contributions.append(RiskContribution(
                "spo2",
                f"Low oxygen saturation ({_format_reading(vitals.spo2)}%)",
                catalog.SPO2_POINTS,
            ))

        raw_total = sum(c.points for c in contributions)
        score = int(np.clip(raw_total, 0, catalog.MAX_RISK_SCORE))

        logger.debug(f"Risk computed: raw={raw_total}, score={score}, rules={len(contributions)}")

        return RiskScore(score=score, raw_total=raw_total, contributions=tuple(contributions))

    def classify(self, score: int) -> UrgencyClassification:
        return classify(score)


def classify(score: int) -> UrgencyClassification:
    """Map a score to its urgency tier and fixed reasoning."""
    tier = UrgencyTier.from_score(score)
    return UrgencyClassification(tier=tier, reasoning=TIER_REASONING[tier])


def compute_risk_score(
    profile: Optional[PatientProfile],
    assessment: AssessmentInput
) -> RiskScore:
    """Functional entry point over a throwaway engine."""
    return RiskEngine().compute_risk(profile, assessment)
