"""
Inference Module

Computes the cardiac risk score and urgency tier for a patient assessment.
"""
from .risk_engine import (
    RiskEngine,
    RiskScore,
    RiskContribution,
    UrgencyTier,
    UrgencyClassification,
    classify,
    compute_risk_score,
)

__all__ = [
    "RiskEngine",
    "RiskScore",
    "RiskContribution",
    "UrgencyTier",
    "UrgencyClassification",
    "classify",
    "compute_risk_score",
]
