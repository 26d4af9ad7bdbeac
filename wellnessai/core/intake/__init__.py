"""
Intake Module

Patient profile and per-assessment input value objects.
"""
from .profile import PatientProfile, ProfileRequiredError
from .assessment import AssessmentInput, Vitals, coerce_vital

__all__ = [
    "PatientProfile",
    "ProfileRequiredError",
    "AssessmentInput",
    "Vitals",
    "coerce_vital",
]
