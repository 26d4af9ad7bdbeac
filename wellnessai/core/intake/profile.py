"""
Patient Profile

Demographic and clinical baseline captured by the intake form.
"""
from dataclasses import dataclass, asdict, replace
from typing import Dict, Any


class ProfileRequiredError(ValueError):
    """Raised when the engine is invoked without a resolved patient profile."""

    def __init__(self, message: str = "Please complete patient details first."):
        super().__init__(message)


@dataclass(frozen=True)
class PatientProfile:
    """
    Patient baseline.

    BMI is derived from height and weight on every access, so editing either
    (via ``updated``) can never leave it stale.
    """
    first_name: str
    last_name: str
    age: int
    gender: str
    height_cm: float
    weight_kg: float
    blood_group: str = ""
    allergies: str = ""
    medications: str = ""
    medical_history: str = ""
    email: str = ""
    phone: str = ""
    date_of_birth: str = ""
    insurance_provider: str = ""
    policy_number: str = ""
    emergency_contact: str = ""
    emergency_phone: str = ""

    def __post_init__(self):
        if isinstance(self.age, bool) or not isinstance(self.age, int):
            raise ValueError(f"age must be an integer, got {self.age!r}")
        if self.age < 0:
            raise ValueError(f"age must be >= 0, got {self.age}")
        if self.height_cm <= 0:
            raise ValueError(f"height_cm must be positive, got {self.height_cm}")
        if self.weight_kg <= 0:
            raise ValueError(f"weight_kg must be positive, got {self.weight_kg}")

    @property
    def bmi(self) -> float:
        """Body mass index, kg/m^2 rounded to one decimal."""
        height_m = self.height_cm / 100
        return round(self.weight_kg / (height_m ** 2), 1)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def updated(self, **changes: Any) -> "PatientProfile":
        """Return an edited copy; validation and BMI derivation re-run."""
        if "bmi" in changes:
            raise ValueError("bmi is derived from height and weight and cannot be set")
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["bmi"] = self.bmi
        return data
