"""
Assessment Input

Per-report clinical snapshot: reported symptoms, risk factors and vitals.
"""
from dataclasses import dataclass, field
import math
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from wellnessai.core.catalog import SYMPTOM_CATALOG, RISK_FACTOR_CATALOG


def coerce_vital(value: Any) -> Optional[float]:
    """
    Coerce a raw form value to a vital reading.

    Blank, missing, non-numeric and non-finite input (nan, inf) all mean
    "not recorded" (None).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            result = float(text)
        except ValueError:
            return None
    return result if math.isfinite(result) else None


@dataclass(frozen=True)
class Vitals:
    """Vital signs; None means the reading was not recorded."""
    systolic_bp: Optional[float] = None
    diastolic_bp: Optional[float] = None
    heart_rate: Optional[float] = None
    spo2: Optional[float] = None
    temperature_f: Optional[float] = None

    def __post_init__(self):
        for name in ("systolic_bp", "diastolic_bp", "heart_rate", "spo2", "temperature_f"):
            value = getattr(self, name)
            if value is None:
                continue
            if not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number, got {value}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "Vitals":
        """Build vitals from untrusted form input."""
        return cls(
            systolic_bp=coerce_vital(raw.get("systolic_bp")),
            diastolic_bp=coerce_vital(raw.get("diastolic_bp")),
            heart_rate=coerce_vital(raw.get("heart_rate")),
            spo2=coerce_vital(raw.get("spo2")),
            temperature_f=coerce_vital(raw.get("temperature_f")),
        )

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "systolic_bp": self.systolic_bp,
            "diastolic_bp": self.diastolic_bp,
            "heart_rate": self.heart_rate,
            "spo2": self.spo2,
            "temperature_f": self.temperature_f,
        }


def _ordered(labels: Iterable[str], catalog: Iterable[str]) -> List[str]:
    present = set(labels)
    return [label for label in catalog if label in present]


@dataclass(frozen=True)
class AssessmentInput:
    """Transient inputs for a single report generation."""
    symptoms: FrozenSet[str] = field(default_factory=frozenset)
    risk_factors: FrozenSet[str] = field(default_factory=frozenset)
    vitals: Vitals = field(default_factory=Vitals)
    additional_symptoms: str = ""
    family_history: str = ""

    def __post_init__(self):
        # Accept any iterable of labels but store frozensets
        object.__setattr__(self, "symptoms", frozenset(self.symptoms))
        object.__setattr__(self, "risk_factors", frozenset(self.risk_factors))

        unknown = self.symptoms.difference(SYMPTOM_CATALOG)
        if unknown:
            raise ValueError(f"Unknown symptoms: {sorted(unknown)}")
        unknown = self.risk_factors.difference(RISK_FACTOR_CATALOG)
        if unknown:
            raise ValueError(f"Unknown risk factors: {sorted(unknown)}")

    @property
    def ordered_symptoms(self) -> List[str]:
        """Symptoms in catalog order (stable for narratives)."""
        return _ordered(self.symptoms, SYMPTOM_CATALOG)

    @property
    def ordered_risk_factors(self) -> List[str]:
        return _ordered(self.risk_factors, RISK_FACTOR_CATALOG)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symptoms": self.ordered_symptoms,
            "risk_factors": self.ordered_risk_factors,
            "vitals": self.vitals.to_dict(),
            "additional_symptoms": self.additional_symptoms,
            "family_history": self.family_history,
        }
