"""
Assessment API Models
"""
from pydantic import BaseModel, Field
from typing import Dict, Any, List, Optional

from wellnessai.core.intake import AssessmentInput, PatientProfile, Vitals
from wellnessai.core.reports import Report
from wellnessai.core.store import PatientRecord


class PatientProfileRequest(BaseModel):
    """Intake form payload."""
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    age: int = Field(..., ge=0)
    gender: str = Field(..., description="male, female, other or prefer-not-to-say")
    height_cm: float = Field(..., gt=0)
    weight_kg: float = Field(..., gt=0)
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

    def to_profile(self) -> PatientProfile:
        return PatientProfile(**self.model_dump())


class PatientUpdateRequest(BaseModel):
    """Partial edit; omitted fields keep their stored value."""
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    age: Optional[int] = Field(default=None, ge=0)
    gender: Optional[str] = None
    height_cm: Optional[float] = Field(default=None, gt=0)
    weight_kg: Optional[float] = Field(default=None, gt=0)
    blood_group: Optional[str] = None
    allergies: Optional[str] = None
    medications: Optional[str] = None
    medical_history: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    insurance_provider: Optional[str] = None
    policy_number: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class PatientResponse(BaseModel):
    """Stored patient record."""
    record_id: str
    created_at: str
    updated_at: str
    bmi: float
    profile: Dict[str, Any]

    @classmethod
    def from_record(cls, record: PatientRecord) -> "PatientResponse":
        return cls(
            record_id=record.record_id,
            created_at=record.created_at.isoformat(),
            updated_at=record.updated_at.isoformat(),
            bmi=record.profile.bmi,
            profile=record.profile.to_dict(),
        )


class VitalsInput(BaseModel):
    """
    Raw vitals from the form.

    Values are left untyped here; blank or non-numeric readings are coerced
    to "not recorded" rather than rejected.
    """
    systolic_bp: Optional[Any] = None
    diastolic_bp: Optional[Any] = None
    heart_rate: Optional[Any] = None
    spo2: Optional[Any] = None
    temperature_f: Optional[Any] = None

    def to_vitals(self) -> Vitals:
        return Vitals.from_raw(self.model_dump())


class AssessmentRequest(BaseModel):
    """Request to run a cardiac risk assessment."""
    record_id: Optional[str] = Field(default=None, description="Patient record; latest profile when omitted")
    symptoms: List[str] = Field(default_factory=list)
    risk_factors: List[str] = Field(default_factory=list)
    vitals: VitalsInput = Field(default_factory=VitalsInput)
    additional_symptoms: str = ""
    family_history: str = ""

    def to_assessment(self) -> AssessmentInput:
        return AssessmentInput(
            symptoms=self.symptoms,
            risk_factors=self.risk_factors,
            vitals=self.vitals.to_vitals(),
            additional_symptoms=self.additional_symptoms,
            family_history=self.family_history,
        )


class AssessmentResponse(BaseModel):
    """Summary of a generated report plus the full report body."""
    report_id: str
    record_id: str
    generated_at: str
    risk_score: int
    max_score: int
    urgency_tier: str
    reasoning: str
    suggested_diagnostics: List[str]
    candidate_conditions: List[str]
    report: Dict[str, Any]
    status: str = "success"

    @classmethod
    def from_report(cls, record_id: str, report: Report) -> "AssessmentResponse":
        body = report.to_dict()
        return cls(
            report_id=report.report_id,
            record_id=record_id,
            generated_at=body["generated_at"],
            risk_score=report.risk.score,
            max_score=body["risk"]["max_score"],
            urgency_tier=report.urgency.tier.value,
            reasoning=report.urgency.reasoning,
            suggested_diagnostics=body["suggested_diagnostics"],
            candidate_conditions=body["candidate_conditions"],
            report=body,
        )


class CatalogResponse(BaseModel):
    """Selectable symptoms and risk factors with their scoring weights."""
    symptoms: List[str]
    risk_factors: List[str]
    high_risk_symptoms: Dict[str, int]
    critical_risk_factors: Dict[str, int]


class GeminiQueryRequest(BaseModel):
    """Health chat search query."""
    query: str = ""


class GeminiQueryResponse(BaseModel):
    response: str
    query: str


class PdfAnalysisResponse(BaseModel):
    report: str


class HealthResponse(BaseModel):
    """Health status response."""
    status: str
    version: str
    timestamp: str
    components: Dict[str, str]
