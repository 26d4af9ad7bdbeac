"""
Assessment Service - Patient Records, Risk Assessment and Report Exports
"""
import threading
from collections import OrderedDict
from datetime import datetime
from typing import Dict, Any, Optional, Tuple

from fastapi import HTTPException

from wellnessai.core.intake import AssessmentInput, PatientProfile, ProfileRequiredError
from wellnessai.core.inference import RiskEngine, classify
from wellnessai.core.reports import (
    Report,
    ReportPdfGenerator,
    patient_info_filename,
    render_html,
    render_text,
    synthesize,
)
from wellnessai.core.store import PatientRecord, PatientRecordStore
from wellnessai.utils import get_logger

logger = get_logger(__name__)

EXPORT_MEDIA_TYPES = {
    "pdf": "application/pdf",
    "txt": "text/plain; charset=utf-8",
    "html": "text/html; charset=utf-8",
}


class AssessmentService:
    """
    Service class for the assessment workflow.

    Resolves the patient profile from the record store, runs the risk engine
    and keeps generated reports in memory for later download. Only the most
    recent ``max_reports`` reports are kept; older ones are evicted first.
    """

    def __init__(
        self,
        store: Optional[PatientRecordStore] = None,
        risk_engine: Optional[RiskEngine] = None,
        pdf_generator: Optional[ReportPdfGenerator] = None,
        max_reports: int = 500
    ):
        self.store = store or PatientRecordStore()
        self.risk_engine = risk_engine or RiskEngine()
        self.pdf_generator = pdf_generator or ReportPdfGenerator()
        self.max_reports = max_reports
        self._reports: "OrderedDict[str, Tuple[str, Report]]" = OrderedDict()
        self._lock = threading.Lock()

    # ---- Patient records ----

    def create_patient(self, profile: PatientProfile) -> PatientRecord:
        record = self.store.save(profile)
        logger.info(f"Patient {record.record_id} saved (BMI {profile.bmi})")
        return record

    def get_patient(self, record_id: str) -> PatientRecord:
        record = self.store.get(record_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Patient record not found")
        return record

    def latest_patient(self) -> PatientRecord:
        record = self.store.latest()
        if record is None:
            raise HTTPException(status_code=404, detail="No patient record found")
        return record

    def update_patient(self, record_id: str, changes: Dict[str, Any]) -> PatientRecord:
        """Apply a partial edit; BMI follows the new height and weight."""
        record = self.get_patient(record_id)
        try:
            profile = record.profile.updated(**changes)
        except (TypeError, ValueError) as e:
            logger.warning(f"Rejected edit for {record_id}: {e}")
            raise HTTPException(status_code=422, detail=str(e))
        return self.store.update(record_id, profile)

    def _resolve_record(self, record_id: Optional[str]) -> PatientRecord:
        if record_id:
            return self.get_patient(record_id)
        record = self.store.latest()
        if record is None:
            logger.warning("Assessment requested before any patient profile was saved")
            raise HTTPException(status_code=409, detail=ProfileRequiredError().args[0])
        return record

    # ---- Assessment ----

    def run_assessment(
        self,
        assessment: AssessmentInput,
        record_id: Optional[str] = None,
        generated_at: Optional[datetime] = None
    ) -> Tuple[str, Report]:
        """
        Score the assessment against a stored profile and build the report.

        Args:
            assessment: Symptoms, risk factors and vitals for this report
            record_id: Patient record; most recently created when omitted
            generated_at: Report timestamp (defaults to now)

        Returns:
            (record_id, report)
        """
        record = self._resolve_record(record_id)

        risk = self.risk_engine.compute_risk(record.profile, assessment)
        urgency = classify(risk.score)
        report = synthesize(record.profile, assessment, risk, urgency, generated_at=generated_at)

        with self._lock:
            self._reports[report.report_id] = (record.record_id, report)
            while len(self._reports) > self.max_reports:
                evicted, _ = self._reports.popitem(last=False)
                logger.info(f"Report {evicted} evicted from memory")

        logger.info(
            f"Assessment {report.report_id} for {record.record_id}: "
            f"score={risk.score}/10 tier={urgency.tier.value}"
        )
        return record.record_id, report

    def get_report(self, report_id: str) -> Tuple[str, Report]:
        with self._lock:
            entry = self._reports.get(report_id)
        if entry is None:
            raise HTTPException(status_code=404, detail="Report not found")
        return entry

    # ---- Exports ----

    def export_report(self, report_id: str, fmt: str = "pdf") -> Tuple[bytes, str, str]:
        """
        Render a stored report.

        Returns:
            (content, media_type, filename)
        """
        fmt = (fmt or "").lower()
        if fmt not in EXPORT_MEDIA_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown export format: {fmt}. Valid: {sorted(EXPORT_MEDIA_TYPES)}"
            )

        _, report = self.get_report(report_id)

        if fmt == "pdf":
            content = self.pdf_generator.generate_bytes(report)
        elif fmt == "txt":
            content = render_text(report)
        else:
            content = render_html(report)

        logger.info(f"Exported {report_id} as {fmt} ({len(content)} bytes)")
        return content, EXPORT_MEDIA_TYPES[fmt], f"{report_id}.{fmt}"

    def patient_info_pdf(self, record_id: str) -> Tuple[bytes, str]:
        """Patient-information PDF for a stored record, with its download filename."""
        record = self.get_patient(record_id)
        generated_at = datetime.now()
        content = self.pdf_generator.generate_patient_info_bytes(record.profile, generated_at=generated_at)
        return content, patient_info_filename(record.profile, generated_at=generated_at)
