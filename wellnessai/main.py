"""
WellnessAI Risk Assessment - FastAPI Application

Main application entry point with API endpoints for:
- Patient intake records (create, fetch, edit, information PDF)
- Cardiac risk assessment and report generation
- Report exports (PDF, text, HTML)
- Gemini health chat search and medical-report PDF analysis
"""
from fastapi import FastAPI, HTTPException, Response, UploadFile, File, Query
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
from datetime import datetime
import asyncio
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from wellnessai.config import settings
from wellnessai.core import catalog
from wellnessai.core.llm import GeminiClient, GeminiConfig
from wellnessai.core.llm.gemini_client import SERVICE_UNAVAILABLE_MESSAGE, REQUEST_FAILED_MESSAGE
from wellnessai.models.assessment import (
    AssessmentRequest,
    AssessmentResponse,
    CatalogResponse,
    GeminiQueryRequest,
    GeminiQueryResponse,
    HealthResponse,
    PatientProfileRequest,
    PatientResponse,
    PatientUpdateRequest,
    PdfAnalysisResponse,
)
from wellnessai.services.assessment import AssessmentService
from wellnessai.utils import configure_logging, get_logger

configure_logging(settings.log_level)
logger = get_logger(__name__)

API_PREFIX = settings.api_prefix


# ---- FastAPI Application ----

app = FastAPI(
    title=settings.app_name,
    description="Rule-based cardiac risk scoring and doctor-visit report generation",
    version=settings.app_version,
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---- Services ----
_assessment_service = AssessmentService(max_reports=settings.max_stored_reports)
_gemini_client = GeminiClient(GeminiConfig(
    api_key=settings.gemini_api_key,
    model=settings.gemini_model,
    temperature=settings.chat_temperature,
    top_p=settings.chat_top_p,
    top_k=settings.chat_top_k,
    max_output_tokens=settings.chat_max_output_tokens,
    document_max_output_tokens=settings.pdf_max_output_tokens,
    request_timeout_seconds=settings.request_timeout_seconds,
))


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


# ---- Health ----

def _health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        timestamp=datetime.now().isoformat(),
        components={
            "risk_engine": "ready",
            "report_generator": "ready",
            "patient_records": str(len(_assessment_service.store)),
            "gemini": "ready" if _gemini_client.is_available else "not_configured",
        }
    )


@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    """API root - health check."""
    return _health()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return _health()


# ---- Patients ----

@app.post(f"{API_PREFIX}/patients", response_model=PatientResponse, status_code=201, tags=["Patients"])
async def create_patient(request: PatientProfileRequest):
    """Save an intake profile; BMI is derived from height and weight."""
    try:
        profile = request.to_profile()
    except ValueError as e:
        logger.warning(f"Invalid patient profile: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    record = _assessment_service.create_patient(profile)
    return PatientResponse.from_record(record)


@app.get(f"{API_PREFIX}/patients/latest", response_model=PatientResponse, tags=["Patients"])
async def get_latest_patient():
    """Most recently created patient profile."""
    return PatientResponse.from_record(_assessment_service.latest_patient())


@app.get(f"{API_PREFIX}/patients/{{record_id}}", response_model=PatientResponse, tags=["Patients"])
async def get_patient(record_id: str):
    return PatientResponse.from_record(_assessment_service.get_patient(record_id))


@app.put(f"{API_PREFIX}/patients/{{record_id}}", response_model=PatientResponse, tags=["Patients"])
async def update_patient(record_id: str, request: PatientUpdateRequest):
    """Edit a stored profile. Only the supplied fields change."""
    record = _assessment_service.update_patient(record_id, request.changes())
    return PatientResponse.from_record(record)


@app.get(f"{API_PREFIX}/patients/{{record_id}}/pdf", tags=["Patients"])
async def download_patient_info(record_id: str):
    """Download the patient-information PDF."""
    content, filename = await asyncio.to_thread(_assessment_service.patient_info_pdf, record_id)
    return _attachment(content, "application/pdf", filename)


# ---- Assessment ----

@app.get(f"{API_PREFIX}/assessment/catalog", response_model=CatalogResponse, tags=["Assessment"])
async def get_catalog():
    """List selectable symptoms and risk factors."""
    return CatalogResponse(
        symptoms=list(catalog.SYMPTOM_CATALOG),
        risk_factors=list(catalog.RISK_FACTOR_CATALOG),
        high_risk_symptoms=dict(catalog.HIGH_RISK_SYMPTOM_POINTS),
        critical_risk_factors=dict(catalog.CRITICAL_RISK_FACTOR_POINTS),
    )


@app.post(f"{API_PREFIX}/assessment", response_model=AssessmentResponse, tags=["Assessment"])
async def run_assessment(request: AssessmentRequest):
    """
    Run the cardiac risk assessment.

    Uses the given patient record, or the most recently saved profile when
    no record_id is supplied.
    """
    try:
        assessment = request.to_assessment()
    except ValueError as e:
        logger.warning(f"Invalid assessment input: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    record_id, report = _assessment_service.run_assessment(assessment, record_id=request.record_id)
    return AssessmentResponse.from_report(record_id, report)


# ---- Reports ----

@app.get(f"{API_PREFIX}/reports/{{report_id}}", tags=["Reports"])
async def get_report(report_id: str):
    """Get a generated report as JSON."""
    record_id, report = _assessment_service.get_report(report_id)
    body = report.to_dict()
    body["record_id"] = record_id
    return body


@app.get(f"{API_PREFIX}/reports/{{report_id}}/download", tags=["Reports"])
async def download_report(report_id: str, format: str = Query(default="pdf", description="pdf, txt or html")):
    """Download a generated report."""
    content, media_type, filename = await asyncio.to_thread(
        _assessment_service.export_report, report_id, format
    )
    return _attachment(content, media_type, filename)


# ---- AI proxies ----

@app.post("/api/gemini", response_model=GeminiQueryResponse, tags=["AI"])
async def ask_gemini(request: GeminiQueryRequest):
    """Health chat search backed by Gemini."""
    query = request.query.strip()
    if not query:
        return JSONResponse(status_code=400, content={"error": "Query is required", "response": ""})

    if not _gemini_client.is_available:
        logger.error("Gemini query rejected: API key not configured")
        return JSONResponse(
            status_code=503,
            content={"error": "Gemini API key not configured", "response": SERVICE_UNAVAILABLE_MESSAGE}
        )

    result = await asyncio.to_thread(_gemini_client.ask_health_question, query)
    if result.is_fallback:
        logger.error(f"Gemini query failed: {result.error}")
        return JSONResponse(
            status_code=502,
            content={"error": result.error or "Gemini request failed", "response": REQUEST_FAILED_MESSAGE}
        )

    return GeminiQueryResponse(response=result.text, query=query)


@app.post("/api/analyze-pdf", response_model=PdfAnalysisResponse, tags=["AI"])
async def analyze_pdf(pdf: Optional[UploadFile] = File(default=None)):
    """Summarize an uploaded medical report PDF with Gemini."""
    if pdf is None or not pdf.filename:
        return JSONResponse(status_code=400, content={"error": "No PDF file uploaded"})

    if pdf.content_type != "application/pdf" and not pdf.filename.lower().endswith(".pdf"):
        return JSONResponse(status_code=400, content={"error": "Only PDF files are allowed"})

    # Read at most one byte past the limit
    limit = settings.max_upload_bytes
    too_large = pdf.size is not None and pdf.size > limit
    if not too_large:
        data = await pdf.read(limit + 1)
        too_large = len(data) > limit
    if too_large:
        logger.warning(f"Rejected upload {pdf.filename}: over {limit} bytes")
        return JSONResponse(
            status_code=413,
            content={"error": f"File too large (max {settings.max_upload_mb} MB)"}
        )

    if not _gemini_client.is_available:
        logger.error("PDF analysis rejected: API key not configured")
        return JSONResponse(status_code=503, content={"error": SERVICE_UNAVAILABLE_MESSAGE})

    result = await asyncio.to_thread(_gemini_client.summarize_pdf, data)
    if result.is_fallback:
        logger.error(f"PDF analysis failed for {pdf.filename}: {result.error}")
        return JSONResponse(status_code=502, content={"error": "Error analyzing PDF"})

    return PdfAnalysisResponse(report=result.text)


# ---- Application Lifecycle ----

@app.on_event("startup")
async def startup_event():
    """Initialize on startup."""
    logger.info(f"{settings.app_name} starting up...")
    logger.info("API ready to accept requests")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info(f"{settings.app_name} shutting down...")


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
