"""
PDF Report Generator

Generates downloadable PDFs with reportlab:
- Risk assessment report: every narrative section of a Report
- Patient information sheet: the intake profile
"""
from datetime import datetime
from typing import List, Optional, Tuple
from xml.sax.saxutils import escape
import io

from reportlab.lib.pagesizes import A4
from reportlab.lib.colors import HexColor
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.lib.enums import TA_LEFT
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, KeepTogether

from wellnessai.core import catalog
from wellnessai.core.inference.risk_engine import UrgencyTier
from wellnessai.core.intake.profile import PatientProfile
from wellnessai.core.reports.narrative import Report
from wellnessai.utils import get_logger

logger = get_logger(__name__)

# Tier colors (Pastel backgrounds / dark text)
TIER_BG_COLORS = {
    UrgencyTier.LOW: HexColor("#D1FAE5"),       # Mint Green
    UrgencyTier.MODERATE: HexColor("#FEF3C7"),  # Pale Amber
    UrgencyTier.URGENT: HexColor("#FEE2E2"),    # Pale Rose
}

TIER_TEXT_COLORS = {
    UrgencyTier.LOW: HexColor("#065F46"),
    UrgencyTier.MODERATE: HexColor("#92400E"),
    UrgencyTier.URGENT: HexColor("#B91C1C"),
}


class ReportPdfGenerator:
    """
    Renders reports and patient sheets to PDF bytes.

    Nothing is written to disk; callers stream the returned bytes.
    """

    def __init__(self):
        self._styles = getSampleStyleSheet()
        self._create_custom_styles()
        logger.info("ReportPdfGenerator initialized")

    def _create_custom_styles(self):
        """Create custom paragraph styles with minimalist clinical design."""
        if 'ReportTitle' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='ReportTitle',
                parent=self._styles['Title'],
                fontSize=20,
                spaceAfter=12,
                textColor=HexColor("#111827"),
                alignment=TA_LEFT,
                fontName='Helvetica-Bold'
            ))

        if 'ReportSection' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='ReportSection',
                parent=self._styles['Heading2'],
                fontSize=12,
                spaceBefore=12,
                spaceAfter=6,
                textColor=HexColor("#374151"),
                fontName='Helvetica-Bold'
            ))

        if 'ReportBody' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='ReportBody',
                parent=self._styles['Normal'],
                fontSize=9,
                spaceAfter=4,
                leading=12,
                fontName='Helvetica'
            ))

        if 'SmallText' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='SmallText',
                parent=self._styles['Normal'],
                fontSize=8,
                textColor=HexColor("#6B7280"),
                spaceAfter=4,
                fontName='Helvetica'
            ))

    def _new_document(self, buffer: io.BytesIO, title: str) -> SimpleDocTemplate:
        return SimpleDocTemplate(
            buffer,
            pagesize=A4,
            title=title,
            rightMargin=0.6*inch,
            leftMargin=0.6*inch,
            topMargin=0.6*inch,
            bottomMargin=0.6*inch
        )

    def _para(self, text: str, style: str = 'ReportBody') -> Paragraph:
        return Paragraph(escape(text), self._styles[style])

    def generate_bytes(self, report: Report) -> bytes:
        """Render a risk assessment report to PDF bytes."""
        buffer = io.BytesIO()
        doc = self._new_document(buffer, f"Cardiac Risk Assessment {report.report_id}")
        story = []

        story.append(self._para("Cardiac Risk Assessment Report", 'ReportTitle'))

        meta_data = [
            ["Report ID", report.report_id, "Generated", report.generated_at.strftime('%Y-%m-%d %H:%M')],
            ["Patient", report.profile.full_name, "Risk Score", f"{report.risk.score}/{catalog.MAX_RISK_SCORE}"],
        ]
        meta_table = Table(meta_data, colWidths=[1.0*inch, 2.3*inch, 1.0*inch, 2.3*inch])
        meta_table.setStyle(TableStyle([
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
            ('TEXTCOLOR', (0, 0), (0, -1), HexColor("#6B7280")),
            ('TEXTCOLOR', (2, 0), (2, -1), HexColor("#6B7280")),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 2),
            ('TOPPADDING', (0, 0), (-1, -1), 2),
        ]))
        story.append(meta_table)
        story.append(Spacer(1, 10))

        tier = report.urgency.tier
        tier_table = Table([[f"URGENCY: {tier.value}", report.urgency.reasoning]],
                           colWidths=[1.6*inch, 5.0*inch])
        tier_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), TIER_BG_COLORS[tier]),
            ('TEXTCOLOR', (0, 0), (-1, -1), TIER_TEXT_COLORS[tier]),
            ('FONTNAME', (0, 0), (0, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('TOPPADDING', (0, 0), (-1, -1), 6),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ]))
        story.append(tier_table)

        for section in report.sections:
            if section.key == "disclaimer":
                continue
            block = [self._para(section.title.upper(), 'ReportSection')]
            block.extend(self._para(line) for line in section.lines)
            story.append(KeepTogether(block))

        story.append(Spacer(1, 12))
        story.append(self._para(report.disclaimer, 'SmallText'))

        doc.build(story)
        logger.info(f"PDF report rendered: {report.report_id}")
        return buffer.getvalue()

    def generate_patient_info_bytes(
        self,
        profile: PatientProfile,
        generated_at: Optional[datetime] = None
    ) -> bytes:
        """Render the intake patient information sheet to PDF bytes."""
        generated_at = generated_at or datetime.now()
        buffer = io.BytesIO()
        doc = self._new_document(buffer, f"Patient Information - {profile.full_name}")
        story = [self._para("WellnessAI - Patient Information", 'ReportTitle')]

        groups: List[Tuple[str, List[Tuple[str, str]]]] = [
            ("Personal Information", [
                ("First Name", profile.first_name),
                ("Last Name", profile.last_name),
                ("Email", profile.email),
                ("Phone", profile.phone),
                ("Date of Birth", profile.date_of_birth),
                ("Age", str(profile.age)),
                ("BMI", f"{profile.bmi}"),
                ("Gender", profile.gender),
                ("Insurance Provider", profile.insurance_provider),
                ("Policy Number", profile.policy_number),
            ]),
            ("Physical Information", [
                ("Height", f"{profile.height_cm:g} cm"),
                ("Weight", f"{profile.weight_kg:g} kg"),
                ("Blood Group", profile.blood_group),
            ]),
            ("Emergency Contact", [
                ("Contact Name", profile.emergency_contact),
                ("Contact Phone", profile.emergency_phone),
            ]),
        ]

        for title, fields in groups:
            rows = [[label, value] for label, value in fields if value]
            if not rows:
                continue
            story.append(self._para(title, 'ReportSection'))
            table = Table(rows, colWidths=[1.8*inch, 4.6*inch])
            table.setStyle(TableStyle([
                ('FONTSIZE', (0, 0), (-1, -1), 10),
                ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
                ('TEXTCOLOR', (0, 0), (0, -1), HexColor("#4B5563")),
                ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
                ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
                ('TOPPADDING', (0, 0), (-1, -1), 3),
            ]))
            story.append(table)

        medical = [
            ("Allergies", profile.allergies),
            ("Current Medications", profile.medications),
            ("Medical History", profile.medical_history),
        ]
        if any(value for _, value in medical):
            story.append(self._para("Medical Information", 'ReportSection'))
            for label, value in medical:
                if value:
                    story.append(self._para(f"{label}:", 'SmallText'))
                    story.append(self._para(value))

        story.append(Spacer(1, 18))
        story.append(self._para(f"Generated on: {generated_at.strftime('%Y-%m-%d')}", 'SmallText'))
        story.append(self._para("WellnessAI Patient Information System", 'SmallText'))

        doc.build(story)
        logger.info(f"Patient information PDF rendered for {profile.full_name}")
        return buffer.getvalue()


def patient_info_filename(profile: PatientProfile, generated_at: Optional[datetime] = None) -> str:
    """First_Last_YYYY-MM-DD.pdf, falling back to Patient_Info."""
    generated_at = generated_at or datetime.now()
    first = profile.first_name.strip() or "Patient"
    last = profile.last_name.strip() or "Info"
    return f"{first}_{last}_{generated_at.strftime('%Y-%m-%d')}.pdf"
