"""
Report Generation Module

Synthesizes the sectioned risk assessment report and exports it as
plain text, HTML (Jinja2) or PDF (reportlab).
"""
from .narrative import Report, ReportSection, synthesize, assess
from .text_report import render_text, render_html
from .pdf_report import ReportPdfGenerator, patient_info_filename

__all__ = [
    "Report",
    "ReportSection",
    "synthesize",
    "assess",
    "render_text",
    "render_html",
    "ReportPdfGenerator",
    "patient_info_filename",
]
