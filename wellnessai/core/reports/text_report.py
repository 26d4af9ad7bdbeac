"""
Text & HTML Report Export

Renders a Report through Jinja2 templates. Renderers are read-only over the
report.
"""
import os

import jinja2

from wellnessai.core import catalog
from wellnessai.core.reports.narrative import Report
from wellnessai.utils import get_logger

logger = get_logger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")

# Pastel tier backgrounds
TIER_COLORS = {
    "LOW": "#D1FAE5",
    "MODERATE": "#FEF3C7",
    "URGENT": "#FEE2E2",
}

_text_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(TEMPLATE_DIR),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)

_html_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(TEMPLATE_DIR),
    autoescape=jinja2.select_autoescape(['html', 'xml'])
)


def render_text(report: Report) -> bytes:
    """Render the plain-text export."""
    template = _text_env.get_template("report.txt.j2")
    content = template.render(report=report)
    logger.debug(f"Rendered text report {report.report_id} ({len(content)} chars)")
    return content.encode("utf-8")


def render_html(report: Report) -> bytes:
    """Render the HTML export."""
    template = _html_env.get_template("report.html")
    content = template.render(
        report=report,
        max_score=catalog.MAX_RISK_SCORE,
        tier_colors=TIER_COLORS,
    )
    return content.encode("utf-8")
