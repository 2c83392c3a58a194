"""
Printable estimate (HTML, and PDF through WeasyPrint).

Rendering needs an application context for ``render_template``.
"""
from __future__ import annotations

import logging
from datetime import datetime

from flask import render_template

from voltbid.services.calculations import itemize, rollup
from voltbid.services.projects import ordered_line_items

logger = logging.getLogger(__name__)

TEMPLATE = "exports/estimate.html"


def _context(project, settings) -> dict:
    rows = itemize(ordered_line_items(project), project.labor_rate)
    return dict(
        project=project,
        settings=settings,
        rows=rows,
        totals=rollup(rows, project.overhead_pct, project.profit_pct),
        generated_on=datetime.now().strftime("%B %d, %Y"),
    )


def render_estimate_html(project, settings=None) -> str:
    return render_template(TEMPLATE, **_context(project, settings))


def render_estimate_pdf(project, settings=None, base_url=None) -> bytes:
    """HTML rendering fed to WeasyPrint; the library is only imported when a PDF is asked for."""
    from weasyprint import HTML

    html = render_estimate_html(project, settings)
    pdf = HTML(string=html, base_url=base_url).write_pdf()
    logger.info("pdf rendered project_id=%s bytes=%d", project.id, len(pdf))
    return pdf
