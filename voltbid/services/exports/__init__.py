"""
Presentation adapters over the estimate rollup: JSON payloads, the xlsx
workbook and the printable document. None of them compute totals on their own.
"""
from voltbid.services.exports.document import render_estimate_html, render_estimate_pdf
from voltbid.services.exports.totals import project_payload, totals_payload
from voltbid.services.exports.workbook import build_estimate_workbook

__all__ = [
    "build_estimate_workbook",
    "project_payload",
    "render_estimate_html",
    "render_estimate_pdf",
    "totals_payload",
]
