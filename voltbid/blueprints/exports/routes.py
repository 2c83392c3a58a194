from flask import current_app, jsonify, make_response, request

from voltbid.extensions import db, limiter
from voltbid.services.exports import (
    build_estimate_workbook,
    render_estimate_html,
    render_estimate_pdf,
)
from voltbid.services.projects import get_project
from voltbid.services.settings_service import get_settings
from voltbid.utils.helpers import safe_filename

from . import bp

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _export_limit():
    return current_app.config.get("EXPORT_RATE_LIMIT", "30 per minute")


def _load():
    """
    Resolve ``{"project_id": <int>}`` from the body.
    Returns (project, settings, None) or (None, None, error_response).
    """
    data = request.get_json(silent=True) or {}
    pid = data.get("project_id") if isinstance(data, dict) else None
    if isinstance(pid, bool) or not isinstance(pid, int):
        if isinstance(pid, str) and pid.isdigit():
            pid = int(pid)
        else:
            return None, None, (jsonify({"error": "validation_failed",
                                         "fields": {"project_id": "Project id must be an integer."}}), 400)
    project = get_project(db.session, pid)  # NotFoundError -> 404
    settings = get_settings(db.session)
    return project, settings, None


@bp.post("/excel")
@limiter.limit(_export_limit)
def export_excel():
    project, settings, err = _load()
    if err:
        return err

    data = build_estimate_workbook(project, settings)
    filename = f"{safe_filename(project.name)}_Estimate.xlsx"
    resp = make_response(data)
    resp.headers["Content-Type"] = XLSX_MIMETYPE
    resp.headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return resp


@bp.post("/pdf")
@limiter.limit(_export_limit)
def export_pdf():
    project, settings, err = _load()
    if err:
        return err

    pdf_bytes = render_estimate_pdf(project, settings, base_url=request.host_url)
    filename = f"{safe_filename(project.name)}_Estimate.pdf"
    resp = make_response(pdf_bytes)
    resp.headers["Content-Type"] = "application/pdf"
    resp.headers["Content-Disposition"] = f'inline; filename="{filename}"'
    return resp


@bp.post("/html")
@limiter.limit(_export_limit)
def export_html():
    project, settings, err = _load()
    if err:
        return err

    html = render_estimate_html(project, settings)
    resp = make_response(html)
    resp.headers["Content-Type"] = "text/html; charset=utf-8"
    return resp
