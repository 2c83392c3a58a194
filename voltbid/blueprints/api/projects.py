from flask import current_app, jsonify, request

from voltbid.extensions import db
from voltbid.services.exports import project_payload
from voltbid.services.projects import (
    create_project as svc_create_project,
    delete_project as svc_delete_project,
    get_project as svc_get_project,
    list_projects as svc_list_projects,
    update_project as svc_update_project,
)
from voltbid.utils.validators import validate_project

from . import bp, json_body, validation_failed


@bp.get("/projects")
def list_projects():
    """All projects, newest first, each with live totals."""
    status = (request.args.get("status") or "").strip() or None
    search = (request.args.get("search") or "").strip() or None
    rows = svc_list_projects(db.session, status=status, search=search)
    return jsonify([project_payload(p) for p in rows]), 200


@bp.post("/projects")
def create_project():
    clean, errors = validate_project(json_body())
    if errors:
        return validation_failed(errors)

    project = svc_create_project(db.session, **clean)
    db.session.commit()
    current_app.logger.info("POST /api/projects id=%s", project.id)
    return jsonify(project_payload(project, include_items=True)), 201


@bp.get("/projects/<int:project_id>")
def get_project(project_id: int):
    project = svc_get_project(db.session, project_id)
    return jsonify(project_payload(project, include_items=True)), 200


@bp.put("/projects/<int:project_id>")
def update_project(project_id: int):
    clean, errors = validate_project(json_body(), partial=True)
    if errors:
        return validation_failed(errors)

    project = svc_update_project(db.session, project_id, **clean)
    db.session.commit()
    return jsonify(project_payload(project, include_items=True)), 200


@bp.delete("/projects/<int:project_id>")
def delete_project(project_id: int):
    svc_delete_project(db.session, project_id)
    db.session.commit()
    return jsonify({"success": True}), 200
