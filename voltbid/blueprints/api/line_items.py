from flask import jsonify

from voltbid.extensions import db
from voltbid.services.calculations import itemize
from voltbid.services.exports.totals import line_item_payload
from voltbid.services.projects import (
    add_line_item as svc_add_line_item,
    delete_line_item as svc_delete_line_item,
    get_project as svc_get_project,
    list_line_items as svc_list_line_items,
    update_line_item as svc_update_line_item,
)
from voltbid.utils.validators import validate_line_item

from . import bp, json_body, validation_failed


def _costed(project, items):
    return [line_item_payload(r) for r in itemize(items, project.labor_rate)]


@bp.get("/projects/<int:project_id>/line-items")
def list_line_items(project_id: int):
    items = svc_list_line_items(db.session, project_id)
    project = svc_get_project(db.session, project_id)
    return jsonify(_costed(project, items)), 200


@bp.post("/projects/<int:project_id>/line-items")
def create_line_item(project_id: int):
    data = json_body()
    # A catalog material supplies description/unit/price, so those become optional
    from_catalog = isinstance(data, dict) and data.get("material_id") is not None
    clean, errors = validate_line_item(data, partial=from_catalog)
    if from_catalog and "category" not in clean and "category" not in errors:
        errors["category"] = "Category is required."
    if errors:
        return validation_failed(errors)

    item = svc_add_line_item(db.session, project_id, **clean)
    db.session.commit()
    return jsonify(_costed(item.project, [item])[0]), 201


@bp.put("/projects/<int:project_id>/line-items/<int:item_id>")
def update_line_item(project_id: int, item_id: int):
    clean, errors = validate_line_item(json_body(), partial=True)
    if errors:
        return validation_failed(errors)

    item = svc_update_line_item(db.session, project_id, item_id, **clean)
    db.session.commit()
    return jsonify(_costed(item.project, [item])[0]), 200


@bp.delete("/projects/<int:project_id>/line-items/<int:item_id>")
def delete_line_item(project_id: int, item_id: int):
    svc_delete_line_item(db.session, project_id, item_id)
    db.session.commit()
    return jsonify({"success": True}), 200
