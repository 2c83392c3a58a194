from flask import jsonify, request

from voltbid.extensions import db
from voltbid.services.materials_service import (
    create_material as svc_create_material,
    delete_material as svc_delete_material,
    get_material as svc_get_material,
    list_materials as svc_list_materials,
    update_material as svc_update_material,
)
from voltbid.utils.validators import validate_material

from . import bp, json_body, validation_failed


@bp.get("/materials")
def list_materials():
    search = (request.args.get("search") or "").strip() or None
    category = (request.args.get("category") or "").strip() or None
    rows = svc_list_materials(db.session, search=search, category=category)
    return jsonify([m.to_dict() for m in rows]), 200


@bp.post("/materials")
def create_material():
    clean, errors = validate_material(json_body())
    if errors:
        return validation_failed(errors)

    m = svc_create_material(db.session, **clean)
    db.session.commit()
    return jsonify(m.to_dict()), 201


@bp.get("/materials/<int:material_id>")
def get_material(material_id: int):
    return jsonify(svc_get_material(db.session, material_id).to_dict()), 200


@bp.put("/materials/<int:material_id>")
def update_material(material_id: int):
    clean, errors = validate_material(json_body(), partial=True)
    if errors:
        return validation_failed(errors)

    m = svc_update_material(db.session, material_id, **clean)
    db.session.commit()
    return jsonify(m.to_dict()), 200


@bp.delete("/materials/<int:material_id>")
def delete_material(material_id: int):
    svc_delete_material(db.session, material_id)
    db.session.commit()
    return jsonify({"success": True}), 200
