from flask import jsonify

from voltbid.constants import (
    LINE_ITEM_CATEGORIES,
    MATERIAL_CATEGORIES,
    PROJECT_STATUSES,
    PROJECT_TYPES,
    UNITS,
)
from voltbid.extensions import db
from voltbid.services.settings_service import get_settings, update_settings
from voltbid.utils.validators import validate_settings

from . import bp, json_body, validation_failed


@bp.get("/settings")
def get_settings_json():
    row = get_settings(db.session)
    db.session.commit()  # persist the row if it was just created
    return jsonify(row.to_dict()), 200


@bp.put("/settings")
def put_settings_json():
    clean, errors = validate_settings(json_body())
    if errors:
        return validation_failed(errors)

    row = update_settings(db.session, clean)
    db.session.commit()
    return jsonify(row.to_dict()), 200


@bp.get("/meta")
def meta():
    """Vocabularies the client needs to build its pickers."""
    return jsonify({
        "line_item_categories": LINE_ITEM_CATEGORIES,
        "material_categories": MATERIAL_CATEGORIES,
        "units": UNITS,
        "project_statuses": PROJECT_STATUSES,
        "project_types": PROJECT_TYPES,
    }), 200
