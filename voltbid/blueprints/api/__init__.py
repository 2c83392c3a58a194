from flask import Blueprint, jsonify, request

bp = Blueprint("api", __name__, url_prefix="/api")


def json_body():
    """Parsed JSON body, or None when the request carried none / invalid JSON."""
    return request.get_json(silent=True)


def validation_failed(errors):
    return jsonify({"error": "validation_failed", "fields": errors}), 400


# Import route modules so their @bp decorators run
from . import projects     # noqa: E402,F401  /api/projects
from . import line_items   # noqa: E402,F401  /api/projects/<id>/line-items
from . import materials    # noqa: E402,F401  /api/materials
from . import settings     # noqa: E402,F401  /api/settings, /api/meta
