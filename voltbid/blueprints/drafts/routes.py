"""
Draft estimate endpoints. The session cookie carries only a draft token; the
draft itself is stored server-side and rebuilt from its JSON payload on every
request. Nothing becomes a Project until commit.
"""
from flask import current_app, jsonify, session

from voltbid.blueprints.api import json_body, validation_failed
from voltbid.extensions import db
from voltbid.services.calculations import itemize
from voltbid.services.draft import (
    DraftEstimate,
    commit_draft,
    load_stored_draft,
    new_draft_token,
    store_draft,
)
from voltbid.utils.validators import clean_str, validate_line_item, validate_project

from . import bp

SESSION_KEY = "draft_token"

_INFO_KEYS = ("name", "client_name", "client_company", "address", "city",
              "state", "zip", "type", "description")
_RATE_KEYS = ("overhead_pct", "profit_pct", "labor_rate")


def load_draft() -> DraftEstimate:
    return load_stored_draft(db.session, session.get(SESSION_KEY))


def save_draft(draft: DraftEstimate) -> None:
    token = session.get(SESSION_KEY)
    if not token:
        token = session[SESSION_KEY] = new_draft_token()
    store_draft(db.session, token, draft)
    db.session.commit()


def _payload(draft: DraftEstimate) -> dict:
    data = draft.to_dict()
    rows = itemize(draft.line_items, draft.labor_rate)
    for raw, row in zip(data["line_items"], rows):
        raw["effective_labor_rate"] = row.labor_rate
        raw.update(row.cost.to_dict())
    data["totals"] = draft.get_totals().to_dict()
    return data


@bp.get("/current")
def get_current():
    return jsonify(_payload(load_draft())), 200


@bp.put("/current")
def update_current():
    """
    Partial update of the draft metadata:
      {"project_info": {...}, "overhead_pct", "profit_pct", "labor_rate",
       "notes", "terms", "step" | "action": "next"|"prev"}
    """
    data = json_body()
    if not isinstance(data, dict):
        return validation_failed({"__all__": "Payload must be a JSON object."})

    info = data.get("project_info") or {}
    if not isinstance(info, dict):
        return validation_failed({"project_info": "Must be an object."})
    # Drafts may be incomplete: blank fields clear the value, the rest are checked.
    # commit_draft enforces the required details.
    info = {k: v for k, v in info.items() if k in _INFO_KEYS}
    blanks = {k for k, v in info.items() if clean_str(v) is None}
    info_clean, errors = validate_project({k: v for k, v in info.items() if k not in blanks}, partial=True)
    info_clean.update({k: "" for k in blanks})
    rates_clean, rate_errors = validate_project({k: data[k] for k in _RATE_KEYS if k in data}, partial=True)
    errors.update(rate_errors)
    action = data.get("action")
    if action not in (None, "next", "prev"):
        errors["action"] = "Action must be 'next' or 'prev'."
    step = data.get("step")
    if step is not None and (isinstance(step, bool) or not isinstance(step, int)):
        errors["step"] = "Step must be an integer."
    if errors:
        return validation_failed(errors)

    draft = load_draft()
    draft.set_project_info(**info_clean)
    draft.set_rates(**rates_clean)
    for key in ("notes", "terms"):
        if key in data:
            setattr(draft, key, str(data.get(key) or ""))
    if step is not None:
        draft.set_step(step)
    elif action == "next":
        draft.next_step()
    elif action == "prev":
        draft.prev_step()
    save_draft(draft)
    return jsonify(_payload(draft)), 200


@bp.delete("/current")
def reset_current():
    draft = load_draft()
    draft.reset()
    save_draft(draft)
    return jsonify(_payload(draft)), 200


@bp.post("/current/items")
def add_item():
    clean, errors = validate_line_item(json_body())
    if errors:
        return validation_failed(errors)

    draft = load_draft()
    item = draft.add_item(**clean)
    save_draft(draft)
    return jsonify({"temp_id": item.temp_id, "draft": _payload(draft)}), 201


@bp.patch("/current/items/<temp_id>")
def update_item(temp_id: str):
    clean, errors = validate_line_item(json_body(), partial=True)
    if errors:
        return validation_failed(errors)

    draft = load_draft()
    if draft.update_item(temp_id, **clean) is None:
        return jsonify({"error": "not_found"}), 404
    save_draft(draft)
    return jsonify(_payload(draft)), 200


@bp.delete("/current/items/<temp_id>")
def remove_item(temp_id: str):
    draft = load_draft()
    if not draft.remove_item(temp_id):
        return jsonify({"error": "not_found"}), 404
    save_draft(draft)
    return jsonify(_payload(draft)), 200


@bp.get("/current/totals")
def totals():
    return jsonify(load_draft().get_totals().to_dict()), 200


@bp.post("/current/commit")
def commit():
    draft = load_draft()
    # ServiceError -> 409 when details are missing or the draft was already saved
    project = commit_draft(db.session, draft)
    save_draft(draft)
    current_app.logger.info("draft committed as project id=%s", project.id)
    return jsonify({"project_id": project.id, "draft": _payload(draft)}), 201
