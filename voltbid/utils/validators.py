"""
Request validation for the JSON API.

Each ``validate_*`` returns ``(clean, errors)``: ``clean`` holds only the
fields that were supplied and passed, coerced to their storage types;
``errors`` maps field name -> message. With ``partial=True`` (updates) missing
required fields are not reported.
"""
import math
import re
from typing import Any, Dict, Optional, Tuple

from voltbid.constants import (
    LINE_ITEM_CATEGORIES,
    MATERIAL_CATEGORIES,
    PROJECT_STATUSES,
    PROJECT_TYPES,
    UNITS,
)

# Simple, pragmatic patterns
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_STATE_RE = re.compile(r"^[A-Za-z]{2}$")
_ZIP_RE = re.compile(r"^\d{5}(-\d{4})?$")

Result = Tuple[Dict[str, Any], Dict[str, str]]


def clean_str(val: Optional[str], max_len: int = 255) -> Optional[str]:
    """
    Collapse whitespace, trim, enforce max length. Returns None if empty after cleaning.
    """
    if val is None:
        return None
    s = re.sub(r"\s+", " ", str(val)).strip()
    if not s:
        return None
    return s[:max_len]


def is_valid_email(val: Optional[str]) -> bool:
    if not val:
        return True
    return bool(_EMAIL_RE.match(val))


def normalize_phone(val: Optional[str]) -> Optional[str]:
    """
    Normalize US phone to (###) ###-####. Accept 10 digits or 11 starting with '1'.
    Returns None if invalid or empty.
    """
    if not val:
        return None
    digits = "".join(re.findall(r"\d", val))
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) != 10:
        return None
    return f"({digits[0:3]}) {digits[3:6]}-{digits[6:]}"


def is_valid_state(val: Optional[str]) -> bool:
    if not val:
        return True
    return bool(_STATE_RE.match(val.strip()))


def is_valid_zip(val: Optional[str]) -> bool:
    if not val:
        return True
    return bool(_ZIP_RE.match(val.strip()))


def _finite(value: Any) -> Optional[float]:
    # bools are ints in Python; a JSON true is not a quantity
    if isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _non_negative(value: Any) -> Optional[float]:
    f = _finite(value)
    return f if f is not None and f >= 0 else None


def _fraction(value: Any) -> Optional[float]:
    f = _finite(value)
    return f if f is not None and 0 <= f <= 1 else None


def _text(data, clean, errors, key, *, required, partial, max_len=255, label=None):
    if key not in data:
        if required and not partial:
            errors[key] = f"{label or key.replace('_', ' ').capitalize()} is required."
        return
    v = clean_str(data.get(key), max_len=max_len)
    if v is None and required:
        errors[key] = f"{label or key.replace('_', ' ').capitalize()} is required."
        return
    clean[key] = v


def validate_project(data: Any, partial: bool = False) -> Result:
    if not isinstance(data, dict):
        return {}, {"__all__": "Payload must be a JSON object."}
    clean, errors = {}, {}

    _text(data, clean, errors, "name", required=True, partial=partial, max_len=200, label="Project name")
    _text(data, clean, errors, "client_name", required=True, partial=partial, max_len=200, label="Client name")
    _text(data, clean, errors, "client_company", required=False, partial=partial, max_len=200)
    _text(data, clean, errors, "address", required=True, partial=partial, max_len=500, label="Address")
    _text(data, clean, errors, "city", required=True, partial=partial, max_len=100, label="City")
    _text(data, clean, errors, "zip", required=True, partial=partial, max_len=10, label="ZIP code")
    if clean.get("zip") and not is_valid_zip(clean["zip"]):
        errors["zip"] = "ZIP code must be 5 digits or ZIP+4."
    _text(data, clean, errors, "description", required=False, partial=partial, max_len=2000)
    _text(data, clean, errors, "notes", required=False, partial=partial, max_len=10000)
    _text(data, clean, errors, "terms", required=False, partial=partial, max_len=10000)

    if "state" in data:
        state = clean_str(data.get("state"), max_len=2)
        if state is None or not is_valid_state(state):
            errors["state"] = "State must be a two-letter code."
        else:
            clean["state"] = state.upper()

    if "type" in data:
        if data.get("type") not in PROJECT_TYPES:
            errors["type"] = f"Type must be one of: {', '.join(PROJECT_TYPES)}."
        else:
            clean["type"] = data["type"]

    if "status" in data:
        if not partial:
            errors["status"] = "Status can only be changed on update."
        elif data.get("status") not in PROJECT_STATUSES:
            errors["status"] = f"Status must be one of: {', '.join(PROJECT_STATUSES)}."
        else:
            clean["status"] = data["status"]

    for key in ("overhead_pct", "profit_pct"):
        if key in data:
            v = _fraction(data.get(key))
            if v is None:
                errors[key] = "Must be a fraction between 0 and 1."
            else:
                clean[key] = v

    if "labor_rate" in data:
        v = _non_negative(data.get("labor_rate"))
        if v is None:
            errors["labor_rate"] = "Labor rate must be a non-negative number."
        else:
            clean["labor_rate"] = v

    return clean, errors


def validate_line_item(data: Any, partial: bool = False) -> Result:
    if not isinstance(data, dict):
        return {}, {"__all__": "Payload must be a JSON object."}
    clean, errors = {}, {}

    _text(data, clean, errors, "description", required=True, partial=partial, max_len=500, label="Description")

    if "category" in data:
        if data.get("category") not in LINE_ITEM_CATEGORIES:
            errors["category"] = "Category must be one of the line-item categories."
        else:
            clean["category"] = data["category"]
    elif not partial:
        errors["category"] = "Category is required."

    if "unit" in data:
        if data.get("unit") not in UNITS:
            errors["unit"] = f"Unit must be one of: {', '.join(UNITS)}."
        else:
            clean["unit"] = data["unit"]
    elif not partial:
        errors["unit"] = "Unit is required."

    for key, label in (("quantity", "Quantity"), ("unit_price", "Unit price")):
        if key in data:
            v = _non_negative(data.get(key))
            if v is None:
                errors[key] = f"{label} must be a non-negative number."
            else:
                clean[key] = v
        elif not partial:
            errors[key] = f"{label} is required."

    if "labor_hours" in data:
        v = _non_negative(data.get("labor_hours"))
        if v is None:
            errors["labor_hours"] = "Labor hours must be a non-negative number."
        else:
            clean["labor_hours"] = v

    if "labor_rate" in data:
        # null clears the override so the item inherits the project rate again
        if data.get("labor_rate") is None:
            clean["labor_rate"] = None
        else:
            v = _non_negative(data.get("labor_rate"))
            if v is None:
                errors["labor_rate"] = "Labor rate must be a non-negative number or null."
            else:
                clean["labor_rate"] = v

    if "material_id" in data:
        mid = data.get("material_id")
        if mid is None:
            clean["material_id"] = None
        elif isinstance(mid, int) and not isinstance(mid, bool):
            clean["material_id"] = mid
        elif str(mid).isdigit():
            clean["material_id"] = int(mid)
        else:
            errors["material_id"] = "Material id must be an integer or null."

    if "sort_order" in data:
        so = data.get("sort_order")
        if isinstance(so, bool) or not isinstance(so, int) or so < 0:
            errors["sort_order"] = "Sort order must be a non-negative integer."
        else:
            clean["sort_order"] = so

    return clean, errors


def validate_material(data: Any, partial: bool = False) -> Result:
    if not isinstance(data, dict):
        return {}, {"__all__": "Payload must be a JSON object."}
    clean, errors = {}, {}

    _text(data, clean, errors, "name", required=True, partial=partial, max_len=200, label="Material name")
    _text(data, clean, errors, "sku", required=False, partial=partial, max_len=50)

    if "category" in data:
        if data.get("category") not in MATERIAL_CATEGORIES:
            errors["category"] = "Category must be one of the material categories."
        else:
            clean["category"] = data["category"]
    elif not partial:
        errors["category"] = "Category is required."

    if "unit" in data:
        if data.get("unit") not in UNITS:
            errors["unit"] = f"Unit must be one of: {', '.join(UNITS)}."
        else:
            clean["unit"] = data["unit"]
    elif not partial:
        errors["unit"] = "Unit is required."

    if "unit_price" in data:
        v = _non_negative(data.get("unit_price"))
        if v is None:
            errors["unit_price"] = "Price cannot be negative."
        else:
            clean["unit_price"] = v
    elif not partial:
        errors["unit_price"] = "Unit price is required."

    return clean, errors


# Settings keys the API may write, with their storage type
SETTINGS_FIELDS = {
    "company_name": str,
    "address": str,
    "phone": str,
    "license": str,
    "email": str,
    "website": str,
    "default_labor_rate": float,
    "default_overhead": float,
    "default_profit": float,
    "tax_rate": float,
    "default_terms": str,
}


def validate_settings(data: Any) -> Result:
    """Allow-listed, type-coerced settings update; unknown keys are dropped."""
    if not isinstance(data, dict):
        return {}, {"__all__": "Payload must be a JSON object."}
    clean, errors = {}, {}
    for key, kind in SETTINGS_FIELDS.items():
        if key not in data:
            continue
        if kind is float:
            v = _non_negative(data.get(key))
            if v is None:
                errors[key] = "Must be a non-negative number."
            elif key in ("default_overhead", "default_profit", "tax_rate") and v > 1:
                errors[key] = "Must be a fraction between 0 and 1."
            else:
                clean[key] = v
        else:
            clean[key] = "" if data.get(key) is None else str(data.get(key)).strip()

    if "company_name" in clean and not clean["company_name"]:
        errors["company_name"] = "Company name is required."
    if "email" in clean and not is_valid_email(clean["email"]):
        errors["email"] = "Email address is not valid."
    if clean.get("phone"):
        phone = normalize_phone(clean["phone"])
        if phone is None:
            errors["phone"] = "Phone must be a 10-digit US number."
        else:
            clean["phone"] = phone
    return clean, errors
