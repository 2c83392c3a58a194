import pytest

from voltbid.utils.validators import (
    clean_str,
    normalize_phone,
    validate_line_item,
    validate_project,
)


def test_clean_str():
    assert clean_str("  a   b ") == "a b"
    assert clean_str("   ") is None
    assert clean_str("abcdef", max_len=3) == "abc"


@pytest.mark.parametrize("raw,expected", [
    ("786-299-2168", "(786) 299-2168"),
    ("1 (786) 299 2168", "(786) 299-2168"),
    ("299-2168", None),
    ("", None),
])
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_project_partial_only_checks_supplied_fields():
    clean, errors = validate_project({"state": "ga", "labor_rate": 0}, partial=True)
    assert errors == {}
    assert clean == {"state": "GA", "labor_rate": 0.0}


@pytest.mark.parametrize("value", [float("nan"), float("inf"), "12x", True, -1])
def test_line_item_rejects_non_finite_or_negative_quantity(value):
    _, errors = validate_line_item({"quantity": value}, partial=True)
    assert "quantity" in errors


def test_line_item_category_vocabulary_is_exact():
    _, errors = validate_line_item({"category": "demolition"}, partial=True)
    assert "category" in errors
    clean, errors = validate_line_item({"category": "Demolition"}, partial=True)
    assert errors == {} and clean["category"] == "Demolition"


def test_line_item_null_rate_clears_override():
    clean, errors = validate_line_item({"labor_rate": None, "material_id": "12"}, partial=True)
    assert errors == {}
    assert clean == {"labor_rate": None, "material_id": 12}
