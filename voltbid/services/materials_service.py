from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from voltbid.constants import MATERIAL_CATEGORIES, UNITS
from voltbid.models.material import Material
from voltbid.services.errors import NotFoundError, ServiceError

logger = logging.getLogger(__name__)


def _norm(val: object) -> str:
    """Lower/trim and collapse inner whitespace; None -> ''."""
    s = "" if val is None else str(val)
    s = re.sub(r"\s+", " ", s.strip().lower())
    return s


def list_materials(
    session: Session,
    *,
    search: Optional[str] = None,
    category: Optional[str] = None,
) -> List[Material]:
    """Catalog ordered by category then name; search matches name or SKU."""
    query = session.query(Material)
    if category:
        query = query.filter(Material.category == category)
    if search:
        like = f"%{search.strip().lower()}%"
        query = query.filter(
            (func.lower(Material.name).like(like)) | (func.lower(Material.sku).like(like))
        )
    return query.order_by(Material.category.asc(), func.lower(Material.name).asc()).all()


def get_material(session: Session, material_id: int) -> Material:
    obj = session.get(Material, material_id)
    if not obj:
        raise NotFoundError(f"Material {material_id} not found")
    return obj


def create_material(session: Session, **fields) -> Material:
    m = Material(**fields)
    session.add(m)
    try:
        session.flush()  # unique SKU
    except IntegrityError as e:
        session.rollback()
        raise ServiceError("A material with this SKU already exists.") from e
    return m


def update_material(session: Session, material_id: int, **changes) -> Material:
    m = get_material(session, material_id)
    for key, value in changes.items():
        setattr(m, key, value)
    try:
        session.flush()
    except IntegrityError as e:
        session.rollback()
        raise ServiceError("A material with this SKU already exists.") from e
    return m


def delete_material(session: Session, material_id: int) -> None:
    m = get_material(session, material_id)
    session.delete(m)
    session.flush()


def _cell(val) -> Optional[str]:
    """Spreadsheet cell to trimmed text; NaN/blank -> None."""
    if val is None or pd.isna(val):
        return None
    return str(val).strip() or None


def _read_seed(path: Path) -> pd.DataFrame:
    if path.suffix.lower() in (".xlsx", ".xls"):
        return pd.read_excel(path)
    return pd.read_csv(path)


def import_materials_seed(session: Session, path) -> Tuple[int, int]:
    """
    Import/refresh the materials catalog from a CSV or XLSX seed file.

    Expected columns: Name, SKU, Category, Unit, Unit Price (header case-insensitive).
    Rows are matched on SKU when present, otherwise on normalized name.
    Returns: (inserted_count, updated_count)
    """
    path = Path(path)
    if not path.exists():
        raise ServiceError(f"Seed file not found: {path}")

    df = _read_seed(path)
    df = df.rename(columns={c: _norm(c).replace(" ", "_") for c in df.columns})
    missing = {"name", "category", "unit_price"} - set(df.columns)
    if missing:
        raise ServiceError(f"Seed file is missing columns: {', '.join(sorted(missing))}")

    # Defaults / coercions
    if "sku" not in df.columns:
        df["sku"] = None
    if "unit" not in df.columns:
        df["unit"] = "each"
    df["unit_price"] = pd.to_numeric(df["unit_price"], errors="coerce").fillna(0).round(2)
    df["unit"] = df["unit"].fillna("each").astype(str).str.strip().str.lower()

    by_sku = {m.sku: m for m in session.query(Material).filter(Material.sku.isnot(None))}
    by_name = {_norm(m.name): m for m in session.query(Material)}

    inserted = 0
    updated = 0
    for idx, r in df.iterrows():
        name = _cell(r["name"])
        if not name:
            raise ServiceError(f"Row {idx + 2}: material name is required.")
        category = _cell(r["category"])
        if category not in MATERIAL_CATEGORIES:
            raise ServiceError(f"Row {idx + 2}: unknown category {category!r}.")
        unit = r["unit"]
        if unit not in UNITS:
            raise ServiceError(f"Row {idx + 2}: unknown unit {unit!r}.")
        sku = _cell(r["sku"])

        existing = by_sku.get(sku) if sku else None
        if existing is None:
            existing = by_name.get(_norm(name))

        if existing is not None:
            updated += 1
            existing.name = name
            existing.sku = sku or existing.sku
            existing.category = category
            existing.unit = unit
            existing.unit_price = float(r["unit_price"])
        else:
            inserted += 1
            m = Material(name=name, sku=sku, category=category, unit=unit, unit_price=float(r["unit_price"]))
            session.add(m)
            by_name[_norm(name)] = m
            if sku:
                by_sku[sku] = m

    session.flush()
    logger.info("materials seed imported path=%s inserted=%d updated=%d", path, inserted, updated)
    return inserted, updated
