from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql import func

from voltbid.models.line_item import LineItem
from voltbid.models.material import Material
from voltbid.models.project import Project
from voltbid.services.errors import NotFoundError, ServiceError
from voltbid.services.settings_service import get_settings

logger = logging.getLogger(__name__)


# ---- Projects ---------------------------------------------------------------

def list_projects(
    session: Session,
    *,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Project]:
    """Newest first, line items eagerly loaded so totals can be computed per row."""
    query = session.query(Project).options(selectinload(Project.line_items))
    if status:
        query = query.filter(Project.status == status)
    if search:
        like = f"%{search.strip().lower()}%"
        query = query.filter(or_(
            func.lower(Project.name).like(like),
            func.lower(Project.client_name).like(like),
        ))
    return query.order_by(Project.created_at.desc(), Project.id.desc()).all()


def get_project(session: Session, project_id: int) -> Project:
    obj = session.get(Project, project_id)
    if not obj:
        raise NotFoundError(f"Project {project_id} not found")
    return obj


def create_project(session: Session, **fields) -> Project:
    """Create a project; rates/markups left out come from the company settings."""
    settings = get_settings(session)
    fields.setdefault("labor_rate", settings.default_labor_rate)
    fields.setdefault("overhead_pct", settings.default_overhead)
    fields.setdefault("profit_pct", settings.default_profit)
    if not fields.get("terms") and settings.default_terms:
        fields["terms"] = settings.default_terms

    project = Project(**fields)
    session.add(project)
    session.flush()
    logger.info("project created id=%s name=%r", project.id, project.name)
    return project


def update_project(session: Session, project_id: int, **changes) -> Project:
    project = get_project(session, project_id)
    for key, value in changes.items():
        setattr(project, key, value)
    session.flush()
    return project


def delete_project(session: Session, project_id: int) -> None:
    project = get_project(session, project_id)
    session.delete(project)  # line items cascade
    session.flush()
    logger.info("project deleted id=%s", project_id)


def ordered_line_items(project: Project) -> List[LineItem]:
    return sorted(project.line_items, key=lambda li: (li.sort_order or 0, li.id or 0))


# ---- Line items -------------------------------------------------------------

def list_line_items(session: Session, project_id: int) -> List[LineItem]:
    get_project(session, project_id)
    return (
        session.query(LineItem)
        .filter(LineItem.project_id == project_id)
        .order_by(LineItem.sort_order.asc(), LineItem.id.asc())
        .all()
    )


def get_line_item(session: Session, project_id: int, item_id: int) -> LineItem:
    item = (
        session.query(LineItem)
        .filter(LineItem.id == item_id, LineItem.project_id == project_id)
        .one_or_none()
    )
    if not item:
        raise NotFoundError(f"Line item {item_id} not found on project {project_id}")
    return item


def _next_sort_order(project: Project) -> int:
    if not project.line_items:
        return 0
    return max(li.sort_order or 0 for li in project.line_items) + 1


def add_line_item(session: Session, project_id: int, **fields) -> LineItem:
    """
    Append a line item. A referenced catalog material fills in description,
    unit and unit price when the caller left them out. The labor rate is
    stored only if explicitly given; otherwise the item keeps inheriting.
    """
    project = get_project(session, project_id)

    material_id = fields.get("material_id")
    if material_id is not None:
        material = session.get(Material, material_id)
        if material is None:
            raise ServiceError(f"Material {material_id} not found.")
        fields.setdefault("description", material.name)
        fields.setdefault("unit", material.unit)
        fields.setdefault("unit_price", material.unit_price)

    if not fields.get("description"):
        raise ServiceError("Description is required.")
    if not fields.get("category"):
        raise ServiceError("Category is required.")
    fields.setdefault("sort_order", _next_sort_order(project))

    item = LineItem(**fields)
    project.line_items.append(item)
    session.flush()
    return item


def update_line_item(session: Session, project_id: int, item_id: int, **changes) -> LineItem:
    item = get_line_item(session, project_id, item_id)
    if changes.get("material_id") is not None and session.get(Material, changes["material_id"]) is None:
        raise ServiceError(f"Material {changes['material_id']} not found.")
    for key, value in changes.items():
        setattr(item, key, value)
    session.flush()
    return item


def delete_line_item(session: Session, project_id: int, item_id: int) -> None:
    item = get_line_item(session, project_id, item_id)
    project = item.project
    if project is not None and item in project.line_items:
        project.line_items.remove(item)  # delete-orphan
    else:
        session.delete(item)
    session.flush()
