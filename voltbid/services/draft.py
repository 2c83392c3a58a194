"""
Draft estimate: the unsaved working set a user assembles before committing.

The draft is plain data owned by the caller. It is stored server-side as a
JSON payload keyed by an opaque token (see ``load_stored_draft`` and
``store_draft``); the HTTP layer keeps only that token in the session
cookie. Nothing here knows about Flask. Totals are never stored,
``get_totals`` asks the rollup engine each time.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from voltbid.constants import (
    DEFAULT_LABOR_RATE,
    DEFAULT_OVERHEAD_PCT,
    DEFAULT_PROFIT_PCT,
    DEFAULT_PROJECT_TYPE,
    DEFAULT_STATE,
)
from voltbid.services.calculations import EstimateTotals, compute_estimate_totals
from voltbid.services.errors import ServiceError

logger = logging.getLogger(__name__)

FIRST_STEP = 1
LAST_STEP = 3  # details -> upload & analyze -> review & export


def _temp_id() -> str:
    return uuid.uuid4().hex[:13]


@dataclass
class ProjectInfoDraft:
    name: str = ""
    client_name: str = ""
    client_company: str = ""
    address: str = ""
    city: str = ""
    state: str = DEFAULT_STATE
    zip: str = ""
    type: str = DEFAULT_PROJECT_TYPE
    description: str = ""


@dataclass
class DraftLineItem:
    temp_id: str
    description: str = ""
    category: str = "Miscellaneous"
    quantity: float = 0.0
    unit: str = "each"
    unit_price: float = 0.0
    labor_hours: float = 0.0
    labor_rate: Optional[float] = None  # None -> draft default rate
    material_id: Optional[int] = None
    sort_order: int = 0


_ITEM_FIELDS = {f.name for f in fields(DraftLineItem)}
_INFO_FIELDS = {f.name for f in fields(ProjectInfoDraft)}


@dataclass
class DraftEstimate:
    project_info: ProjectInfoDraft = field(default_factory=ProjectInfoDraft)
    line_items: List[DraftLineItem] = field(default_factory=list)
    overhead_pct: float = DEFAULT_OVERHEAD_PCT
    profit_pct: float = DEFAULT_PROFIT_PCT
    labor_rate: float = DEFAULT_LABOR_RATE
    notes: str = ""
    terms: str = ""
    current_step: int = FIRST_STEP
    saved_project_id: Optional[int] = None

    # ---- wizard position ----------------------------------------------------

    def set_step(self, step: int) -> None:
        self.current_step = min(max(int(step), FIRST_STEP), LAST_STEP)

    def next_step(self) -> None:
        self.set_step(self.current_step + 1)

    def prev_step(self) -> None:
        self.set_step(self.current_step - 1)

    # ---- metadata -----------------------------------------------------------

    def set_project_info(self, **info) -> None:
        for key, value in info.items():
            if key in _INFO_FIELDS:
                setattr(self.project_info, key, value)

    def set_rates(self, *, overhead_pct=None, profit_pct=None, labor_rate=None) -> None:
        if overhead_pct is not None:
            self.overhead_pct = overhead_pct
        if profit_pct is not None:
            self.profit_pct = profit_pct
        if labor_rate is not None:
            self.labor_rate = labor_rate

    # ---- line items ---------------------------------------------------------

    def find_item(self, temp_id: str) -> Optional[DraftLineItem]:
        for item in self.line_items:
            if item.temp_id == temp_id:
                return item
        return None

    def add_item(self, **values) -> DraftLineItem:
        """Append with a fresh temp id at the next sort position."""
        data = {k: v for k, v in values.items() if k in _ITEM_FIELDS - {"temp_id", "sort_order"}}
        item = DraftLineItem(temp_id=_temp_id(), sort_order=len(self.line_items), **data)
        self.line_items.append(item)
        return item

    def update_item(self, temp_id: str, **changes) -> Optional[DraftLineItem]:
        """Merge partial changes; unknown temp ids are ignored (returns None)."""
        item = self.find_item(temp_id)
        if item is None:
            return None
        for key, value in changes.items():
            if key in _ITEM_FIELDS and key != "temp_id":
                setattr(item, key, value)
        return item

    def remove_item(self, temp_id: str) -> bool:
        before = len(self.line_items)
        self.line_items = [i for i in self.line_items if i.temp_id != temp_id]
        return len(self.line_items) != before

    # ---- queries ------------------------------------------------------------

    def get_totals(self) -> EstimateTotals:
        return compute_estimate_totals(
            self.line_items,
            self.overhead_pct,
            self.profit_pct,
            default_labor_rate=self.labor_rate,
        )

    def reset(self) -> None:
        fresh = DraftEstimate()
        for f in fields(self):
            setattr(self, f.name, getattr(fresh, f.name))

    # ---- serialization boundary -------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DraftEstimate":
        """Rebuild from ``to_dict`` output; unknown keys are dropped, missing ones defaulted."""
        if not data:
            return cls()
        info = {k: v for k, v in (data.get("project_info") or {}).items() if k in _INFO_FIELDS}
        items = []
        for raw in data.get("line_items") or []:
            values = {k: v for k, v in raw.items() if k in _ITEM_FIELDS}
            values.setdefault("temp_id", _temp_id())
            items.append(DraftLineItem(**values))
        draft = cls(project_info=ProjectInfoDraft(**info), line_items=items)
        for key in ("overhead_pct", "profit_pct", "labor_rate", "notes", "terms",
                    "current_step", "saved_project_id"):
            if key in data and data[key] is not None:
                setattr(draft, key, data[key])
        return draft


def commit_draft(session: Session, draft: DraftEstimate):
    """
    Persist the draft as a Project plus its LineItems and remember the new id.
    Items without their own rate are stored with NULL so they keep
    inheriting the project's rate. A draft commits once; ``reset`` clears
    ``saved_project_id`` for the next estimate.
    """
    # Local import keeps this module usable without the models loaded
    from voltbid.models.line_item import LineItem
    from voltbid.models.project import Project

    if draft.saved_project_id is not None:
        raise ServiceError(f"Draft was already saved as project {draft.saved_project_id}; reset it to start a new one")

    info = draft.project_info
    required = {"name": info.name, "client_name": info.client_name, "address": info.address,
                "city": info.city, "zip": info.zip}
    missing = [k for k, v in required.items() if not (v or "").strip()]
    if missing:
        raise ServiceError(f"Draft is missing project details: {', '.join(missing)}")

    project = Project(
        name=info.name.strip(),
        client_name=info.client_name.strip(),
        client_company=(info.client_company or "").strip() or None,
        address=info.address.strip(),
        city=info.city.strip(),
        state=info.state or DEFAULT_STATE,
        zip=info.zip.strip(),
        type=info.type or DEFAULT_PROJECT_TYPE,
        description=info.description or None,
        overhead_pct=draft.overhead_pct,
        profit_pct=draft.profit_pct,
        labor_rate=draft.labor_rate,
        notes=draft.notes or None,
        terms=draft.terms or None,
    )
    for position, item in enumerate(sorted(draft.line_items, key=lambda i: i.sort_order)):
        project.line_items.append(LineItem(
            description=item.description,
            category=item.category,
            quantity=item.quantity,
            unit=item.unit,
            unit_price=item.unit_price,
            labor_hours=item.labor_hours,
            labor_rate=item.labor_rate,
            material_id=item.material_id,
            sort_order=position,
        ))
    session.add(project)
    session.flush()
    draft.saved_project_id = project.id
    logger.info("draft committed project_id=%s items=%d", project.id, len(project.line_items))
    return project


# ---- server-side storage ---------------------------------------------------

def new_draft_token() -> str:
    return uuid.uuid4().hex


def load_stored_draft(session: Session, token: Optional[str]) -> DraftEstimate:
    """The stored draft for ``token``; a fresh draft when there is none."""
    from voltbid.models.estimate_draft import EstimateDraft

    if not token:
        return DraftEstimate()
    row = session.query(EstimateDraft).filter_by(token=token).one_or_none()
    return DraftEstimate.from_dict(row.payload if row else None)


def store_draft(session: Session, token: str, draft: DraftEstimate) -> None:
    """Upsert the draft payload for ``token``. Flushes; the caller commits."""
    from voltbid.models.estimate_draft import EstimateDraft

    row = session.query(EstimateDraft).filter_by(token=token).one_or_none()
    if row is None:
        row = EstimateDraft(token=token)
        session.add(row)
    row.payload = draft.to_dict()
    session.flush()


def purge_stale_drafts(session: Session, older_than_days: int) -> int:
    """Delete drafts untouched for ``older_than_days``. Returns the row count."""
    from voltbid.models.estimate_draft import EstimateDraft

    cutoff = datetime.now(timezone.utc) - timedelta(days=older_than_days)
    deleted = (
        session.query(EstimateDraft)
        .filter(EstimateDraft.updated_at < cutoff)
        .delete(synchronize_session=False)
    )
    logger.info("purged stale drafts count=%d older_than_days=%d", deleted, older_than_days)
    return deleted
