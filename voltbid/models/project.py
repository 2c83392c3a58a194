"""
Project: the owner of line items and of the markup inputs.

labor_rate is the default for every line item that has no rate of its own.
It is read at rollup time, so editing it re-prices those items retroactively.
Totals are never stored here; see services.calculations.
"""
from __future__ import annotations

from typing import List

from sqlalchemy import Index, text
from sqlalchemy.sql import func

from voltbid.constants import (
    DEFAULT_LABOR_RATE,
    DEFAULT_OVERHEAD_PCT,
    DEFAULT_PROFIT_PCT,
    DEFAULT_PROJECT_TYPE,
    DEFAULT_STATE,
)
from voltbid.extensions import db


class Project(db.Model):
    __tablename__ = "projects"
    __allow_unmapped__ = True

    id = db.Column(db.Integer, primary_key=True)

    # Basics
    name           = db.Column(db.String(200), nullable=False)
    client_name    = db.Column(db.String(200), nullable=False)
    client_company = db.Column(db.String(200), nullable=True)
    address        = db.Column(db.String(500), nullable=False)
    city           = db.Column(db.String(100), nullable=False)
    state          = db.Column(db.String(2),   nullable=False, default=DEFAULT_STATE)
    zip            = db.Column(db.String(10),  nullable=False)
    type           = db.Column(db.String(32),  nullable=False, default=DEFAULT_PROJECT_TYPE)
    status         = db.Column(db.String(32),  nullable=False, default="draft", server_default=text("'draft'"))
    description    = db.Column(db.Text, nullable=True)

    # Markup inputs (fractions: 0.15 == 15%)
    overhead_pct = db.Column(db.Float, nullable=False, default=DEFAULT_OVERHEAD_PCT)
    profit_pct   = db.Column(db.Float, nullable=False, default=DEFAULT_PROFIT_PCT)
    labor_rate   = db.Column(db.Float, nullable=False, default=DEFAULT_LABOR_RATE)

    notes = db.Column(db.Text, nullable=True)
    terms = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    line_items: List["LineItem"] = db.relationship(
        "LineItem",
        back_populates="project",
        order_by="[LineItem.sort_order, LineItem.id]",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (
        Index("ix_projects_lower_name", func.lower(name)),
        Index("ix_projects_status", status),
        Index("ix_projects_created_at", created_at),
    )

    def __repr__(self) -> str:
        return f"<Project id={self.id} name={self.name!r} status={self.status!r}>"

    def to_dict(self) -> dict:
        return dict(
            id=self.id,
            name=self.name,
            client_name=self.client_name,
            client_company=self.client_company,
            address=self.address,
            city=self.city,
            state=self.state,
            zip=self.zip,
            type=self.type,
            status=self.status,
            description=self.description,
            overhead_pct=self.overhead_pct,
            profit_pct=self.profit_pct,
            labor_rate=self.labor_rate,
            notes=self.notes,
            terms=self.terms,
            created_at=self.created_at.isoformat() if self.created_at else None,
            updated_at=self.updated_at.isoformat() if self.updated_at else None,
        )
