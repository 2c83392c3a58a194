"""
Materials catalog: critical indexes (doc only)

• materials
  - ix_materials_lower_name: functional index on lower(name) for case-insensitive search.
  - ix_materials_category_name: browse path (category, name) used by the list endpoint.
  - ux_materials_sku: SKU is unique when present; it is the seed-import key.
"""
from __future__ import annotations

from sqlalchemy import Index
from sqlalchemy.sql import func

from voltbid.extensions import db


class Material(db.Model):
    __tablename__ = "materials"
    __allow_unmapped__ = True

    id = db.Column(db.Integer, primary_key=True)

    name       = db.Column(db.String(200), nullable=False)
    sku        = db.Column(db.String(50),  nullable=True)
    category   = db.Column(db.String(64),  nullable=False)
    unit       = db.Column(db.String(16),  nullable=False, default="each")
    unit_price = db.Column(db.Float, nullable=False, default=0.0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_materials_lower_name", func.lower(name)),
        Index("ix_materials_category_name", category, name),
        Index("ux_materials_sku", sku, unique=True),
    )

    def __repr__(self) -> str:
        return f"<Material id={self.id} category={self.category!r} name={(self.name or '')[:40]!r}>"

    def to_dict(self) -> dict:
        return dict(
            id=self.id,
            name=self.name,
            sku=self.sku,
            category=self.category,
            unit=self.unit,
            unit_price=self.unit_price,
            created_at=self.created_at.isoformat() if self.created_at else None,
            updated_at=self.updated_at.isoformat() if self.updated_at else None,
        )
