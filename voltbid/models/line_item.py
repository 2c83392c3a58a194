from __future__ import annotations

from sqlalchemy import Index
from sqlalchemy.sql import func

from voltbid.extensions import db


class LineItem(db.Model):
    __tablename__ = "line_items"
    __allow_unmapped__ = True

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    material_id = db.Column(
        db.Integer, db.ForeignKey("materials.id", ondelete="SET NULL"), nullable=True
    )

    description = db.Column(db.String(500), nullable=False)
    category    = db.Column(db.String(64),  nullable=False)
    unit        = db.Column(db.String(16),  nullable=False, default="each")

    quantity    = db.Column(db.Float, nullable=False, default=0.0)
    unit_price  = db.Column(db.Float, nullable=False, default=0.0)
    labor_hours = db.Column(db.Float, nullable=False, default=0.0)
    # NULL = inherit Project.labor_rate at rollup time; never copied in on save
    labor_rate  = db.Column(db.Float, nullable=True)

    sort_order = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    project = db.relationship("Project", back_populates="line_items")
    material = db.relationship("Material", lazy="joined")

    __table_args__ = (
        Index("ix_line_items_project_sort", project_id, sort_order),
        Index("ix_line_items_material", material_id),
    )

    def __repr__(self) -> str:
        return (
            f"<LineItem id={self.id} project_id={self.project_id} "
            f"category={self.category!r} qty={self.quantity}>"
        )

    def to_dict(self) -> dict:
        return dict(
            id=self.id,
            project_id=self.project_id,
            material_id=self.material_id,
            description=self.description,
            category=self.category,
            unit=self.unit,
            quantity=self.quantity,
            unit_price=self.unit_price,
            labor_hours=self.labor_hours,
            labor_rate=self.labor_rate,
            sort_order=self.sort_order,
            created_at=self.created_at.isoformat() if self.created_at else None,
            updated_at=self.updated_at.isoformat() if self.updated_at else None,
        )
