"""
Server-side draft storage.

The browser session only carries ``token``; the draft itself lives in
``payload`` as ``DraftEstimate.to_dict()`` output, so its size is not bound
by the cookie limit.

• estimate_drafts
  - ux_estimate_drafts_token: one row per session token.
  - ix_estimate_drafts_updated_at: purge path for stale drafts.
"""
from __future__ import annotations

from sqlalchemy import Index
from sqlalchemy.sql import func

from voltbid.extensions import db


class EstimateDraft(db.Model):
    __tablename__ = "estimate_drafts"

    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(32), nullable=False)
    payload = db.Column(db.JSON, nullable=False, default=dict)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ux_estimate_drafts_token", token, unique=True),
        Index("ix_estimate_drafts_updated_at", updated_at),
    )

    def __repr__(self) -> str:
        return f"<EstimateDraft id={self.id} token={self.token[:6]}...>"
