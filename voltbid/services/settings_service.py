from __future__ import annotations

import logging

from flask import current_app
from sqlalchemy.orm import Session

from voltbid.models.app_settings import CompanySettings

logger = logging.getLogger(__name__)

SETTINGS_ID = 1


def _house_defaults() -> dict:
    cfg = current_app.config
    return dict(
        company_name=cfg.get("COMPANY_NAME", ""),
        address=cfg.get("COMPANY_ADDRESS", ""),
        phone=cfg.get("COMPANY_PHONE", ""),
        license=cfg.get("COMPANY_LICENSE", ""),
        email="",
        website=cfg.get("COMPANY_WEBSITE", ""),
        default_labor_rate=cfg["DEFAULT_LABOR_RATE"],
        default_overhead=cfg["DEFAULT_OVERHEAD_PCT"],
        default_profit=cfg["DEFAULT_PROFIT_PCT"],
        tax_rate=0.0,
        default_terms=cfg.get("DEFAULT_TERMS", ""),
    )


def get_settings(session: Session) -> CompanySettings:
    """Singleton settings row; created from the configured house defaults on first read."""
    row = session.get(CompanySettings, SETTINGS_ID)
    if row is None:
        row = CompanySettings(id=SETTINGS_ID, **_house_defaults())
        session.add(row)
        session.flush()
        logger.info("company_settings created from house defaults")
    return row


def update_settings(session: Session, changes: dict) -> CompanySettings:
    row = get_settings(session)
    for key, value in changes.items():
        setattr(row, key, value)
    session.flush()
    return row
