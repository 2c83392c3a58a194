from sqlalchemy.sql import func

from voltbid.constants import DEFAULT_LABOR_RATE, DEFAULT_OVERHEAD_PCT, DEFAULT_PROFIT_PCT
from voltbid.extensions import db


class CompanySettings(db.Model):
    __tablename__ = "company_settings"

    id = db.Column(db.Integer, primary_key=True)  # singleton: id=1

    company_name = db.Column(db.String(200), nullable=False, default="")
    address      = db.Column(db.String(500), nullable=False, default="")
    phone        = db.Column(db.String(20),  nullable=False, default="")
    license      = db.Column(db.String(50),  nullable=False, default="")
    email        = db.Column(db.String(200), nullable=False, default="")
    website      = db.Column(db.String(200), nullable=False, default="")

    default_labor_rate = db.Column(db.Float, nullable=False, default=DEFAULT_LABOR_RATE)
    default_overhead   = db.Column(db.Float, nullable=False, default=DEFAULT_OVERHEAD_PCT)
    default_profit     = db.Column(db.Float, nullable=False, default=DEFAULT_PROFIT_PCT)
    tax_rate           = db.Column(db.Float, nullable=False, default=0.0)
    default_terms      = db.Column(db.Text, nullable=False, default="")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def to_dict(self):
        return dict(
            id=self.id,
            company_name=self.company_name,
            address=self.address,
            phone=self.phone,
            license=self.license,
            email=self.email,
            website=self.website,
            default_labor_rate=self.default_labor_rate,
            default_overhead=self.default_overhead,
            default_profit=self.default_profit,
            tax_rate=self.tax_rate,
            default_terms=self.default_terms,
            created_at=self.created_at.isoformat() if self.created_at else None,
            updated_at=self.updated_at.isoformat() if self.updated_at else None,
        )
