from enum import Enum


class Category(str, Enum):
    """Line-item categories. Only DEMOLITION changes how an item rolls up."""

    WIRE = "Wire"
    CONDUIT = "Conduit"
    PANELS_BREAKERS = "Panels & Breakers"
    DEVICES = "Devices"
    BOXES_FITTINGS = "Boxes & Fittings"
    LIGHTING = "Lighting"
    MISCELLANEOUS = "Miscellaneous"
    LABOR_ONLY = "Labor Only"
    DEMOLITION = "Demolition"

    @classmethod
    def parse(cls, value):
        """Exact (case-sensitive) match against the vocabulary; None when unknown."""
        for member in cls:
            if member.value == value:
                return member
        return None


LINE_ITEM_CATEGORIES = [c.value for c in Category]

# Catalog materials never carry the labor-only / demolition buckets
MATERIAL_CATEGORIES = [
    c.value for c in Category if c not in (Category.LABOR_ONLY, Category.DEMOLITION)
]

UNITS = ["each", "ft", "roll", "box", "pack", "lot", "set", "pair"]

PROJECT_STATUSES = ["draft", "submitted", "won", "lost"]
PROJECT_TYPES = ["residential", "commercial", "industrial"]

# House defaults, overridable through CompanySettings
DEFAULT_LABOR_RATE = 65.0
DEFAULT_OVERHEAD_PCT = 0.15
DEFAULT_PROFIT_PCT = 0.10
DEFAULT_STATE = "FL"
DEFAULT_PROJECT_TYPE = "commercial"
