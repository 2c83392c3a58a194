from .material import Material
from .app_settings import CompanySettings
from .project import Project
from .line_item import LineItem
from .estimate_draft import EstimateDraft

__all__ = ["Material", "CompanySettings", "Project", "LineItem", "EstimateDraft"]
