from __future__ import annotations

from typing import Any, Dict, Optional

from voltbid.services.calculations import EstimateTotals, compute_project_totals, itemize
from voltbid.services.projects import ordered_line_items


def totals_payload(totals: EstimateTotals) -> Dict[str, float]:
    """Engine output as-is; rounding is left to whoever displays it."""
    return totals.to_dict()


def line_item_payload(row) -> Dict[str, Any]:
    data = row.item.to_dict()
    data["effective_labor_rate"] = row.labor_rate
    data.update(row.cost.to_dict())
    return data


def project_payload(project, include_items: bool = False, totals: Optional[EstimateTotals] = None) -> Dict[str, Any]:
    """Project JSON with live totals; ``include_items`` adds the costed lines."""
    data = project.to_dict()
    data["totals"] = totals_payload(totals or compute_project_totals(project))
    data["line_item_count"] = len(project.line_items)
    if include_items:
        rows = itemize(ordered_line_items(project), project.labor_rate)
        data["line_items"] = [line_item_payload(r) for r in rows]
    return data
