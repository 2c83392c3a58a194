"""
Estimate math: the per-line calculator and the project rollup.

Every consumer of totals (JSON responses, the workbook export, the printable
document, the draft estimate) goes through ``compute_estimate_totals`` so the
numbers cannot drift apart. Nothing here touches the database or validates
input; bad numbers flow through as NaN or negatives.

Rollup chain:
    material/labor/demolition subtotals
    -> direct_cost
    -> overhead             = direct_cost * overhead_pct
    -> subtotal_with_overhead
    -> profit               = subtotal_with_overhead * profit_pct
    -> grand_total
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Iterable, List, Optional

from voltbid.constants import Category

# Accepts ORM rows, DraftLineItem objects, or dicts keyed either way
_FIELD_ALIASES = {
    "quantity": ("quantity",),
    "unit_price": ("unit_price", "unitPrice"),
    "labor_hours": ("labor_hours", "laborHours"),
    "labor_rate": ("labor_rate", "laborRate"),
    "category": ("category",),
}


@dataclass(frozen=True)
class LineItemCost:
    material_cost: float
    labor_cost: float
    line_total: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ItemizedLine:
    """One input item with its resolved rate and computed costs."""
    item: Any
    labor_rate: float
    cost: LineItemCost
    is_demolition: bool


@dataclass(frozen=True)
class EstimateTotals:
    material_subtotal: float = 0.0
    labor_subtotal: float = 0.0
    demolition_subtotal: float = 0.0
    direct_cost: float = 0.0
    overhead: float = 0.0
    subtotal_with_overhead: float = 0.0
    profit: float = 0.0
    grand_total: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


def _field(item: Any, name: str, default: Any = None) -> Any:
    keys = _FIELD_ALIASES[name]
    if isinstance(item, dict):
        for key in keys:
            if key in item:
                return item[key]
        return default
    for key in keys:
        if hasattr(item, key):
            return getattr(item, key)
    return default


def _number(value: Any) -> float:
    # Unset amounts count as zero, the same default storage applies
    if value is None:
        return 0.0
    return float(value)


def _sum(values: List[float]) -> float:
    # fsum is exact, so the result does not depend on item order
    try:
        return math.fsum(values)
    except ValueError:
        # inf + -inf; let it collapse to nan like plain addition would
        return sum(values, 0.0)


def is_demolition(category: Any) -> bool:
    if isinstance(category, Category):
        return category is Category.DEMOLITION
    return Category.parse(category) is Category.DEMOLITION


def resolve_labor_rate(item_rate: Optional[float], default_rate: Optional[float]) -> float:
    """Item rate when set, otherwise the project default. Both unset -> nan."""
    if item_rate is not None:
        return float(item_rate)
    if default_rate is not None:
        return float(default_rate)
    return math.nan


def compute_line_item(item: Any, effective_labor_rate: float) -> LineItemCost:
    """Cost one line with an already-resolved labor rate."""
    material_cost = _number(_field(item, "quantity")) * _number(_field(item, "unit_price"))
    labor_cost = _number(_field(item, "labor_hours")) * effective_labor_rate
    return LineItemCost(
        material_cost=material_cost,
        labor_cost=labor_cost,
        line_total=material_cost + labor_cost,
    )


def itemize(line_items: Iterable[Any], default_labor_rate: Optional[float] = None) -> List[ItemizedLine]:
    """Resolve each item's rate and cost it, preserving input order."""
    rows = []
    for item in line_items:
        rate = resolve_labor_rate(_field(item, "labor_rate"), default_labor_rate)
        rows.append(
            ItemizedLine(
                item=item,
                labor_rate=rate,
                cost=compute_line_item(item, rate),
                is_demolition=is_demolition(_field(item, "category")),
            )
        )
    return rows


def rollup(rows: Iterable[ItemizedLine], overhead_pct: float, profit_pct: float) -> EstimateTotals:
    """Markup chain over already itemized lines."""
    material, labor, demolition = [], [], []
    for row in rows:
        if row.is_demolition:
            demolition.append(row.cost.line_total)
        else:
            material.append(row.cost.material_cost)
            labor.append(row.cost.labor_cost)

    material_subtotal = _sum(material)
    labor_subtotal = _sum(labor)
    demolition_subtotal = _sum(demolition)

    direct_cost = material_subtotal + labor_subtotal + demolition_subtotal
    overhead = direct_cost * overhead_pct
    subtotal_with_overhead = direct_cost + overhead
    profit = subtotal_with_overhead * profit_pct
    grand_total = subtotal_with_overhead + profit

    return EstimateTotals(
        material_subtotal=material_subtotal,
        labor_subtotal=labor_subtotal,
        demolition_subtotal=demolition_subtotal,
        direct_cost=direct_cost,
        overhead=overhead,
        subtotal_with_overhead=subtotal_with_overhead,
        profit=profit,
        grand_total=grand_total,
    )


def compute_estimate_totals(
    line_items: Iterable[Any],
    overhead_pct: float,
    profit_pct: float,
    default_labor_rate: Optional[float] = None,
) -> EstimateTotals:
    """
    Full rollup for a set of line items.

    Items without their own labor rate use ``default_labor_rate``; items that
    were resolved beforehand can simply carry the rate themselves.
    Percentages are fractions (0.15 == 15%) and are not clamped.
    """
    return rollup(itemize(line_items, default_labor_rate), overhead_pct, profit_pct)


def compute_project_totals(project: Any) -> EstimateTotals:
    """Rollup for a Project row using its live default rate and markups."""
    return compute_estimate_totals(
        project.line_items,
        project.overhead_pct,
        project.profit_pct,
        default_labor_rate=project.labor_rate,
    )
