"""
Estimate workbook (.xlsx) built with xlsxwriter.

The sheet stays live for whoever opens it: every cost cell is a formula, and
each formula is written together with the engine's value as its cached result
so readers that do not recalculate still see the rollup numbers.

Estimate sheet layout (1-based rows):
    1-3   company / project / client header
    6     column headers
    7..   one row per line item, columns A..K
    then  a blank row and the rollup block (labels J, values K, rates I)
Summary sheet points at the rollup cells of the Estimate sheet.
"""
from __future__ import annotations

import logging
from datetime import datetime
from io import BytesIO
from typing import Dict, List

import xlsxwriter

from voltbid.constants import Category
from voltbid.services.calculations import EstimateTotals, itemize, rollup
from voltbid.services.projects import ordered_line_items

logger = logging.getLogger(__name__)

ESTIMATE_SHEET = "Estimate"
SUMMARY_SHEET = "Summary"

HEADER_ROW = 6
FIRST_ITEM_ROW = 7

COLUMNS = [
    ("Item #", 8),
    ("Description", 40),
    ("Category", 16),
    ("Qty", 10),
    ("Unit", 8),
    ("Unit Price", 12),
    ("Labor Hrs", 10),
    ("Labor Rate", 12),
    ("Material Cost", 14),
    ("Labor Cost", 14),
    ("Line Total", 14),
]

# (label, totals field) in sheet order
ROLLUP_LINES = [
    ("Material Subtotal", "material_subtotal"),
    ("Labor Subtotal", "labor_subtotal"),
    ("Demolition Subtotal", "demolition_subtotal"),
    ("Direct Cost", "direct_cost"),
    ("Overhead", "overhead"),
    ("Subtotal with Overhead", "subtotal_with_overhead"),
    ("Profit", "profit"),
    ("Grand Total", "grand_total"),
]


def rollup_start_row(item_count: int) -> int:
    """1-based row of the first rollup line for a sheet with ``item_count`` items."""
    last_item_row = FIRST_ITEM_ROW + max(item_count, 1) - 1
    return last_item_row + 2


def rollup_cells(item_count: int) -> Dict[str, str]:
    """Totals field -> A1 reference of its value cell on the Estimate sheet."""
    start = rollup_start_row(item_count)
    return {field: f"K{start + i}" for i, (_, field) in enumerate(ROLLUP_LINES)}


def _formats(wb) -> dict:
    return {
        "title": wb.add_format({"bold": True, "font_size": 14}),
        "bold": wb.add_format({"bold": True}),
        "hdr": wb.add_format({"bold": True, "bg_color": "#1F2937", "font_color": "#FFFFFF",
                              "border": 1, "text_wrap": True, "valign": "vcenter"}),
        "cell": wb.add_format({"border": 1}),
        "qty": wb.add_format({"num_format": "#,##0.###", "border": 1}),
        "money": wb.add_format({"num_format": "$#,##0.00", "border": 1}),
        "pct": wb.add_format({"num_format": "0.0%"}),
        "label": wb.add_format({"bold": True, "align": "right"}),
        "total_money": wb.add_format({"num_format": "$#,##0.00", "bold": True, "top": 2}),
        "total_label": wb.add_format({"bold": True, "align": "right", "top": 2}),
    }


def _write_header(ws, fmt, project, settings) -> None:
    company = getattr(settings, "company_name", "") or ""
    address = getattr(settings, "address", "") or ""
    phone = getattr(settings, "phone", "") or ""
    license_no = getattr(settings, "license", "") or ""

    ws.write(0, 0, company, fmt["title"])
    ws.write(0, 8, "Date:", fmt["label"])
    ws.write(0, 9, datetime.now().strftime("%m/%d/%Y"))

    ws.write(1, 0, address)
    ws.write(1, 8, "Project:", fmt["label"])
    ws.write(1, 9, project.name or "")

    contact = " | ".join(p for p in (phone, f"License #{license_no}" if license_no else "") if p)
    ws.write(2, 0, contact)
    ws.write(2, 8, "Client:", fmt["label"])
    ws.write(2, 9, project.client_name or "")

    location = ", ".join(p for p in (project.address, project.city, f"{project.state} {project.zip}".strip()) if p)
    ws.write(3, 8, "Location:", fmt["label"])
    ws.write(3, 9, location)


def _write_items(ws, fmt, rows) -> None:
    for col, (title, width) in enumerate(COLUMNS):
        ws.write(HEADER_ROW - 1, col, title, fmt["hdr"])
        ws.set_column(col, col, width)

    for i, row in enumerate(rows):
        r0 = FIRST_ITEM_ROW - 1 + i  # 0-based
        n = r0 + 1                   # 1-based, for formulas
        item = row.item
        ws.write_number(r0, 0, i + 1, fmt["cell"])
        ws.write_string(r0, 1, item.description or "", fmt["cell"])
        ws.write_string(r0, 2, item.category or "", fmt["cell"])
        ws.write_number(r0, 3, item.quantity or 0, fmt["qty"])
        ws.write_string(r0, 4, item.unit or "", fmt["cell"])
        ws.write_number(r0, 5, item.unit_price or 0, fmt["money"])
        ws.write_number(r0, 6, item.labor_hours or 0, fmt["qty"])
        ws.write_number(r0, 7, row.labor_rate, fmt["money"])
        ws.write_formula(r0, 8, f"=D{n}*F{n}", fmt["money"], row.cost.material_cost)
        ws.write_formula(r0, 9, f"=G{n}*H{n}", fmt["money"], row.cost.labor_cost)
        ws.write_formula(r0, 10, f"=I{n}+J{n}", fmt["money"], row.cost.line_total)


def _write_rollup(ws, fmt, project, totals: EstimateTotals, item_count: int) -> None:
    first = FIRST_ITEM_ROW
    last = FIRST_ITEM_ROW + max(item_count, 1) - 1
    cells = rollup_cells(item_count)
    cat = f"$C${first}:$C${last}"
    demo = Category.DEMOLITION.value

    start = rollup_start_row(item_count)
    pct_cell = {"overhead": f"I{start + 4}", "profit": f"I{start + 6}"}
    formulas = {
        # EXACT keeps the category match case-sensitive like Category.parse; SUMIF would not
        "material_subtotal": f'=SUMPRODUCT(--NOT(EXACT({cat},"{demo}")),$I${first}:$I${last})',
        "labor_subtotal": f'=SUMPRODUCT(--NOT(EXACT({cat},"{demo}")),$J${first}:$J${last})',
        "demolition_subtotal": f'=SUMPRODUCT(--EXACT({cat},"{demo}"),$K${first}:$K${last})',
        "direct_cost": f"={cells['material_subtotal']}+{cells['labor_subtotal']}+{cells['demolition_subtotal']}",
        "overhead": f"={cells['direct_cost']}*{pct_cell['overhead']}",
        "subtotal_with_overhead": f"={cells['direct_cost']}+{cells['overhead']}",
        "profit": f"={cells['subtotal_with_overhead']}*{pct_cell['profit']}",
        "grand_total": f"={cells['subtotal_with_overhead']}+{cells['profit']}",
    }

    ws.write(start + 4 - 1, 8, project.overhead_pct, fmt["pct"])
    ws.write(start + 6 - 1, 8, project.profit_pct, fmt["pct"])

    for i, (label, field) in enumerate(ROLLUP_LINES):
        r0 = start - 1 + i
        is_total = field == "grand_total"
        ws.write(r0, 9, label, fmt["total_label"] if is_total else fmt["label"])
        ws.write_formula(
            r0, 10, formulas[field],
            fmt["total_money"] if is_total else fmt["money"],
            getattr(totals, field),
        )


def _write_summary(ws, fmt, project, totals: EstimateTotals, item_count: int) -> None:
    cells = rollup_cells(item_count)
    ws.set_column(0, 0, 26)
    ws.set_column(1, 1, 18)

    ws.write(0, 0, "Estimate Summary", fmt["title"])
    info = [
        ("Project", project.name or ""),
        ("Client", project.client_name or ""),
        ("Company", project.client_company or ""),
        ("Status", project.status or ""),
    ]
    for i, (label, value) in enumerate(info):
        ws.write(2 + i, 0, label, fmt["bold"])
        ws.write(2 + i, 1, value)

    start = 2 + len(info) + 1
    for i, (label, field) in enumerate(ROLLUP_LINES):
        target = f"'{ESTIMATE_SHEET}'!{cells[field]}"
        ws.write(start + i, 0, label, fmt["bold"])
        ws.write_formula(start + i, 1, f"={target}", fmt["money"], getattr(totals, field))


def build_estimate_workbook(project, settings=None) -> bytes:
    """Render the project's estimate workbook and return the .xlsx bytes."""
    items = ordered_line_items(project)
    rows: List = itemize(items, project.labor_rate)
    totals = rollup(rows, project.overhead_pct, project.profit_pct)

    buf = BytesIO()
    wb = xlsxwriter.Workbook(buf, {"in_memory": True})
    try:
        fmt = _formats(wb)

        ws = wb.add_worksheet(ESTIMATE_SHEET)
        _write_header(ws, fmt, project, settings)
        _write_items(ws, fmt, rows)
        _write_rollup(ws, fmt, project, totals, len(rows))
        ws.freeze_panes(HEADER_ROW, 0)

        summary = wb.add_worksheet(SUMMARY_SHEET)
        _write_summary(summary, fmt, project, totals, len(rows))
    finally:
        wb.close()

    logger.info("workbook built project_id=%s items=%d", project.id, len(rows))
    return buf.getvalue()

