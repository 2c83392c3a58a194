"""Display formatting. Applied to finished totals only; never feeds back into math."""
from typing import Any


def format_currency(amount: Any) -> str:
    """US dollars, thousands separators, two decimals: -1234.5 -> '-$1,234.50'."""
    value = float(amount)
    if value != value:  # nan
        return "$NaN"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percent(value: Any) -> str:
    """Fraction to percent with one decimal: 0.15 -> '15.0%'."""
    return f"{float(value) * 100:.1f}%"


def format_number(value: Any) -> str:
    """Thousands separators, trailing zeros dropped: 1200.50 -> '1,200.5'."""
    v = float(value)
    if v.is_integer():
        return f"{int(v):,}"
    return f"{v:,.3f}".rstrip("0").rstrip(".")
