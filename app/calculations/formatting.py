"""
Display formatting for pro forma figures.

Non-finite values (a zero-equity ROI, a zero-length hold IRR) are shown as
unavailable rather than as inf/nan.
"""

import math
from typing import Any, List, Optional, Tuple

from app.calculations.proforma import ProFormaResult

UNAVAILABLE = "N/A"


def finite_or_none(value: float) -> Optional[float]:
    """Map non-finite values to None for JSON output."""
    if value is None or not math.isfinite(value):
        return None
    return value


def finite_or_none_deep(data: Any) -> Any:
    """Apply finite_or_none to every float in dumped model data."""
    if isinstance(data, float):
        return finite_or_none(data)
    if isinstance(data, dict):
        return {key: finite_or_none_deep(value) for key, value in data.items()}
    if isinstance(data, list):
        return [finite_or_none_deep(value) for value in data]
    return data


def format_currency(value: float) -> str:
    """
    Format as whole US dollars, e.g. -$1,234.

    Negative amounts keep their sign even when they round to zero, so
    -0.4 is "-$0".
    """
    if value is None or not math.isfinite(value):
        return UNAVAILABLE
    # Half away from zero, not banker's rounding
    dollars = math.floor(abs(value) + 0.5)
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    return f"{sign}${dollars:,}"


def format_percent(value: float) -> str:
    """Format a percentage with one decimal, e.g. 43.6%."""
    if value is None or not math.isfinite(value):
        return UNAVAILABLE
    return f"{value:.1f}%"


def summary_lines(result: ProFormaResult) -> List[Tuple[str, str]]:
    """Labelled dashboard rows for a pro forma result."""
    lines = [
        ("Net Profit", format_currency(result.net_profit)),
        ("ROI", format_percent(result.roi)),
        ("IRR (annualized)", format_percent(result.irr)),
        ("Equity Required", format_currency(result.total_equity)),
        ("Hold Period (months)", f"{result.hold_months:.1f}"),
        ("Total Renovation", format_currency(result.total_renovation)),
        ("Holding Costs", format_currency(result.total_holding_costs)),
        ("Financing Costs", format_currency(result.total_financing_costs)),
        ("Total Costs", format_currency(result.total_costs)),
        ("Net Sale Proceeds", format_currency(result.net_sale_proceeds)),
    ]

    for detail in result.financing_details.values():
        lines.append(
            (f"  {detail.name} loan", format_currency(detail.loan_amount))
        )
        lines.append(
            (f"  {detail.name} cost", format_currency(detail.total))
        )

    return lines
