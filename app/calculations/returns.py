"""
Return Calculations

ROI and annualized return for a single-period flip. Python raises on
division by zero where spreadsheet and browser math return Infinity, so
the IEEE-754 results are produced explicitly here.
"""

import math

WEEKS_PER_MONTH = 4.33


def weeks_to_months(weeks: float) -> float:
    """Convert a hold period in weeks to months (not calendar accurate)."""
    return weeks / WEEKS_PER_MONTH


def safe_divide(numerator: float, denominator: float) -> float:
    """
    Divide with IEEE-754 semantics instead of raising.

    Returns:
        +inf / -inf for a non-zero numerator over zero, nan for 0/0 or nan/0
    """
    if denominator == 0:
        if math.isnan(numerator) or numerator == 0:
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def calculate_roi(net_profit: float, equity: float) -> float:
    """Return on equity over the whole hold period, as a percentage."""
    return safe_divide(net_profit, equity) * 100


def annualize_roi(roi_percent: float, years: float) -> float:
    """
    Compound a whole-period ROI to an annual rate.

    ((1 + roi/100) ^ (1/years) - 1) * 100

    This is a period-to-annual conversion, not an IRR over dated cash
    flows.

    Args:
        roi_percent: Whole-period ROI (e.g., 43.6 for 43.6%)
        years: Hold period in years

    Returns:
        Annualized rate as a percentage, nan where undefined
    """
    if years == 0:
        return math.nan

    base = 1 + roi_percent / 100
    exponent = 1 / years

    if math.isnan(base) or base < 0:
        return math.nan
    if base == 0:
        return -100.0 if exponent > 0 else math.inf

    try:
        growth = math.pow(base, exponent)
    except OverflowError:
        growth = math.inf

    return (growth - 1) * 100
