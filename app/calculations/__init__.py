"""
Financial Calculation Engine

Pro forma calculations for fix-and-flip real estate projects.
"""

from app.calculations import formatting, proforma, returns

__all__ = ["formatting", "proforma", "returns"]
