"""
Fix-and-Flip Pro Forma

Derives the cost stack, profit and returns of a flip from its property
inputs, renovation budget and financing sources. Pure and deterministic:
the result is recomputed from scratch on every change and never stored.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from app.calculations.returns import annualize_roi, calculate_roi, weeks_to_months
from app.schemas.project import (
    FinancingKind,
    FinancingSource,
    PropertyInputs,
    RenovationLineItem,
)


@dataclass
class FinancingDetail:
    """Computed figures for one enabled financing source."""

    source_id: int
    name: str
    loan_amount: float
    origination: float
    interest: float  # Simple interest prorated for the hold period
    total: float  # origination + interest


@dataclass
class ProFormaResult:
    """Derived financial summary of a flip."""

    hold_months: float

    # Renovation
    base_renovation: float
    contingency: float
    total_renovation: float

    # Holding costs
    property_taxes: float
    insurance: float
    utilities: float
    hoa: float
    total_holding_costs: float

    # Financing, keyed by source id, enabled sources only
    financing_details: Dict[int, FinancingDetail] = field(default_factory=dict)
    total_loan_amount: float = 0.0
    total_financing_costs: float = 0.0

    # Cost stack and sale
    total_costs: float = 0.0
    sale_closing_costs: float = 0.0
    net_sale_proceeds: float = 0.0

    # Returns
    net_profit: float = 0.0
    total_equity: float = 0.0
    roi: float = 0.0
    irr: float = 0.0  # Annualized ROI, not a cash-flow IRR


def calculate_materials_total(item: RenovationLineItem) -> float:
    """Sum of material costs for a renovation line item."""
    return sum(material.cost for material in item.materials)


def calculate_item_total(item: RenovationLineItem) -> float:
    """Materials plus labor for a renovation line item."""
    return calculate_materials_total(item) + item.labor


def calculate_loan_amount(source: FinancingSource, purchase_price: float) -> float:
    """Loan principal: a share of purchase price for LTV sources, else fixed."""
    if source.kind == FinancingKind.ltv:
        return purchase_price * (source.ltv_pct / 100)
    return source.fixed_amount


def calculate_financing_detail(
    source: FinancingSource,
    purchase_price: float,
    hold_months: float,
) -> FinancingDetail:
    """
    Calculate origination and interest for a single source.

    Interest is simple, non-amortizing and prorated for the hold period.
    """
    loan_amount = calculate_loan_amount(source, purchase_price)
    origination = loan_amount * (source.origination_pct / 100)
    interest = loan_amount * (source.interest_rate / 100) * (hold_months / 12)

    return FinancingDetail(
        source_id=source.id,
        name=source.name,
        loan_amount=loan_amount,
        origination=origination,
        interest=interest,
        total=origination + interest,
    )


def compute_proforma(
    inputs: PropertyInputs,
    renovation_items: Iterable[RenovationLineItem],
    financing_sources: Iterable[FinancingSource],
) -> ProFormaResult:
    """
    Compute the full pro forma.

    Never raises on numeric input: a zero equity or zero hold period shows
    up as inf/nan in roi and irr rather than as an exception.

    Args:
        inputs: Property assumptions
        renovation_items: Renovation budget line items
        financing_sources: All financing sources; disabled ones are skipped

    Returns:
        ProFormaResult with every derived figure
    """
    # === RENOVATION ===
    base_renovation = sum(calculate_item_total(item) for item in renovation_items)
    contingency = base_renovation * (inputs.contingency_pct / 100)
    total_renovation = base_renovation + contingency

    # === HOLDING COSTS ===
    hold_months = weeks_to_months(inputs.hold_period_weeks)
    property_taxes = (inputs.property_taxes_annual / 12) * hold_months
    insurance = (inputs.insurance_annual / 12) * hold_months
    utilities = inputs.utilities_monthly * hold_months
    hoa = inputs.hoa_monthly * hold_months
    total_holding_costs = property_taxes + insurance + utilities + hoa

    # === FINANCING ===
    details: List[FinancingDetail] = [
        calculate_financing_detail(source, inputs.purchase_price, hold_months)
        for source in financing_sources
        if source.enabled
    ]
    # Totals come from the list so a repeated id cannot drop a loan
    financing_details = {d.source_id: d for d in details}
    total_loan_amount = sum(d.loan_amount for d in details)
    total_financing_costs = sum(d.total for d in details)

    # === COST STACK ===
    total_costs = (
        inputs.purchase_price
        + inputs.purchase_closing_costs
        + total_renovation
        + total_holding_costs
        + total_financing_costs
    )

    # === SALE ===
    sale_closing_costs = inputs.arv_price * (inputs.sale_closing_costs_pct / 100)
    net_sale_proceeds = inputs.arv_price - sale_closing_costs

    # === RETURNS ===
    net_profit = net_sale_proceeds - total_costs
    total_equity = total_costs - total_loan_amount
    roi = calculate_roi(net_profit, total_equity)
    irr = annualize_roi(roi, hold_months / 12)

    return ProFormaResult(
        hold_months=hold_months,
        base_renovation=base_renovation,
        contingency=contingency,
        total_renovation=total_renovation,
        property_taxes=property_taxes,
        insurance=insurance,
        utilities=utilities,
        hoa=hoa,
        total_holding_costs=total_holding_costs,
        financing_details=financing_details,
        total_loan_amount=total_loan_amount,
        total_financing_costs=total_financing_costs,
        total_costs=total_costs,
        sale_closing_costs=sale_closing_costs,
        net_sale_proceeds=net_sale_proceeds,
        net_profit=net_profit,
        total_equity=total_equity,
        roi=roi,
        irr=irr,
    )
