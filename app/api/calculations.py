"""
Pro forma calculation API endpoints.

Non-finite figures (e.g. ROI at zero equity) are returned as null.
"""

from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.calculations.formatting import finite_or_none
from app.calculations.proforma import ProFormaResult, compute_proforma
from app.schemas.project import FinancingSource, PropertyInputs, RenovationLineItem

router = APIRouter()


class ApiModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ProFormaInput(ApiModel):
    """Input for a pro forma calculation."""

    inputs: PropertyInputs = Field(default_factory=PropertyInputs)
    renovation_items: List[RenovationLineItem] = []
    financing_sources: List[FinancingSource] = []


class FinancingDetailResponse(ApiModel):
    source_id: int
    name: str
    loan_amount: Optional[float]
    origination: Optional[float]
    interest: Optional[float]
    total: Optional[float]


class ProFormaResponse(ApiModel):
    """Calculated pro forma figures."""

    hold_months: Optional[float]

    # Renovation
    base_renovation: Optional[float]
    contingency: Optional[float]
    total_renovation: Optional[float]

    # Holding
    property_taxes: Optional[float]
    insurance: Optional[float]
    utilities: Optional[float]
    hoa: Optional[float]
    total_holding_costs: Optional[float]

    # Financing
    financing_details: List[FinancingDetailResponse]
    total_loan_amount: Optional[float]
    total_financing_costs: Optional[float]

    # Cost stack, sale, returns
    total_costs: Optional[float]
    sale_closing_costs: Optional[float]
    net_sale_proceeds: Optional[float]
    net_profit: Optional[float]
    total_equity: Optional[float]
    roi: Optional[float]
    irr: Optional[float]


def proforma_to_response(result: ProFormaResult) -> ProFormaResponse:
    """Convert an engine result to the response schema."""
    f = finite_or_none
    return ProFormaResponse(
        hold_months=f(result.hold_months),
        base_renovation=f(result.base_renovation),
        contingency=f(result.contingency),
        total_renovation=f(result.total_renovation),
        property_taxes=f(result.property_taxes),
        insurance=f(result.insurance),
        utilities=f(result.utilities),
        hoa=f(result.hoa),
        total_holding_costs=f(result.total_holding_costs),
        financing_details=[
            FinancingDetailResponse(
                source_id=d.source_id,
                name=d.name,
                loan_amount=f(d.loan_amount),
                origination=f(d.origination),
                interest=f(d.interest),
                total=f(d.total),
            )
            for d in result.financing_details.values()
        ],
        total_loan_amount=f(result.total_loan_amount),
        total_financing_costs=f(result.total_financing_costs),
        total_costs=f(result.total_costs),
        sale_closing_costs=f(result.sale_closing_costs),
        net_sale_proceeds=f(result.net_sale_proceeds),
        net_profit=f(result.net_profit),
        total_equity=f(result.total_equity),
        roi=f(result.roi),
        irr=f(result.irr),
    )


@router.post("/proforma", response_model=ProFormaResponse)
async def calculate_proforma(data: ProFormaInput):
    """Calculate a pro forma from inputs, renovation budget and financing."""
    result = compute_proforma(
        data.inputs, data.renovation_items, data.financing_sources
    )
    return proforma_to_response(result)
