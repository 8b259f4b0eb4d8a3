"""
Domain schemas for a house flip project.

Serialized with camelCase keys so project files written by earlier
versions of the app load unchanged.
"""

import enum
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

CURRENT_SCHEMA_VERSION = 1


class FinancingKind(str, enum.Enum):
    """How a financing source's loan amount is sized."""
    ltv = "ltv"
    fixed = "fixed"


class DomainModel(BaseModel):
    """Immutable base for all project models."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True
        # Non-finite inputs must survive a save/load round trip
        ser_json_inf_nan = "constants"


class PropertyInputs(DomainModel):
    """Acquisition, hold and sale assumptions."""

    purchase_price: float = 432910
    arv_price: float = 600000  # After-repair value
    hold_period_weeks: float = 36
    purchase_closing_costs: float = 4329
    sale_closing_costs_pct: float = 6
    property_taxes_annual: float = 4500
    insurance_annual: float = 4500
    utilities_monthly: float = 200
    hoa_monthly: float = 0
    contingency_pct: float = 10


class Material(DomainModel):
    name: str
    cost: float = 0


class RenovationLineItem(DomainModel):
    """One category of the renovation budget."""

    id: int
    category: str
    materials: List[Material] = Field(default_factory=list)
    labor: float = 0
    notes: str = ""


class FinancingSource(DomainModel):
    """A loan funding part of the project."""

    id: int
    name: str
    kind: FinancingKind = Field(default=FinancingKind.fixed, alias="type")
    ltv_pct: float = 0
    fixed_amount: float = 0
    interest_rate: float = 0  # Annual %
    origination_pct: float = 0
    enabled: bool = True


def default_renovation_items() -> List[RenovationLineItem]:
    """Starter renovation budget for a new project."""
    return [
        RenovationLineItem(
            id=1,
            category="Flooring",
            materials=[
                Material(name="Tiles", cost=3500),
                Material(name="Underlayment", cost=800),
            ],
            labor=5300,
            notes="1,200 sq ft",
        ),
        RenovationLineItem(
            id=2,
            category="Paint",
            materials=[
                Material(name="Interior Paint", cost=2800),
                Material(name="Primer", cost=600),
            ],
            labor=4200,
            notes="Entire interior",
        ),
        RenovationLineItem(
            id=3,
            category="Kitchen",
            materials=[
                Material(name="Cabinets", cost=6500),
                Material(name="Countertops", cost=3200),
            ],
            labor=1700,
            notes="Full remodel",
        ),
        RenovationLineItem(
            id=4,
            category="Bathroom",
            materials=[
                Material(name="Vanity", cost=1200),
                Material(name="Toilet", cost=400),
            ],
            labor=800,
            notes="2 bathrooms",
        ),
    ]


def default_financing_sources() -> List[FinancingSource]:
    """Starter capital stack for a new project."""
    return [
        FinancingSource(
            id=1,
            name="Senior Mortgage",
            kind=FinancingKind.ltv,
            ltv_pct=75,
            interest_rate=7.5,
            origination_pct=1,
        ),
        FinancingSource(
            id=2,
            name="Hard Money",
            kind=FinancingKind.fixed,
            fixed_amount=40000,
            interest_rate=12,
            origination_pct=2,
        ),
    ]


class Project(DomainModel):
    """
    A saved pro forma: inputs, renovation budget and financing.

    Records written before versioning carry no schemaVersion and are read
    as version 1.
    """

    schema_version: int = CURRENT_SCHEMA_VERSION
    id: Optional[str] = None
    project_name: str = "Terrace Way"
    inputs: PropertyInputs = Field(default_factory=PropertyInputs)
    renovation_items: List[RenovationLineItem] = Field(
        default_factory=default_renovation_items
    )
    financing_sources: List[FinancingSource] = Field(
        default_factory=default_financing_sources
    )
    saved_at: Optional[datetime] = None
    exported_at: Optional[datetime] = None
    imported_at: Optional[datetime] = None


# Partial updates: only fields explicitly set are applied.


class PropertyInputsUpdate(DomainModel):
    purchase_price: Optional[float] = None
    arv_price: Optional[float] = None
    hold_period_weeks: Optional[float] = None
    purchase_closing_costs: Optional[float] = None
    sale_closing_costs_pct: Optional[float] = None
    property_taxes_annual: Optional[float] = None
    insurance_annual: Optional[float] = None
    utilities_monthly: Optional[float] = None
    hoa_monthly: Optional[float] = None
    contingency_pct: Optional[float] = None


class FinancingSourceUpdate(DomainModel):
    name: Optional[str] = None
    kind: Optional[FinancingKind] = Field(default=None, alias="type")
    ltv_pct: Optional[float] = None
    fixed_amount: Optional[float] = None
    interest_rate: Optional[float] = None
    origination_pct: Optional[float] = None
    enabled: Optional[bool] = None


class RenovationItemUpdate(DomainModel):
    category: Optional[str] = None
    labor: Optional[float] = None
    notes: Optional[str] = None


class MaterialUpdate(DomainModel):
    name: Optional[str] = None
    cost: Optional[float] = None
