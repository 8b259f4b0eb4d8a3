"""
Pydantic schemas for projects and their editable parts.
"""

from app.schemas.project import (
    CURRENT_SCHEMA_VERSION,
    FinancingKind,
    FinancingSource,
    FinancingSourceUpdate,
    Material,
    MaterialUpdate,
    Project,
    PropertyInputs,
    PropertyInputsUpdate,
    RenovationItemUpdate,
    RenovationLineItem,
    default_financing_sources,
    default_renovation_items,
)

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "FinancingKind",
    "FinancingSource",
    "FinancingSourceUpdate",
    "Material",
    "MaterialUpdate",
    "Project",
    "PropertyInputs",
    "PropertyInputsUpdate",
    "RenovationItemUpdate",
    "RenovationLineItem",
    "default_financing_sources",
    "default_renovation_items",
]
