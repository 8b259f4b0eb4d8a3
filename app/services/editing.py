"""
Copy-on-write edits to a project's inputs, renovation budget and
financing sources.

Every function returns new models and lists; arguments are never mutated.
"""

from typing import List, Sequence

from app.schemas.project import (
    FinancingKind,
    FinancingSource,
    FinancingSourceUpdate,
    Material,
    MaterialUpdate,
    PropertyInputs,
    PropertyInputsUpdate,
    RenovationItemUpdate,
    RenovationLineItem,
)


class ItemNotFoundError(KeyError):
    """Raised when an edit targets an id or index that does not exist."""


def _changes(update) -> dict:
    return update.model_dump(exclude_unset=True, exclude_none=True)


def _next_id(existing: Sequence) -> int:
    return max((entry.id for entry in existing), default=0) + 1


# === INPUTS ===


def apply_inputs_update(
    inputs: PropertyInputs, update: PropertyInputsUpdate
) -> PropertyInputs:
    """Replace only the input fields set on the update."""
    return inputs.model_copy(update=_changes(update))


# === FINANCING SOURCES ===


def _find_source(sources: Sequence[FinancingSource], source_id: int) -> FinancingSource:
    for source in sources:
        if source.id == source_id:
            return source
    raise ItemNotFoundError(f"Financing source {source_id} not found")


def add_financing_source(
    sources: Sequence[FinancingSource], name: str = "New Financing"
) -> List[FinancingSource]:
    """Append a new enabled fixed-amount source."""
    new_source = FinancingSource(
        id=_next_id(sources),
        name=name,
        kind=FinancingKind.fixed,
        ltv_pct=0,
        fixed_amount=0,
        interest_rate=8,
        origination_pct=1,
        enabled=True,
    )
    return [*sources, new_source]


def update_financing_source(
    sources: Sequence[FinancingSource],
    source_id: int,
    update: FinancingSourceUpdate,
) -> List[FinancingSource]:
    _find_source(sources, source_id)
    changes = _changes(update)
    return [
        source.model_copy(update=changes) if source.id == source_id else source
        for source in sources
    ]


def remove_financing_source(
    sources: Sequence[FinancingSource], source_id: int
) -> List[FinancingSource]:
    _find_source(sources, source_id)
    return [source for source in sources if source.id != source_id]


# === RENOVATION ITEMS ===


def _find_item(items: Sequence[RenovationLineItem], item_id: int) -> RenovationLineItem:
    for item in items:
        if item.id == item_id:
            return item
    raise ItemNotFoundError(f"Renovation item {item_id} not found")


def _replace_item(
    items: Sequence[RenovationLineItem], replacement: RenovationLineItem
) -> List[RenovationLineItem]:
    return [replacement if item.id == replacement.id else item for item in items]


def add_renovation_item(
    items: Sequence[RenovationLineItem], category: str = "New Item"
) -> List[RenovationLineItem]:
    """Append a line item with a single zero-cost material."""
    new_item = RenovationLineItem(
        id=_next_id(items),
        category=category,
        materials=[Material(name="New Material", cost=0)],
        labor=0,
        notes="",
    )
    return [*items, new_item]


def update_renovation_item(
    items: Sequence[RenovationLineItem],
    item_id: int,
    update: RenovationItemUpdate,
) -> List[RenovationLineItem]:
    item = _find_item(items, item_id)
    return _replace_item(items, item.model_copy(update=_changes(update)))


def remove_renovation_item(
    items: Sequence[RenovationLineItem], item_id: int
) -> List[RenovationLineItem]:
    _find_item(items, item_id)
    return [item for item in items if item.id != item_id]


# === MATERIALS ===


def _check_index(item: RenovationLineItem, index: int) -> None:
    if not 0 <= index < len(item.materials):
        raise ItemNotFoundError(
            f"Material {index} not found on renovation item {item.id}"
        )


def add_material(
    items: Sequence[RenovationLineItem],
    item_id: int,
    name: str = "New Material",
    cost: float = 0,
) -> List[RenovationLineItem]:
    item = _find_item(items, item_id)
    materials = [*item.materials, Material(name=name, cost=cost)]
    return _replace_item(items, item.model_copy(update={"materials": materials}))


def update_material(
    items: Sequence[RenovationLineItem],
    item_id: int,
    index: int,
    update: MaterialUpdate,
) -> List[RenovationLineItem]:
    item = _find_item(items, item_id)
    _check_index(item, index)
    changes = _changes(update)
    materials = [
        material.model_copy(update=changes) if i == index else material
        for i, material in enumerate(item.materials)
    ]
    return _replace_item(items, item.model_copy(update={"materials": materials}))


def remove_material(
    items: Sequence[RenovationLineItem], item_id: int, index: int
) -> List[RenovationLineItem]:
    """
    Remove one material from a line item.

    An item always keeps at least one material; removing the last one
    leaves the budget unchanged.
    """
    item = _find_item(items, item_id)
    _check_index(item, index)
    if len(item.materials) <= 1:
        return list(items)
    materials = [m for i, m in enumerate(item.materials) if i != index]
    return _replace_item(items, item.model_copy(update={"materials": materials}))
