"""Category aggregation and structural editing of cost lists.

Every editing operation returns a new object; inputs are never mutated.
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, List

from .annualization import annual_item_cost
from .models import Category, CategoryTotal, Configuration, ItemId, LineItem, coerce_number


logger = logging.getLogger(__name__)

_NUMERIC_ITEM_FIELDS = {"value"}


def annual_total(
    items: Iterable[LineItem],
    hourly_wage: float,
    working_days_per_year: float,
    hours_per_working_day: float,
) -> float:
    """Sum the annual cost of a list of line items."""
    return sum(
        annual_item_cost(item, hourly_wage, working_days_per_year, hours_per_working_day)
        for item in items
    )


def category_totals(
    categories: Iterable[Category],
    hourly_wage: float,
    working_days_per_year: float,
    hours_per_working_day: float,
) -> List[CategoryTotal]:
    """Annual total for each category, in collection order."""
    return [
        CategoryTotal(
            id=category.id,
            name=category.name,
            annual_total=annual_total(
                category.items, hourly_wage, working_days_per_year, hours_per_working_day
            ),
        )
        for category in categories
    ]


def next_id(existing: Iterable[ItemId]) -> int:
    """Generate an id that cannot collide with any existing numeric id.

    Uses the current time in milliseconds, bumped past the largest numeric
    id already present.
    """
    numeric = [value for value in existing if isinstance(value, int)]
    candidate = int(time.time() * 1000)
    if numeric:
        candidate = max(candidate, max(numeric) + 1)
    return candidate


def add_item(category: Category, **fields: Any) -> Category:
    """Append a new line item with default values.

    Args:
        category: Category to extend
        **fields: Optional initial field values for the new item

    Returns:
        Updated category
    """
    item_id = next_id(item.id for item in category.items)
    new_item = LineItem.model_validate({**fields, "id": item_id})
    logger.debug(f"Added item {item_id} to category {category.name!r}")
    return category.model_copy(update={"items": [*category.items, new_item]})


def update_item(category: Category, item_id: ItemId, patch: Dict[str, Any]) -> Category:
    """Replace the given fields of one item; no-op when the id is unknown."""
    if not any(item.id == item_id for item in category.items):
        logger.debug(f"Item {item_id!r} not found in category {category.name!r}")
        return category

    clean = {
        key: coerce_number(value) if key in _NUMERIC_ITEM_FIELDS else value
        for key, value in patch.items()
        if key != "id"
    }
    items = [
        LineItem.model_validate({**item.model_dump(), **clean}) if item.id == item_id else item
        for item in category.items
    ]
    return category.model_copy(update={"items": items})


def remove_item(category: Category, item_id: ItemId) -> Category:
    """Drop the matching item; no-op when the id is unknown."""
    items = [item for item in category.items if item.id != item_id]
    return category.model_copy(update={"items": items})


def add_category(categories: List[Category], name: str = "New Category") -> List[Category]:
    """Append an empty category to a collection."""
    category_id = next_id(category.id for category in categories)
    logger.debug(f"Added category {name!r} ({category_id})")
    return [*categories, Category(id=category_id, name=name)]


def rename_category(categories: List[Category], category_id: ItemId, name: str) -> List[Category]:
    """Rename the matching category; no-op when the id is unknown."""
    return [
        category.model_copy(update={"name": name}) if category.id == category_id else category
        for category in categories
    ]


def remove_category(categories: List[Category], category_id: ItemId) -> List[Category]:
    """Drop the matching category; no-op when the id is unknown."""
    return [category for category in categories if category.id != category_id]


def update_category_items(
    categories: List[Category],
    category_id: ItemId,
    operation: Callable[[Category], Category],
) -> List[Category]:
    """Apply an item operation to the matching category in a collection.

    Example:
        update_category_items(cats, "trucks", lambda c: remove_item(c, 3))
    """
    return [
        operation(category) if category.id == category_id else category
        for category in categories
    ]


def with_settings(config: Configuration, **patch: Any) -> Configuration:
    """Return a copy of the configuration with top-level fields replaced.

    The result is re-validated, so numeric coercion and clamping apply.
    """
    unknown = set(patch) - set(Configuration.model_fields)
    if unknown:
        raise ValueError(f"Unknown configuration fields: {sorted(unknown)}")
    data = {name: getattr(config, name) for name in Configuration.model_fields}
    data.update(patch)
    return Configuration.model_validate(data)
