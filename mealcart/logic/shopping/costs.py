"""Cost tracking for the active shopping list."""
from typing import Iterable, List

from mealcart.domain.ShoppingList import ShoppingItem


def set_actual_cost(items: Iterable[ShoppingItem], item_id: str, cost: float) -> List[ShoppingItem]:
    """Return a new list where the item with item_id carries cost. KeyError if absent."""
    if cost < 0:
        raise ValueError(f"Cost cannot be negative: {cost}")
    updated, found = [], False
    for item in items:
        if item.id == item_id:
            updated.append(item.copy(actual_cost=cost))
            found = True
        else:
            updated.append(item)
    if not found:
        raise KeyError(item_id)
    return updated


def total_cost(items: Iterable[ShoppingItem]) -> float:
    # Items without a recorded cost count as zero
    return sum(item.actual_cost or 0 for item in items)


__all__ = ['set_actual_cost', 'total_cost']
