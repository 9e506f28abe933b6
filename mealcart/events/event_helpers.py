"""Event helper utilities.

Helpers for publishing user-facing notifications on the global event bus.
Messages name the operation that failed; exception details stay in the logs.

Quick import:
    from mealcart.events.event_helpers import (
        publish_sync_failed, publish_sync_partial,
        publish_estimate_failed, publish_unresolved_meals
    )
"""
from __future__ import annotations
from typing import Iterable, Sequence
from .Event_Bus import (
    publish,
    LIBRARY_SYNC_FAILED, LIBRARY_SYNC_PARTIAL, SHOPPING_ESTIMATE_FAILED, SHOPPING_UNRESOLVED_MEALS
)

__all__ = [
    'publish_sync_failed', 'publish_sync_partial', 'publish_estimate_failed', 'publish_unresolved_meals',
    'LIBRARY_SYNC_FAILED', 'LIBRARY_SYNC_PARTIAL', 'SHOPPING_ESTIMATE_FAILED', 'SHOPPING_UNRESOLVED_MEALS'
]


def publish_sync_failed(operation: str, meal_name: str = ""):
    """Publish a library.sync_failed event."""
    target = f" for '{meal_name}'" if meal_name else ""
    publish(LIBRARY_SYNC_FAILED, {
        'operation': operation,
        'message': f"Ingredient sync{target} failed, check connection.",
    })


def publish_sync_partial(operation: str, updated: int, missing: Sequence[str]):
    """Publish a library.sync_partial event (some meals got no suggestion)."""
    publish(LIBRARY_SYNC_PARTIAL, {
        'operation': operation,
        'message': f"Updated {updated} meals; no suggestions for {len(missing)}.",
        'updated': updated,
        'missing': list(missing),
    })


def publish_estimate_failed(operation: str):
    """Publish a shopping.estimate_failed event."""
    publish(SHOPPING_ESTIMATE_FAILED, {
        'operation': operation,
        'message': "Shopping list estimate failed, check connection. The previous list was kept.",
    })


def publish_unresolved_meals(operation: str, meals: Iterable[str]):
    """Publish a shopping.unresolved_meals event listing meals missing from the library."""
    meals = list(meals)
    publish(SHOPPING_UNRESOLVED_MEALS, {
        'operation': operation,
        'message': f"{len(meals)} planned meals are not in the library and were skipped or estimated.",
        'meals': meals,
    })
