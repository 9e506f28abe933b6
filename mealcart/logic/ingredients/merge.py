"""Ingredient merge engine.

Provides merge_ingredients(existing, suggested): re-syncs one meal's
ingredient list with fresh suggestions without touching user-entered rows.

Rules:
  - Every Manual ingredient of ``existing`` is kept unchanged, in order.
  - AI ingredients of ``existing`` are replaced wholesale by ``suggested``.
  - A suggestion whose name matches a Manual ingredient (trimmed,
    case-insensitive) is dropped entirely; the manual row wins.
  - Result order: manual rows first, then surviving suggestions in
    suggestion order, all tagged AI.

Known limitation: only leading/trailing whitespace and case are ignored when
matching names ("Red  Onion" and "Red Onion" are different ingredients).
"""
from typing import Iterable, List

from mealcart.domain.Ingredient import MealIngredient, Provenance


def merge_ingredients(existing: Iterable[MealIngredient],
                      suggested: Iterable[MealIngredient]) -> List[MealIngredient]:
    manual_kept = [ing.copy() for ing in existing if ing.is_manual]
    manual_keys = {ing.match_key() for ing in manual_kept}

    merged = list(manual_kept)
    for suggestion in suggested:
        if suggestion.match_key() in manual_keys:
            continue
        merged.append(suggestion.copy(provenance=Provenance.AI))
    return merged


__all__ = ['merge_ingredients']
