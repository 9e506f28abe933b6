"""Shopping list builder.

Provides build_shopping_list(plan_entries, library, fallback=None): the
deterministic, library-driven aggregation of planned meals into one
consolidated shopping list.
"""
import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from mealcart.domain.Ingredient import MealIngredient
from mealcart.domain.MealLibrary import MealCategory, MealLibrary
from mealcart.domain.Plan import PlanEntry
from mealcart.domain.ShoppingList import ShoppingItem
from mealcart.utilities.errors import SuggestionServiceFailure, UnresolvedMealReference

logger = logging.getLogger(__name__)

# Called with the name of a meal missing from the library; returns estimated ingredients.
Fallback = Callable[[str], List[MealIngredient]]


def _normalize(name: str) -> str:
    return (name or '').strip().lower()


def resolve_component(library: MealLibrary, category: MealCategory, meal_name: str) -> List[MealIngredient]:
    """Return the reference ingredients of meal_name in category.

    Raises UnresolvedMealReference when the category holds no meal of that name.
    Duplicate names resolve to the first match.
    """
    item = library.find(category, meal_name)
    if item is None:
        raise UnresolvedMealReference(category.value, meal_name)
    return item.ingredients


def unresolved_references(plan_entries: Iterable[PlanEntry], library: MealLibrary) -> List[Tuple[str, str]]:
    """Distinct (category, meal name) pairs the library cannot resolve, in first-seen order."""
    missing: List[Tuple[str, str]] = []
    for entry in plan_entries:
        for category, meal_name in entry.components():
            if not meal_name or not meal_name.strip() or library.find(category, meal_name) is not None:
                continue
            ref = (category.value, meal_name)
            if ref not in missing:
                missing.append(ref)
    return missing


def build_shopping_list(plan_entries: Iterable[PlanEntry], library: MealLibrary,
                        fallback: Optional[Fallback] = None) -> List[ShoppingItem]:
    """Aggregate the ingredients of every planned meal component.

    Args:
        plan_entries: Plan entries of the selected date range.
        library: Meal library the six components of each entry resolve against.
        fallback: Optional estimator for meals missing from the library. Called
            at most once per distinct meal name; a failure skips that meal.

    Returns:
        One ShoppingItem per distinct ingredient (trimmed, case-insensitive
        name) in first-seen order. Quantities are plain sums of the library's
        reference amounts: every component occurrence counts once, household
        size is never applied here. The first-seen unit and spelling are kept;
        units are not converted.
    """
    required: Dict[str, Dict] = {}
    estimated: Dict[str, List[MealIngredient]] = {}

    for entry in plan_entries:
        for category, meal_name in entry.components():
            if not meal_name or not meal_name.strip():
                continue
            try:
                ingredients = resolve_component(library, category, meal_name)
            except UnresolvedMealReference as e:
                ingredients = _estimate(e, fallback, estimated)
            for ing in ingredients:
                name = (ing.name or '').strip()
                if not name:
                    continue
                k = _normalize(name)
                unit = ing.unit or ''
                if k not in required:
                    required[k] = {"display_name": name, "quantity": 0, "unit": unit}
                elif unit and required[k]["unit"] != unit:
                    if not required[k]["unit"]:
                        required[k]["unit"] = unit
                    else:
                        logger.warning("Unit mismatch for '%s': keeping '%s', ignoring '%s'",
                                       name, required[k]["unit"], unit)
                required[k]["quantity"] += ing.amount

    return [
        ShoppingItem(name=data["display_name"], quantity=data["quantity"], unit=data["unit"])
        for data in required.values()
    ]


def _estimate(error: UnresolvedMealReference, fallback: Optional[Fallback],
              cache: Dict[str, List[MealIngredient]]) -> List[MealIngredient]:
    if fallback is None:
        logger.info("Skipping unresolved meal: %s", error)
        return []
    if error.meal_name not in cache:
        try:
            cache[error.meal_name] = list(fallback(error.meal_name) or [])
        except SuggestionServiceFailure as e:
            logger.warning("Estimation failed for '%s': %s", error.meal_name, e)
            cache[error.meal_name] = []
    return cache[error.meal_name]


__all__ = ['build_shopping_list', 'resolve_component', 'unresolved_references']
