"""User edits of the meal library.

Each function takes a MealLibrary and returns a new one; the input is never
modified. Ingredients created or edited here are user-entered, so they are
always tagged Manual and survive later suggestion re-syncs.
"""
from typing import Optional

from mealcart.domain.Ingredient import MealIngredient, Provenance
from mealcart.domain.MealLibrary import MealCategory, MealItem, MealLibrary
from mealcart.utilities.constants import DEFAULT_UNIT
from mealcart.utilities.errors import DuplicateMealName


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Meal name cannot be empty")
    return cleaned


def _check_unique(library: MealLibrary, category: MealCategory, name: str, skip_index: Optional[int] = None):
    for i, item in enumerate(library.items(category)):
        if i != skip_index and item.name == name:
            raise DuplicateMealName(MealCategory(category).value, name)


def add_item(library: MealLibrary, category: MealCategory, name: str) -> MealLibrary:
    name = _clean_name(name)
    _check_unique(library, category, name)
    return library.with_items(category, library.items(category) + [MealItem(name=name)])


def rename_item(library: MealLibrary, category: MealCategory, index: int, name: str) -> MealLibrary:
    name = _clean_name(name)
    item = library.get(category, index)
    _check_unique(library, category, name, skip_index=index)
    return library.replace_item(category, index, item.copy(name=name))


def delete_item(library: MealLibrary, category: MealCategory, index: int) -> MealLibrary:
    library.get(category, index)
    items = library.items(category)
    del items[index]
    return library.with_items(category, items)


def add_ingredient(library: MealLibrary, category: MealCategory, index: int,
                   name: str, amount: float = 0, unit: str = DEFAULT_UNIT) -> MealLibrary:
    if amount < 0:
        raise ValueError(f"Amount cannot be negative: {amount}")
    if not (name or "").strip():
        raise ValueError("Ingredient name cannot be empty")
    item = library.get(category, index)
    ingredient = MealIngredient(name=name.strip(), amount=amount, unit=unit, provenance=Provenance.MANUAL)
    return library.replace_item(category, index, item.copy(ingredients=item.ingredients + [ingredient]))


def update_ingredient(library: MealLibrary, category: MealCategory, index: int, ing_index: int,
                      name: Optional[str] = None, amount: Optional[float] = None,
                      unit: Optional[str] = None) -> MealLibrary:
    '''Edits one ingredient; the edited row becomes Manual.'''
    if amount is not None and amount < 0:
        raise ValueError(f"Amount cannot be negative: {amount}")
    if name is not None and not name.strip():
        raise ValueError("Ingredient name cannot be empty")
    item = library.get(category, index)
    if ing_index < 0 or ing_index >= len(item.ingredients):
        raise IndexError(f"No ingredient at index {ing_index} for '{item.name}'")
    ingredients = list(item.ingredients)
    ingredients[ing_index] = ingredients[ing_index].copy(
        name=name.strip() if name is not None else None,
        amount=amount, unit=unit, provenance=Provenance.MANUAL,
    )
    return library.replace_item(category, index, item.copy(ingredients=ingredients))


def delete_ingredient(library: MealLibrary, category: MealCategory, index: int, ing_index: int) -> MealLibrary:
    item = library.get(category, index)
    if ing_index < 0 or ing_index >= len(item.ingredients):
        raise IndexError(f"No ingredient at index {ing_index} for '{item.name}'")
    ingredients = [ing for j, ing in enumerate(item.ingredients) if j != ing_index]
    return library.replace_item(category, index, item.copy(ingredients=ingredients))


def duplicate_names(library: MealLibrary):
    """Map category value -> names occurring more than once (legacy data)."""
    found = {}
    for category in MealCategory:
        names = [item.name for item in library.items(category)]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            found[category.value] = dupes
    return found


__all__ = [
    'add_item', 'rename_item', 'delete_item',
    'add_ingredient', 'update_ingredient', 'delete_ingredient', 'duplicate_names'
]
