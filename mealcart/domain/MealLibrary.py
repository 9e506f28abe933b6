"""Meal library: six categories of named meals, each with reference ingredients."""
from enum import Enum
from typing import Dict, List, Optional, Tuple

from mealcart.domain.Ingredient import MealIngredient


class MealCategory(str, Enum):
    BREAKFAST_COMBOS = "breakfast_combos"
    LUNCH_MAINS = "lunch_mains"
    LUNCH_VEG1 = "lunch_veg1"
    LUNCH_VEG2 = "lunch_veg2"
    LUNCH_MEAT = "lunch_meat"
    DINNER_COMBOS = "dinner_combos"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: Dict[MealCategory, str] = {
    MealCategory.BREAKFAST_COMBOS: "Breakfast Combinations",
    MealCategory.LUNCH_MAINS: "Lunch Mains",
    MealCategory.LUNCH_VEG1: "Vegetable 1 (Salads/Sambols)",
    MealCategory.LUNCH_VEG2: "Vegetable 2 (Curries/Roots)",
    MealCategory.LUNCH_MEAT: "Lunch Protein",
    MealCategory.DINNER_COMBOS: "Dinner Combinations",
}


class MealItem:
    def __init__(self, name: str = "", ingredients: Optional[List[MealIngredient]] = None):
        self.name = name
        self.ingredients = ingredients[:] if ingredients else []

    def copy(self, name: Optional[str] = None,
             ingredients: Optional[List[MealIngredient]] = None) -> "MealItem":
        '''Returns a new MealItem; ingredients are copied, never shared.'''
        source = self.ingredients if ingredients is None else ingredients
        return MealItem(
            name=self.name if name is None else name,
            ingredients=[ing.copy() for ing in source],
        )

    def __str__(self) -> str:
        return f"{self.name} ({len(self.ingredients)} ingredients)"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {"name": str(data or "")}
        ingredients = d.get("ingredients") or []
        if not isinstance(ingredients, list):
            raise ValueError(f"Ingredients of '{d.get('name')}' must be a list")
        return MealItem(
            name=str(d.get("name") or ""),
            ingredients=[MealIngredient.from_dict(ing) for ing in ingredients if isinstance(ing, dict)],
        )

    def to_dict(self):
        return {
            "name": self.name,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
        }


class MealLibrary:
    """Ordered meal items per category.

    Instances are treated as values: edits go through ``with_items`` /
    ``replace_item`` which build a new library and leave the old one intact.
    """

    def __init__(self, categories: Optional[Dict[MealCategory, List[MealItem]]] = None):
        categories = categories or {}
        self._categories: Dict[MealCategory, Tuple[MealItem, ...]] = {
            cat: tuple(categories.get(cat, [])) for cat in MealCategory
        }

    def items(self, category: MealCategory) -> List[MealItem]:
        return list(self._categories[MealCategory(category)])

    def get(self, category: MealCategory, index: int) -> MealItem:
        items = self._categories[MealCategory(category)]
        if index < 0 or index >= len(items):
            raise IndexError(f"No meal at index {index} in '{MealCategory(category).value}'")
        return items[index]

    def find(self, category: MealCategory, name: str) -> Optional[MealItem]:
        '''Exact name lookup; with duplicate names the first match wins.'''
        for item in self._categories[MealCategory(category)]:
            if item.name == name:
                return item
        return None

    def default_name(self, category: MealCategory) -> str:
        items = self._categories[MealCategory(category)]
        return items[0].name if items else ""

    def meal_names(self) -> List[str]:
        '''Distinct meal names across all categories, in category order.'''
        seen = []
        for cat in MealCategory:
            for item in self._categories[cat]:
                if item.name and item.name not in seen:
                    seen.append(item.name)
        return seen

    def with_items(self, category: MealCategory, items: List[MealItem]) -> "MealLibrary":
        categories = {cat: list(self._categories[cat]) for cat in MealCategory}
        categories[MealCategory(category)] = list(items)
        return MealLibrary(categories)

    def replace_item(self, category: MealCategory, index: int, item: MealItem) -> "MealLibrary":
        self.get(category, index)
        items = self.items(category)
        items[index] = item
        return self.with_items(category, items)

    def __eq__(self, other) -> bool:
        if not isinstance(other, MealLibrary):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        counts = ", ".join(f"{cat.value}: {len(items)}" for cat, items in self._categories.items())
        return f"MealLibrary({counts})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Builds a library from its JSON form. Unknown categories are ignored.'''
        d = data if isinstance(data, dict) else {}
        categories: Dict[MealCategory, List[MealItem]] = {}
        for cat in MealCategory:
            raw = d.get(cat.value) or []
            if isinstance(raw, list):
                categories[cat] = [MealItem.from_dict(entry) for entry in raw]
        return MealLibrary(categories)

    @staticmethod
    def from_names(names: Dict[str, List[str]]):
        '''Builds a library of ingredient-less meals from category -> names.'''
        return MealLibrary.from_dict({
            cat: [{"name": n, "ingredients": []} for n in cat_names]
            for cat, cat_names in names.items()
        })

    def to_dict(self):
        return {
            cat.value: [item.to_dict() for item in items]
            for cat, items in self._categories.items()
        }
