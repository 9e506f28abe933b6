"""Meal library persistence (JSON key 'meal_library')."""

from mealcart.domain.MealLibrary import MealLibrary
from mealcart.infra.Json_Store import JsonRepository
from mealcart.utilities.constants import LIBRARY_KEY, DEFAULT_LIBRARY
from mealcart.utilities.errors import MalformedPersistedState


class LibraryRepository(JsonRepository):
    key = LIBRARY_KEY

    def default(self) -> MealLibrary:
        # Seeded once; afterwards the saved library is authoritative, even if empty
        return MealLibrary.from_names(DEFAULT_LIBRARY)

    def decode(self, raw) -> MealLibrary:
        if not isinstance(raw, dict):
            raise MalformedPersistedState(self.key, f"expected an object, got {type(raw).__name__}")
        return MealLibrary.from_dict(raw)

    def encode(self, value: MealLibrary):
        return value.to_dict()
