"""Shopping list persistence: the active list and the archive of saved lists."""
from typing import List

from mealcart.domain.ShoppingList import ShoppingItem, SavedShoppingList
from mealcart.infra.Json_Store import JsonRepository
from mealcart.utilities.constants import SHOPPING_ITEMS_KEY, SAVED_LISTS_KEY
from mealcart.utilities.errors import MalformedPersistedState


def _expect_list(key: str, raw) -> list:
    if not isinstance(raw, list):
        raise MalformedPersistedState(key, f"expected a list, got {type(raw).__name__}")
    return [entry for entry in raw if isinstance(entry, dict)]


class ShoppingItemsRepository(JsonRepository):
    key = SHOPPING_ITEMS_KEY

    def default(self) -> List[ShoppingItem]:
        return []

    def decode(self, raw) -> List[ShoppingItem]:
        return [ShoppingItem.from_dict(entry) for entry in _expect_list(self.key, raw)]

    def encode(self, value: List[ShoppingItem]):
        return [item.to_dict() for item in value]


class SavedListsRepository(JsonRepository):
    key = SAVED_LISTS_KEY

    def default(self) -> List[SavedShoppingList]:
        return []

    def decode(self, raw) -> List[SavedShoppingList]:
        return [SavedShoppingList.from_dict(entry) for entry in _expect_list(self.key, raw)]

    def encode(self, value: List[SavedShoppingList]):
        return [saved.to_dict() for saved in value]
