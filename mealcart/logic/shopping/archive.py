"""Shopping list archive: named, timestamped snapshots of shopping lists.

Snapshots are immutable once created. Saving and loading always copy items,
so later edits of the active list never leak into an archived list (or back).
"""
import logging
from typing import List, Optional

from mealcart.domain.ShoppingList import SavedShoppingList, ShoppingItem
from mealcart.infra.Shopping_Repository import SavedListsRepository

logger = logging.getLogger(__name__)


class ShoppingListArchive:
    def __init__(self, repository: SavedListsRepository):
        self.repository = repository

    def list(self) -> List[SavedShoppingList]:
        return self.repository.load()

    def get(self, list_id: str) -> Optional[SavedShoppingList]:
        for saved in self.repository.load():
            if saved.id == list_id:
                return saved
        return None

    def save(self, name: str, items: List[ShoppingItem], period_label: str = "") -> SavedShoppingList:
        '''Archives a copy of items under name. Returns the new snapshot.'''
        snapshot = SavedShoppingList(name=name.strip() or "Shopping list", items=items,
                                     period_label=period_label)
        self.repository.update(lambda saved: saved + [snapshot])
        logger.info("Archived shopping list '%s' (%d items)", snapshot.name, len(items))
        return snapshot

    def load(self, list_id: str) -> List[ShoppingItem]:
        '''Returns copies of the archived items. Raises KeyError for unknown ids.'''
        saved = self.get(list_id)
        if saved is None:
            raise KeyError(list_id)
        return saved.items

    def delete(self, list_id: str) -> None:
        def _remove(saved: List[SavedShoppingList]) -> List[SavedShoppingList]:
            remaining = [s for s in saved if s.id != list_id]
            if len(remaining) == len(saved):
                raise KeyError(list_id)
            return remaining

        self.repository.update(_remove)
        logger.info("Deleted archived shopping list %s", list_id)
