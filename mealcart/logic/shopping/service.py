"""Shopping workflow: generate the active list, track costs, archive lists."""
import logging
from datetime import date
from typing import Dict, List, Optional

from mealcart.domain.ShoppingList import SavedShoppingList, ShoppingItem
from mealcart.events.event_helpers import publish_estimate_failed, publish_unresolved_meals
from mealcart.infra.Library_Repository import LibraryRepository
from mealcart.infra.Shopping_Repository import SavedListsRepository, ShoppingItemsRepository
from mealcart.logic.library.sync import IngredientSuggester
from mealcart.logic.planning.plan_store import PlanStore, period_label
from mealcart.logic.shopping.archive import ShoppingListArchive
from mealcart.logic.shopping.costs import set_actual_cost, total_cost
from mealcart.logic.shopping.list_builder import build_shopping_list, unresolved_references
from mealcart.utilities.errors import SuggestionServiceFailure

logger = logging.getLogger(__name__)

MODE_LIBRARY = "library"
MODE_ESTIMATE = "estimate"


class ShoppingService:
    def __init__(self, plan_store: PlanStore, library_repository: LibraryRepository,
                 items_repository: ShoppingItemsRepository, saved_repository: SavedListsRepository,
                 suggester: Optional[IngredientSuggester] = None):
        self.plan_store = plan_store
        self.library_repository = library_repository
        self.items_repository = items_repository
        self.archive = ShoppingListArchive(saved_repository)
        self.suggester = suggester

    # --- Active list -------------------------------------------------------
    def active_items(self) -> List[ShoppingItem]:
        return self.items_repository.load()

    def generate(self, start: date, end: date, mode: str = MODE_LIBRARY) -> Dict:
        """Replace the active list with the aggregate for [start, end].

        mode="library" aggregates library quantities; meals missing from the
        library are estimated one by one when a suggester is configured.
        mode="estimate" asks the suggester for the whole plan at once; if that
        fails the previous active list is kept and status is "failed".
        """
        if mode not in (MODE_LIBRARY, MODE_ESTIMATE):
            raise ValueError(f"Unknown mode: {mode}")
        entries = self.plan_store.entries_between(start, end)
        library = self.library_repository.load()
        label = period_label(start, end)
        unresolved = unresolved_references(entries, library)
        unresolved_payload = [{"category": c, "meal": n} for c, n in unresolved]

        if mode == MODE_ESTIMATE:
            if self.suggester is None:
                return {"status": "unavailable", "period_label": label, "items": self.active_items(),
                        "unresolved": unresolved_payload}
            try:
                estimate = self.suggester.estimate_for_plan(entries, library)
            except SuggestionServiceFailure as e:
                logger.warning("Plan estimate failed: %s", e)
                publish_estimate_failed("generate")
                return {"status": "failed", "period_label": label, "items": self.active_items(),
                        "unresolved": unresolved_payload}
            items = [
                ShoppingItem(name=row["name"], quantity=row["quantity"], unit=row.get("unit", ""))
                for row in estimate
            ]
        else:
            fallback = self.suggester.suggest_one if self.suggester is not None else None
            items = build_shopping_list(entries, library, fallback=fallback)
            if unresolved:
                publish_unresolved_meals("generate", [name for _, name in unresolved])

        self.items_repository.save(items)
        logger.info("Generated shopping list for %s: %d items (mode=%s)", label, len(items), mode)
        return {
            "status": "ok",
            "period_label": label,
            "items": items,
            "unresolved": unresolved_payload,
        }

    # --- Cost tracking -----------------------------------------------------
    def set_actual_cost(self, item_id: str, cost: float) -> ShoppingItem:
        items = self.items_repository.update(lambda current: set_actual_cost(current, item_id, cost))
        return next(item for item in items if item.id == item_id)

    def total_cost(self) -> float:
        return total_cost(self.active_items())

    # --- Archive -----------------------------------------------------------
    def list_saved(self) -> List[SavedShoppingList]:
        return self.archive.list()

    def save_active(self, name: str, period_label: str = "") -> SavedShoppingList:
        return self.archive.save(name, self.active_items(), period_label)

    def load_saved(self, list_id: str) -> List[ShoppingItem]:
        '''Replaces the active list with a copy of an archived one.'''
        items = self.archive.load(list_id)
        self.items_repository.save(items)
        return items

    def delete_saved(self, list_id: str) -> None:
        self.archive.delete(list_id)
