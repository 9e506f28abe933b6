"""Application context shared by the API routes.

Routes get their repositories and services through the ``get_context``
dependency; tests swap it out with ``app.dependency_overrides``.
"""
from pathlib import Path
from typing import Optional

from mealcart.api.api_ai import get_suggester
from mealcart.infra.Json_Store import JsonStore
from mealcart.infra.Library_Repository import LibraryRepository
from mealcart.infra.Plan_Repository import PlanRepository
from mealcart.infra.Shopping_Repository import SavedListsRepository, ShoppingItemsRepository
from mealcart.infra.paths import DATA_DIR
from mealcart.logic.library.sync import IngredientSuggester, LibrarySync
from mealcart.logic.planning.plan_store import PlanStore
from mealcart.logic.shopping.service import ShoppingService


class AppContext:
    def __init__(self, data_dir: Path = DATA_DIR, suggester: Optional[IngredientSuggester] = None):
        self.store = JsonStore(data_dir)
        self.library = LibraryRepository(self.store)
        self.plan = PlanRepository(self.store)
        self.plan_store = PlanStore(self.plan, self.library)
        self.sync = LibrarySync(self.library, suggester)
        self.shopping = ShoppingService(
            self.plan_store, self.library,
            ShoppingItemsRepository(self.store), SavedListsRepository(self.store),
            suggester,
        )


_context: Optional[AppContext] = None


def get_context() -> AppContext:
    """Lazily build the process-wide context from configuration."""
    global _context
    if _context is None:
        _context = AppContext(DATA_DIR, get_suggester())
    return _context
