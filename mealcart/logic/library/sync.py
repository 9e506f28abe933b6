"""Suggestion sync: fills meal ingredient lists from the suggestion service.

The suggestion call is the only slow, failure-prone step. It runs off the
event loop; everything before and after it is a quick read-modify-write of
the library through the repository.

Concurrency rules:
  - One fetch per (category, index) at a time; a second request while one is
    in flight is suppressed, not queued.
  - One fetch_all at a time.
  - fetch_all and fetch_one are not serialized against each other. Both
    merge into a fresh read of the library, so the later write wins per meal;
    Manual rows survive either way.
  - A result is applied only if the item at the target index still has the
    name it had when the fetch started (delete/rename while in flight).
"""
import asyncio
import logging
from typing import Dict, List, Optional, Protocol, Sequence, Set, Tuple

from mealcart.domain.Ingredient import MealIngredient
from mealcart.domain.MealLibrary import MealCategory, MealLibrary
from mealcart.events.event_helpers import publish_sync_failed, publish_sync_partial
from mealcart.infra.Library_Repository import LibraryRepository
from mealcart.logic.ingredients.merge import merge_ingredients
from mealcart.utilities.errors import SuggestionServiceFailure

logger = logging.getLogger(__name__)


class IngredientSuggester(Protocol):
    def suggest_one(self, meal_name: str) -> List[MealIngredient]: ...

    def suggest_batch(self, meal_names: Sequence[str]) -> Dict[str, List[MealIngredient]]: ...

    def estimate_for_plan(self, plan_entries, library: MealLibrary) -> List[dict]: ...


APPLIED = "applied"
EMPTY = "empty"
STALE = "stale"
SUPPRESSED = "suppressed"
FAILED = "failed"
UNAVAILABLE = "unavailable"


class LibrarySync:
    def __init__(self, repository: LibraryRepository, suggester: Optional[IngredientSuggester] = None):
        self.repository = repository
        self.suggester = suggester
        self._in_flight: Set[Tuple[MealCategory, int]] = set()
        self._all_in_flight = False

    def is_in_flight(self, category: MealCategory, index: int) -> bool:
        return (MealCategory(category), index) in self._in_flight

    async def fetch_one(self, category: MealCategory, index: int) -> Dict:
        """Fetch suggestions for one meal and merge them into its ingredients.

        Raises IndexError when there is no meal at index. Every other outcome
        is reported through the returned status.
        """
        category = MealCategory(category)
        key = (category, index)
        if key in self._in_flight:
            logger.debug("Fetch for %s[%d] already running, suppressed", category.value, index)
            return {"status": SUPPRESSED}

        meal_name = self.repository.load().get(category, index).name
        if self.suggester is None:
            return {"status": UNAVAILABLE}

        self._in_flight.add(key)
        try:
            try:
                suggestions = await asyncio.to_thread(self.suggester.suggest_one, meal_name)
            except SuggestionServiceFailure as e:
                logger.warning("Suggestion for '%s' failed: %s", meal_name, e)
                publish_sync_failed("fetch_one", meal_name)
                return {"status": FAILED}
            if not suggestions:
                return {"status": EMPTY}
            return self._apply_one(category, index, meal_name, suggestions)
        finally:
            self._in_flight.discard(key)

    def _apply_one(self, category: MealCategory, index: int, meal_name: str,
                   suggestions: List[MealIngredient]) -> Dict:
        outcome = {"status": STALE}

        def _merge(library: MealLibrary) -> MealLibrary:
            items = library.items(category)
            if index >= len(items) or items[index].name != meal_name:
                return library
            item = items[index]
            merged = merge_ingredients(item.ingredients, suggestions)
            outcome.update(status=APPLIED, ingredients=len(merged))
            return library.replace_item(category, index, item.copy(ingredients=merged))

        self.repository.update(_merge)
        if outcome["status"] == STALE:
            logger.info("Discarding suggestions for '%s': item %s[%d] changed meanwhile",
                        meal_name, category.value, index)
        return outcome

    async def fetch_all(self) -> Dict:
        """Batch-fetch suggestions for every meal name in the library.

        Meals the service returns nothing for keep their ingredients; the rest
        are merged. Partial results are applied, never rolled back.
        """
        if self._all_in_flight:
            return {"status": SUPPRESSED}
        if self.suggester is None:
            return {"status": UNAVAILABLE}

        names = self.repository.load().meal_names()
        if not names:
            return {"status": EMPTY, "updated": 0, "unchanged": 0}

        self._all_in_flight = True
        try:
            try:
                results = await asyncio.to_thread(self.suggester.suggest_batch, names)
            except SuggestionServiceFailure as e:
                logger.warning("Batch suggestion failed: %s", e)
                publish_sync_failed("fetch_all")
                return {"status": FAILED}
        finally:
            self._all_in_flight = False

        results = {name: ings for name, ings in (results or {}).items() if ings}
        counts = {"updated": 0, "unchanged": 0}

        def _merge(library: MealLibrary) -> MealLibrary:
            counts.update(updated=0, unchanged=0)
            for category in MealCategory:
                items = []
                for item in library.items(category):
                    suggested = results.get(item.name)
                    if suggested:
                        items.append(item.copy(ingredients=merge_ingredients(item.ingredients, suggested)))
                        counts["updated"] += 1
                    else:
                        items.append(item)
                        counts["unchanged"] += 1
                library = library.with_items(category, items)
            return library

        self.repository.update(_merge)
        missing = [name for name in names if name not in results]
        if missing:
            publish_sync_partial("fetch_all", counts["updated"], missing)
        logger.info("Library sync: %d meals updated, %d unchanged", counts["updated"], counts["unchanged"])
        status = APPLIED if results else EMPTY
        return {"status": status, "missing": missing, **counts}
