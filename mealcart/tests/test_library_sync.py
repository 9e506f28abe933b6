import asyncio
import tempfile
import threading
import unittest
from mealcart.domain.Ingredient import MealIngredient, Provenance
from mealcart.domain.MealLibrary import MealCategory, MealItem, MealLibrary
from mealcart.events.Event_Bus import GLOBAL_EVENT_BUS, LIBRARY_SYNC_FAILED, LIBRARY_SYNC_PARTIAL
from mealcart.infra.Json_Store import JsonStore
from mealcart.infra.Library_Repository import LibraryRepository
from mealcart.logic.library.editing import rename_item
from mealcart.logic.library.sync import LibrarySync
from mealcart.utilities.errors import SuggestionServiceFailure

MAINS = MealCategory.LUNCH_MAINS
MEAT = MealCategory.LUNCH_MEAT


class FakeSuggester:
    def __init__(self, answers=None, fail=False):
        self.answers = answers or {}
        self.fail = fail
        self.calls = []

    def suggest_one(self, meal_name):
        self.calls.append(meal_name)
        if self.fail:
            raise SuggestionServiceFailure("offline")
        return [ing.copy() for ing in self.answers.get(meal_name, [])]

    def suggest_batch(self, meal_names):
        self.calls.append(list(meal_names))
        if self.fail:
            raise SuggestionServiceFailure("offline")
        return {n: self.answers[n] for n in meal_names if n in self.answers}

    def estimate_for_plan(self, plan_entries, library):
        return []


class BlockingSuggester(FakeSuggester):
    """suggest_one waits until released, so a fetch stays in flight."""

    def __init__(self, answers=None):
        super().__init__(answers)
        self.started = threading.Event()
        self.release = threading.Event()

    def suggest_one(self, meal_name):
        self.started.set()
        self.release.wait(5)
        return super().suggest_one(meal_name)


class Recorder:
    def __init__(self, event_name):
        self.event_name = event_name
        self.payloads = []

    def __call__(self, event_name, payload):
        self.payloads.append(payload)

    def __enter__(self):
        GLOBAL_EVENT_BUS.subscribe(self.event_name, self)
        return self

    def __exit__(self, *exc):
        GLOBAL_EVENT_BUS.unsubscribe(self.event_name, self)


class TestLibrarySync(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.repo = LibraryRepository(JsonStore(self._tmp.name))
        self.repo.save(MealLibrary({
            MAINS: [MealItem("Red Rice", [
                MealIngredient("Salt", 5, "g", Provenance.MANUAL),
                MealIngredient("Old Rice", 100, "g", Provenance.AI),
            ]), MealItem("White Rice")],
            MEAT: [MealItem("Chicken Curry")],
        }))
        self.answers = {
            "Red Rice": [MealIngredient("Red Raw Rice", 600, "g"), MealIngredient("salt", 10, "g")],
            "Chicken Curry": [MealIngredient("Chicken", 1000, "g")],
        }

    def tearDown(self):
        self._tmp.cleanup()

    async def test_fetch_one_merges_and_keeps_manual(self):
        sync = LibrarySync(self.repo, FakeSuggester(self.answers))
        result = await sync.fetch_one(MAINS, 0)
        self.assertEqual(result, {"status": "applied", "ingredients": 2})
        ingredients = self.repo.load().get(MAINS, 0).ingredients
        self.assertEqual([(i.name, i.amount, i.provenance) for i in ingredients], [
            ("Salt", 5, Provenance.MANUAL),
            ("Red Raw Rice", 600, Provenance.AI),
        ])

    async def test_fetch_one_empty_answer_leaves_item(self):
        sync = LibrarySync(self.repo, FakeSuggester(self.answers))
        before = self.repo.load()
        self.assertEqual((await sync.fetch_one(MAINS, 1))["status"], "empty")
        self.assertEqual(self.repo.load(), before)

    async def test_fetch_one_without_suggester(self):
        sync = LibrarySync(self.repo, None)
        self.assertEqual((await sync.fetch_one(MAINS, 0))["status"], "unavailable")

    async def test_fetch_one_bad_index(self):
        sync = LibrarySync(self.repo, FakeSuggester(self.answers))
        with self.assertRaises(IndexError):
            await sync.fetch_one(MAINS, 9)

    async def test_fetch_one_failure_publishes_and_keeps_library(self):
        sync = LibrarySync(self.repo, FakeSuggester(fail=True))
        before = self.repo.load()
        with Recorder(LIBRARY_SYNC_FAILED) as rec:
            result = await sync.fetch_one(MAINS, 0)
        self.assertEqual(result["status"], "failed")
        self.assertEqual(self.repo.load(), before)
        self.assertEqual(len(rec.payloads), 1)
        self.assertIn("Red Rice", rec.payloads[0]["message"])
        self.assertNotIn("offline", rec.payloads[0]["message"])

    async def test_second_fetch_for_same_item_is_suppressed(self):
        suggester = BlockingSuggester(self.answers)
        sync = LibrarySync(self.repo, suggester)
        first = asyncio.create_task(sync.fetch_one(MAINS, 0))
        try:
            await asyncio.to_thread(suggester.started.wait, 5)
            self.assertTrue(sync.is_in_flight(MAINS, 0))
            second = await sync.fetch_one(MAINS, 0)
            self.assertEqual(second["status"], "suppressed")
        finally:
            suggester.release.set()
        self.assertEqual((await first)["status"], "applied")
        self.assertFalse(sync.is_in_flight(MAINS, 0))
        self.assertEqual(suggester.calls, ["Red Rice"])

    async def test_result_for_renamed_item_is_discarded(self):
        suggester = BlockingSuggester(self.answers)
        sync = LibrarySync(self.repo, suggester)
        task = asyncio.create_task(sync.fetch_one(MAINS, 0))
        try:
            await asyncio.to_thread(suggester.started.wait, 5)
            self.repo.update(lambda lib: rename_item(lib, MAINS, 0, "Kakulu Rice"))
        finally:
            suggester.release.set()
        self.assertEqual((await task)["status"], "stale")
        item = self.repo.load().get(MAINS, 0)
        self.assertEqual(item.name, "Kakulu Rice")
        self.assertEqual([i.name for i in item.ingredients], ["Salt", "Old Rice"])

    async def test_fetch_all_applies_partial_results(self):
        sync = LibrarySync(self.repo, FakeSuggester(self.answers))
        with Recorder(LIBRARY_SYNC_PARTIAL) as rec:
            result = await sync.fetch_all()
        self.assertEqual(result["status"], "applied")
        self.assertEqual(result["updated"], 2)
        self.assertEqual(result["unchanged"], 1)
        self.assertEqual(result["missing"], ["White Rice"])
        library = self.repo.load()
        self.assertEqual([i.name for i in library.get(MEAT, 0).ingredients], ["Chicken"])
        self.assertEqual([i.name for i in library.get(MAINS, 0).ingredients], ["Salt", "Red Raw Rice"])
        self.assertEqual(rec.payloads[0]["missing"], ["White Rice"])

    async def test_fetch_all_failure_changes_nothing(self):
        sync = LibrarySync(self.repo, FakeSuggester(fail=True))
        before = self.repo.load()
        with Recorder(LIBRARY_SYNC_FAILED) as rec:
            result = await sync.fetch_all()
        self.assertEqual(result["status"], "failed")
        self.assertEqual(self.repo.load(), before)
        self.assertEqual(len(rec.payloads), 1)

    async def test_fetch_all_on_empty_library(self):
        self.repo.save(MealLibrary())
        suggester = FakeSuggester(self.answers)
        result = await LibrarySync(self.repo, suggester).fetch_all()
        self.assertEqual(result["status"], "empty")
        self.assertEqual(suggester.calls, [])
