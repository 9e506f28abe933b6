import tempfile
import unittest
from types import SimpleNamespace
from fastapi.testclient import TestClient
from mealcart.api.api_ai import OpenAISuggester
from mealcart.api.api_run import app
from mealcart.api.deps import AppContext, get_context
from mealcart.domain.Ingredient import MealIngredient
from mealcart.domain.MealLibrary import MealCategory, MealItem, MealLibrary
from mealcart.events import web_observers
from mealcart.utilities.errors import SuggestionServiceFailure


class FakeSuggester:
    def __init__(self, fail=False):
        self.fail = fail

    def suggest_one(self, meal_name):
        if self.fail:
            raise SuggestionServiceFailure("offline")
        return [MealIngredient(f"{meal_name} base", 100, "g")]

    def suggest_batch(self, meal_names):
        if self.fail:
            raise SuggestionServiceFailure("offline")
        return {name: self.suggest_one(name) for name in meal_names}

    def estimate_for_plan(self, plan_entries, library):
        if self.fail:
            raise SuggestionServiceFailure("offline")
        return [{"name": "Everything", "quantity": len(plan_entries), "unit": "units"}]


class ApiTestCase(unittest.TestCase):
    suggester = None

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.ctx = AppContext(self._tmp.name, self.suggester)
        self.ctx.library.save(MealLibrary({
            MealCategory.BREAKFAST_COMBOS: [MealItem("Pittu", [MealIngredient("Rice Flour", 500, "g")])],
            MealCategory.LUNCH_MAINS: [MealItem("Red Rice", [MealIngredient("Red Raw Rice", 600, "g")])],
            MealCategory.LUNCH_MEAT: [MealItem("Chicken Curry", [MealIngredient("Chicken", 1000, "g")])],
        }))
        app.dependency_overrides[get_context] = lambda: self.ctx
        web_observers.start()
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self._tmp.cleanup()


class TestLibraryApi(ApiTestCase):

    def test_get_library_lists_all_categories(self):
        res = self.client.get("/api/library")
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertEqual([c["key"] for c in data["categories"]], [c.value for c in MealCategory])
        self.assertEqual(data["duplicates"], {})

    def test_add_rename_delete_item(self):
        res = self.client.post("/api/library/lunch_mains/items", json={"name": "White Rice"})
        self.assertEqual(res.status_code, 200)
        res = self.client.put("/api/library/lunch_mains/items/1", json={"name": "Samba Rice"})
        mains = next(c for c in res.json()["categories"] if c["key"] == "lunch_mains")
        self.assertEqual([i["name"] for i in mains["items"]], ["Red Rice", "Samba Rice"])
        res = self.client.delete("/api/library/lunch_mains/items/0")
        mains = next(c for c in res.json()["categories"] if c["key"] == "lunch_mains")
        self.assertEqual([i["name"] for i in mains["items"]], ["Samba Rice"])

    def test_duplicate_name_conflicts(self):
        res = self.client.post("/api/library/lunch_mains/items", json={"name": "Red Rice"})
        self.assertEqual(res.status_code, 409)

    def test_unknown_index_and_category(self):
        self.assertEqual(self.client.delete("/api/library/lunch_mains/items/7").status_code, 404)
        self.assertEqual(self.client.get("/api/library/snacks/items").status_code, 405)
        self.assertEqual(self.client.post("/api/library/snacks/items", json={"name": "X"}).status_code, 422)

    def test_ingredient_edits_are_manual(self):
        res = self.client.post("/api/library/lunch_mains/items/0/ingredients",
                               json={"name": "Salt", "amount": 5, "unit": "g"})
        self.assertEqual(res.status_code, 200)
        self.client.put("/api/library/lunch_mains/items/0/ingredients/0", json={"amount": 650})
        ingredients = self.ctx.library.load().get(MealCategory.LUNCH_MAINS, 0).ingredients
        self.assertEqual([(i.name, i.amount, i.provenance.value) for i in ingredients],
                         [("Red Raw Rice", 650, "Manual"), ("Salt", 5, "Manual")])
        res = self.client.delete("/api/library/lunch_mains/items/0/ingredients/1")
        self.assertEqual(res.status_code, 200)

    def test_negative_amount_is_rejected(self):
        res = self.client.post("/api/library/lunch_mains/items/0/ingredients",
                               json={"name": "Salt", "amount": -5})
        self.assertEqual(res.status_code, 422)

    def test_suggest_without_service_is_unavailable(self):
        res = self.client.post("/api/library/lunch_mains/items/0/suggest")
        self.assertEqual(res.json(), {"status": "unavailable"})


class TestSuggestApi(ApiTestCase):
    suggester = FakeSuggester()

    def test_suggest_one_returns_item(self):
        res = self.client.post("/api/library/lunch_mains/items/0/suggest")
        data = res.json()
        self.assertEqual(data["status"], "applied")
        self.assertEqual([i["name"] for i in data["item"]["ingredients"]], ["Red Rice base"])

    def test_suggest_one_unknown_index(self):
        self.assertEqual(self.client.post("/api/library/lunch_mains/items/3/suggest").status_code, 404)

    def test_suggest_all(self):
        data = self.client.post("/api/library/suggest-all").json()
        self.assertEqual(data["status"], "applied")
        self.assertEqual(data["updated"], 3)
        self.assertEqual(data["missing"], [])


class TestPlanAndShoppingApi(ApiTestCase):

    def plan(self, day, field, value):
        return self.client.put(f"/api/plan/{day}", json={"field": field, "value": value})

    def test_plan_update_and_range(self):
        res = self.plan("2026-10-20", "lunch_meat", "Chicken Curry")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["lunch"], {"main": "Red Rice", "veg1": "", "veg2": "", "meat": "Chicken Curry"})
        data = self.client.get("/api/plan", params={"start": "2026-10-19", "end": "2026-10-20"}).json()
        self.assertEqual([e["date_key"] for e in data["entries"]], ["2026-10-19", "2026-10-20"])
        # 2026-10-19 has no stored entry and is filled from the library defaults
        self.assertEqual(data["entries"][0]["lunch"]["meat"], "Chicken Curry")
        self.assertEqual(data["entries"][0]["breakfast"], "Pittu")

    def test_plan_rejects_bad_input(self):
        self.assertEqual(self.plan("20-10-2026", "dinner", "Kottu").status_code, 422)
        self.assertEqual(self.plan("2026-10-20", "snack", "Kottu").status_code, 422)
        res = self.client.get("/api/plan", params={"start": "2026-10-20", "end": "2026-10-19"})
        self.assertEqual(res.status_code, 400)

    def test_generate_and_track_costs(self):
        self.plan("2026-10-19", "lunch_meat", "Chicken Curry")
        self.plan("2026-10-20", "lunch_meat", "Chicken Curry")
        res = self.client.post("/api/shopping-list/generate",
                               json={"start": "2026-10-19", "end": "2026-10-20"})
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertEqual(data["status"], "ok")
        self.assertEqual(data["period_label"], "2026-10-19 to 2026-10-20")
        quantities = {i["name"]: i["quantity"] for i in data["items"]}
        self.assertEqual(quantities, {"Rice Flour": 1000, "Red Raw Rice": 1200, "Chicken": 2000})

        chicken = next(i for i in data["items"] if i["name"] == "Chicken")
        res = self.client.put(f"/api/shopping-list/items/{chicken['id']}/cost", json={"actual_cost": 2400})
        self.assertEqual(res.json()["total_cost"], 2400)
        self.assertEqual(self.client.get("/api/shopping-list/costs").json()["total_cost"], 2400)
        self.assertEqual(self.client.put("/api/shopping-list/items/nope/cost",
                                         json={"actual_cost": 1}).status_code, 404)

    def test_unresolved_meals_are_reported(self):
        self.plan("2026-10-19", "dinner", "Kottu")
        since = web_observers.get_events()["next_cursor"]
        data = self.client.post("/api/shopping-list/generate",
                                json={"start": "2026-10-19", "end": "2026-10-19"}).json()
        self.assertEqual(data["unresolved"], [{"category": "dinner_combos", "meal": "Kottu"}])
        events = self.client.get("/api/notifications", params={"since": since}).json()["events"]
        self.assertEqual(events[-1]["type"], "shopping.unresolved_meals")
        self.assertEqual(events[-1]["meals"], ["Kottu"])

    def test_estimate_without_service_keeps_list(self):
        self.client.post("/api/shopping-list/generate", json={"start": "2026-10-19", "end": "2026-10-19"})
        before = self.client.get("/api/shopping-list").json()
        data = self.client.post("/api/shopping-list/generate",
                                json={"start": "2026-10-19", "end": "2026-10-19", "mode": "estimate"}).json()
        self.assertEqual(data["status"], "unavailable")
        self.assertEqual(self.client.get("/api/shopping-list").json(), before)

    def test_save_load_delete_archive(self):
        self.client.post("/api/shopping-list/generate", json={"start": "2026-10-19", "end": "2026-10-19"})
        saved = self.client.post("/api/shopping-lists/saved",
                                 json={"name": "Monday", "period_label": "2026-10-19"}).json()
        self.assertEqual(len(saved["items"]), 3)

        self.client.post("/api/shopping-list/generate", json={"start": "2026-10-19", "end": "2026-10-21"})
        res = self.client.post(f"/api/shopping-lists/saved/{saved['id']}/load")
        self.assertEqual(res.json()["count"], 3)
        active = {i["name"]: i["quantity"] for i in self.client.get("/api/shopping-list").json()["items"]}
        self.assertEqual(active["Chicken"], 1000)

        listing = self.client.get("/api/shopping-lists/saved").json()
        self.assertEqual(listing["count"], 1)
        self.assertEqual(self.client.delete(f"/api/shopping-lists/saved/{saved['id']}").status_code, 200)
        self.assertEqual(self.client.delete(f"/api/shopping-lists/saved/{saved['id']}").status_code, 404)
        self.assertEqual(self.client.post("/api/shopping-lists/saved/nope/load").status_code, 404)


class TestEstimateApi(ApiTestCase):
    suggester = FakeSuggester(fail=True)

    def test_failed_estimate_keeps_list_and_notifies(self):
        self.client.post("/api/shopping-list/generate", json={"start": "2026-10-19", "end": "2026-10-19"})
        before = self.client.get("/api/shopping-list").json()
        since = web_observers.get_events()["next_cursor"]
        data = self.client.post("/api/shopping-list/generate",
                                json={"start": "2026-10-19", "end": "2026-10-19", "mode": "estimate"}).json()
        self.assertEqual(data["status"], "failed")
        self.assertEqual(self.client.get("/api/shopping-list").json(), before)
        events = self.client.get("/api/notifications", params={"since": since}).json()["events"]
        self.assertEqual([e["type"] for e in events], ["shopping.estimate_failed"])


class UnusableEstimateClient:
    """OpenAI client stand-in whose plan estimate has no valid row."""

    def __init__(self):
        self.responses = self

    def create(self, model, input):
        return SimpleNamespace(output_text='[{"item": "rice", "qty": "lots"}]')


class TestUnusableEstimateApi(ApiTestCase):
    suggester = OpenAISuggester(UnusableEstimateClient(), model="test-model")

    def test_unusable_estimate_keeps_active_list(self):
        self.client.post("/api/shopping-list/generate", json={"start": "2026-10-19", "end": "2026-10-19"})
        before = self.client.get("/api/shopping-list").json()
        self.assertEqual(before["count"], 3)
        data = self.client.post("/api/shopping-list/generate",
                                json={"start": "2026-10-19", "end": "2026-10-19", "mode": "estimate"}).json()
        self.assertEqual(data["status"], "failed")
        self.assertEqual(self.client.get("/api/shopping-list").json(), before)


class TestHealth(unittest.TestCase):

    def test_health(self):
        res = TestClient(app).get("/api/health")
        self.assertEqual(res.json()["status"], "ok")
