import unittest
from mealcart.domain.Ingredient import MealIngredient, Provenance
from mealcart.logic.ingredients.merge import merge_ingredients


def manual(name, amount=1, unit="g"):
    return MealIngredient(name, amount, unit, Provenance.MANUAL)


def ai(name, amount=1, unit="g"):
    return MealIngredient(name, amount, unit, Provenance.AI)


class TestMergeIngredients(unittest.TestCase):

    def test_manual_entries_survive_unchanged(self):
        salt = manual("Salt", 5, "g")
        merged = merge_ingredients([salt, ai("Rice", 500)], [ai("salt", 10), ai("Rice", 600)])
        self.assertIn(salt, merged)
        kept = [m for m in merged if m.is_manual]
        self.assertEqual(kept, [salt])

    def test_name_collision_keeps_single_manual_entry(self):
        merged = merge_ingredients([manual("Salt", 5)], [ai("salt", 10)])
        salts = [m for m in merged if m.name.lower() == "salt"]
        self.assertEqual(len(salts), 1)
        self.assertEqual(salts[0].name, "Salt")
        self.assertEqual(salts[0].amount, 5)
        self.assertTrue(salts[0].is_manual)

    def test_collision_ignores_surrounding_whitespace(self):
        merged = merge_ingredients([manual("Coconut")], [ai(" coconut ")])
        self.assertEqual(len(merged), 1)

    def test_inner_whitespace_is_not_normalized(self):
        merged = merge_ingredients([manual("Red Onion")], [ai("Red  Onion")])
        self.assertEqual(len(merged), 2)

    def test_old_ai_entries_are_replaced(self):
        merged = merge_ingredients([ai("Old Spice Mix", 10)], [ai("Curry Powder", 20)])
        self.assertEqual([m.name for m in merged], ["Curry Powder"])

    def test_order_manual_first_then_suggestions(self):
        existing = [ai("Rice"), manual("Chili"), manual("Lime")]
        suggested = [ai("Garlic"), ai("Onion"), ai("lime")]
        merged = merge_ingredients(existing, suggested)
        self.assertEqual([m.name for m in merged], ["Chili", "Lime", "Garlic", "Onion"])

    def test_suggestions_are_tagged_ai(self):
        merged = merge_ingredients([], [MealIngredient("Pepper", 3, "g", Provenance.MANUAL)])
        self.assertEqual(merged[0].provenance, Provenance.AI)

    def test_idempotent_for_same_suggestion(self):
        existing = [manual("Salt"), ai("Rice")]
        suggested = [ai("Rice", 600), ai("Salt", 10), ai("Coconut Milk", 400, "ml")]
        once = merge_ingredients(existing, suggested)
        twice = merge_ingredients(once, suggested)
        self.assertEqual(once, twice)

    def test_inputs_are_not_mutated(self):
        existing = [manual("Salt", 5)]
        suggested = [ai("Rice", 600)]
        merged = merge_ingredients(existing, suggested)
        merged[0].amount = 99
        self.assertEqual(existing[0].amount, 5)

    def test_empty_suggestion_keeps_only_manual(self):
        merged = merge_ingredients([manual("Salt"), ai("Rice")], [])
        self.assertEqual([m.name for m in merged], ["Salt"])
