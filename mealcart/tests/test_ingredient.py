import unittest
from mealcart.domain.Ingredient import MealIngredient, Provenance


class TestMealIngredient(unittest.TestCase):

    def test_from_dict_defaults_to_ai(self):
        ing = MealIngredient.from_dict({"name": "Coconut", "amount": 2, "unit": "units"})
        self.assertEqual(ing.provenance, Provenance.AI)
        self.assertFalse(ing.is_manual)

    def test_from_dict_reads_manual_and_legacy_quantity(self):
        ing = MealIngredient.from_dict({"name": "Dhal", "quantity": "250", "unit": "g", "provenance": "Manual"})
        self.assertTrue(ing.is_manual)
        self.assertEqual(ing.amount, 250)

    def test_negative_or_garbage_amount_becomes_zero(self):
        self.assertEqual(MealIngredient.from_dict({"name": "Salt", "amount": -5}).amount, 0)
        self.assertEqual(MealIngredient.from_dict({"name": "Salt", "amount": "a pinch"}).amount, 0)

    def test_copy_replaces_only_given_fields(self):
        ing = MealIngredient("Rice", 600, "g", Provenance.MANUAL)
        changed = ing.copy(amount=700)
        self.assertEqual(changed.amount, 700)
        self.assertEqual(changed.name, "Rice")
        self.assertTrue(changed.is_manual)
        self.assertEqual(ing.amount, 600)

    def test_match_key_trims_and_lowercases(self):
        self.assertEqual(MealIngredient("  Red Onion ").match_key(), "red onion")

    def test_to_dict(self):
        ing = MealIngredient("Chicken", 1000, "g")
        self.assertEqual(ing.to_dict(), {"name": "Chicken", "amount": 1000, "unit": "g", "provenance": "AI"})
