from typing import Final

# All library quantities are written for this many people (3 adults, 2 kids).
REFERENCE_HOUSEHOLD_SIZE: Final[int] = 5
HOUSEHOLD_DESCRIPTION: Final[str] = "3 adults and 2 children (children eat roughly half an adult portion)"

DATE_KEY_FORMAT: Final[str] = "%Y-%m-%d"

# Keys of the JSON key-value store
PLAN_KEY: Final[str] = "plan"
LIBRARY_KEY: Final[str] = "meal_library"
SHOPPING_ITEMS_KEY: Final[str] = "shopping_items"
SAVED_LISTS_KEY: Final[str] = "saved_shopping_lists"

DEFAULT_UNIT: Final[str] = "g"

DEFAULT_LIBRARY: Final[dict[str, list[str]]] = {
    "breakfast_combos": [
        "Bathala, Pol Sambol & Katta Sambol",
        "Rice, Parippu, Pol Sambol & Egg",
        "Red Rice, Parippu & Halmasso",
        "Rice, Gotukola & Soya",
        "Manioc & Pol Sambol",
        "Cowpea, Pol Sambol & Katta Sambol",
    ],
    "lunch_mains": ["Yellow Rice", "Red Rice", "White Rice"],
    "lunch_veg1": [
        "Beans", "Bandakka", "Karawila Salad", "Gowa Carrot Salad",
        "Spring Onion Salad", "Gotukola Sambol", "Spinach Kirata",
    ],
    "lunch_veg2": ["Polos", "Kos", "Del", "Potato", "Beetroot", "Watakolu", "Hathu"],
    "lunch_meat": ["Chicken Curry", "Fish Curry", "Ambul Thiyal", "Sprats", "Mackerel"],
    "dinner_combos": ["Bread & Curry", "Noodles", "Pasta", "Kottu", "Rotti & Curry"],
}

INGREDIENT_JSON_FORMAT: Final[str] = (
    """
[
  {"name": str, "amount": number, "unit": str (g, ml, kg, l or units)},
  ...
]
    """
)

SUGGEST_ONE_PROMPT: Final[str] = (
    """
    List the raw ingredients needed to cook "{meal_name}" once for a household of {household}.
    Quantities must be realistic totals for the whole household.
    Answer ONLY with JSON in the following format:
    """
)

SUGGEST_BATCH_PROMPT: Final[str] = (
    """
    For each of the following meals, list the raw ingredients needed to cook it once
    for a household of {household}. Quantities must be realistic totals for the whole household.

    Meals:
    {meal_names}

    Answer ONLY with a JSON object whose keys are the meal names exactly as given above
    and whose values are ingredient lists in the following format:
    """
)

ESTIMATE_PLAN_PROMPT: Final[str] = (
    """
    Based on the following meal plan for a household of {household}, calculate the total
    ingredients and quantities (in grams, ml or units) needed for the entire period.
    Provide realistic bulk quantities for dry goods (rice, lentils) and precise amounts for perishables.

    Meal plan:
    {plan_lines}

    Known ingredient lists per meal (may be incomplete):
    {library_lines}

    Answer ONLY with a JSON array of objects: {{"name": str, "quantity": number, "unit": str}}
    """
)
