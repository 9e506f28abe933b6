"""Error kinds raised inside the planning core.

All of them are recoverable: the component that meets one handles it locally
(skip, fall back, reset to default) and the process keeps running.
"""


class MealcartError(Exception):
    """Base class for application errors."""


class UnresolvedMealReference(MealcartError, LookupError):
    """A plan references a meal name absent from its library category."""

    def __init__(self, category: str, meal_name: str):
        super().__init__(f"Meal '{meal_name}' not found in category '{category}'")
        self.category = category
        self.meal_name = meal_name


class SuggestionServiceFailure(MealcartError, RuntimeError):
    """The external suggestion call failed or returned unusable data."""


class DuplicateMealName(MealcartError, ValueError):
    def __init__(self, category: str, meal_name: str):
        super().__init__(f"Meal '{meal_name}' already exists in category '{category}'")
        self.category = category
        self.meal_name = meal_name


class MalformedPersistedState(MealcartError, ValueError):
    """A persisted value could not be decoded."""

    def __init__(self, key: str, reason: str = ""):
        super().__init__(f"Malformed persisted state for '{key}': {reason}" if reason
                         else f"Malformed persisted state for '{key}'")
        self.key = key


__all__ = [
    'MealcartError', 'UnresolvedMealReference', 'SuggestionServiceFailure',
    'DuplicateMealName', 'MalformedPersistedState'
]
