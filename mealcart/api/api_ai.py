import re
import json
import logging
from json import JSONDecodeError
from typing import Any, Dict, List, Optional, Sequence

from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from mealcart.domain.Ingredient import MealIngredient, Provenance
from mealcart.domain.MealLibrary import MealLibrary
from mealcart.utilities.config import OPENAI_API_KEY, OPENAI_MODEL
from mealcart.utilities.constants import (
    HOUSEHOLD_DESCRIPTION, INGREDIENT_JSON_FORMAT,
    SUGGEST_ONE_PROMPT, SUGGEST_BATCH_PROMPT, ESTIMATE_PLAN_PROMPT
)
from mealcart.utilities.errors import SuggestionServiceFailure
from mealcart.utilities.validators import SuggestedIngredient, EstimatedItem

logger = logging.getLogger(__name__)


# === Helper: Get OpenAI Client ===
def _get_openai_client(api_key: str = OPENAI_API_KEY) -> Optional[OpenAI]:
    """Return an OpenAI client if an API key is configured, otherwise None."""
    if not api_key:
        return None
    return OpenAI(api_key=api_key)


def get_suggester() -> Optional["OpenAISuggester"]:
    """Return the configured suggester, or None when OPENAI_API_KEY is unset."""
    client = _get_openai_client()
    if client is None:
        logger.warning("OPENAI_API_KEY not set - ingredient suggestions disabled.")
        return None
    return OpenAISuggester(client)


class OpenAISuggester:
    """Ingredient suggestions and plan estimates from an OpenAI model.

    Every public method either returns parsed data or raises
    SuggestionServiceFailure; entries that fail validation are dropped.
    """

    def __init__(self, client: OpenAI, model: str = OPENAI_MODEL):
        self.client = client
        self.model = model

    # === Public API ===
    def suggest_one(self, meal_name: str) -> List[MealIngredient]:
        prompt = SUGGEST_ONE_PROMPT.format(meal_name=meal_name, household=HOUSEHOLD_DESCRIPTION)
        data = self._ask_json(prompt + INGREDIENT_JSON_FORMAT)
        if isinstance(data, dict):
            # Some answers wrap the list: {"ingredients": [...]} or {meal_name: [...]}
            data = data.get("ingredients", data.get(meal_name, []))
        if not isinstance(data, list):
            raise SuggestionServiceFailure(f"Suggestion for '{meal_name}' is not a JSON array")
        parsed = _parse_ingredients(data)
        if data and not parsed:
            raise SuggestionServiceFailure(f"No usable ingredient in the suggestion for '{meal_name}'")
        return parsed

    def suggest_batch(self, meal_names: Sequence[str]) -> Dict[str, List[MealIngredient]]:
        if not meal_names:
            return {}
        prompt = SUGGEST_BATCH_PROMPT.format(
            household=HOUSEHOLD_DESCRIPTION,
            meal_names="\n".join(f"- {name}" for name in meal_names),
        )
        data = self._ask_json(prompt + INGREDIENT_JSON_FORMAT)
        if not isinstance(data, dict):
            raise SuggestionServiceFailure("Batch suggestion is not a JSON object")
        wanted = set(meal_names)
        results: Dict[str, List[MealIngredient]] = {}
        for name, ingredients in data.items():
            # Unknown keys are ignored, missing keys mean "no suggestion"
            if name in wanted:
                parsed = _parse_ingredients(ingredients)
                if parsed:
                    results[name] = parsed
        return results

    def estimate_for_plan(self, plan_entries, library: MealLibrary) -> List[Dict[str, Any]]:
        plan_lines = "\n".join(
            f"Date: {e.date_key} | Breakfast: {e.breakfast} | "
            f"Lunch: {e.lunch.main}, {e.lunch.veg1}, {e.lunch.veg2}, {e.lunch.meat} | Dinner: {e.dinner}"
            for e in plan_entries
        )
        library_lines = "\n".join(
            f"{name}: " + ", ".join(f"{i.name} {i.amount} {i.unit}" for i in ingredients)
            for name, ingredients in _known_ingredients(library, plan_entries).items()
        ) or "(none)"
        prompt = ESTIMATE_PLAN_PROMPT.format(
            household=HOUSEHOLD_DESCRIPTION, plan_lines=plan_lines, library_lines=library_lines
        )
        data = self._ask_json(prompt)
        if not isinstance(data, list):
            raise SuggestionServiceFailure("Plan estimate is not a JSON array")
        rows = []
        for entry in data:
            try:
                rows.append(EstimatedItem.model_validate(entry).model_dump())
            except ValidationError:
                logger.debug("Dropping invalid estimate row: %r", entry)
        if data and not rows:
            raise SuggestionServiceFailure("No usable row in the plan estimate")
        return rows

    # === OpenAI Call ===
    def _ask_json(self, prompt: str) -> Any:
        try:
            response = self.client.responses.create(model=self.model, input=prompt)
        except OpenAIError as e:
            raise SuggestionServiceFailure(f"OpenAI request failed: {e}") from e
        text = (response.output_text or "").strip()
        if not text:
            raise SuggestionServiceFailure("AI returned an empty response")
        return _decode_json(text)


def _known_ingredients(library: MealLibrary, plan_entries) -> Dict[str, List[MealIngredient]]:
    known: Dict[str, List[MealIngredient]] = {}
    for entry in plan_entries:
        for category, meal_name in entry.components():
            item = library.find(category, meal_name)
            if item is not None and item.ingredients and meal_name not in known:
                known[meal_name] = item.ingredients
    return known


def _parse_ingredients(data: Any) -> List[MealIngredient]:
    if not isinstance(data, list):
        return []
    parsed = []
    for entry in data:
        try:
            valid = SuggestedIngredient.model_validate(entry)
        except ValidationError:
            logger.debug("Dropping invalid suggested ingredient: %r", entry)
            continue
        parsed.append(MealIngredient(name=valid.name, amount=valid.amount, unit=valid.unit,
                                     provenance=Provenance.AI))
    return parsed


# === JSON Parsing ===
def _decode_json(text: str) -> Any:
    try:
        return json.loads(text)
    except JSONDecodeError:
        pass
    cleaned = _remove_trailing_commas(_strip_code_fences(text))
    candidate = _extract_json_by_balancing(cleaned)
    if candidate:
        try:
            return json.loads(_remove_trailing_commas(candidate))
        except JSONDecodeError:
            logger.debug("Extracted JSON candidate could not be decoded")
    raise SuggestionServiceFailure("AI output is not valid JSON and no JSON substring found")


# === Text Cleaning Helpers ===
def _strip_code_fences(text: str) -> str:
    """Remove common markdown code fences and leading/trailing whitespace."""
    text = re.sub(r"```(?:json)?\n(.*?)```", r"\1", text, flags=re.S)
    text = re.sub(r"^```|```$", "", text)
    return text.strip()


def _remove_trailing_commas(text: str) -> str:
    """Remove common trailing commas in JSON-like text to help json.loads succeed."""
    return re.sub(r",\s*(\}|\])", r"\1", text)


def _extract_json_by_balancing(text: str) -> Optional[str]:
    """Extract the first JSON object/array by balancing braces/brackets."""
    start = None
    stack = []
    in_string = False
    escape = False

    for i, ch in enumerate(text):
        if ch == '"' and not escape:
            in_string = not in_string
        if in_string and ch == "\\" and not escape:
            escape = True
            continue
        else:
            escape = False

        if not in_string:
            if ch in "{[":
                if start is None:
                    start = i
                stack.append(ch)
            elif ch in "}]":
                if not stack:
                    continue
                opening = stack.pop()
                if (opening == "{" and ch != "}") or (opening == "[" and ch != "]"):
                    return None
                if not stack and start is not None:
                    return text[start:i + 1]
    return None
