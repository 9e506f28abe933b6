"""Plan persistence: JSON key 'plan', a mapping date_key -> plan entry."""
import logging
from typing import Dict

from mealcart.domain.Plan import PlanEntry
from mealcart.infra.Json_Store import JsonRepository
from mealcart.utilities.constants import PLAN_KEY
from mealcart.utilities.errors import MalformedPersistedState

logger = logging.getLogger(__name__)


class PlanRepository(JsonRepository):
    key = PLAN_KEY

    def default(self) -> Dict[str, PlanEntry]:
        return {}

    def decode(self, raw) -> Dict[str, PlanEntry]:
        if not isinstance(raw, dict):
            raise MalformedPersistedState(self.key, f"expected an object, got {type(raw).__name__}")
        entries = {}
        for date_key, entry in raw.items():
            if not isinstance(entry, dict):
                logger.warning("Skipping malformed plan entry for %s", date_key)
                continue
            entries[date_key] = PlanEntry.from_dict(entry, date_key=date_key)
        return entries

    def encode(self, value: Dict[str, PlanEntry]):
        store = {}
        for date_key in sorted(value):
            data = value[date_key].to_dict()
            data.pop("date_key", None)
            store[date_key] = data
        return store
