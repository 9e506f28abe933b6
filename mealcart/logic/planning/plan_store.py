"""Plan store accessor: per-date field updates and date-range selection."""
import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Tuple

from mealcart.domain.MealLibrary import MealLibrary
from mealcart.domain.Plan import PLAN_FIELDS, PlanEntry
from mealcart.infra.Library_Repository import LibraryRepository
from mealcart.infra.Plan_Repository import PlanRepository
from mealcart.utilities.constants import DATE_KEY_FORMAT

logger = logging.getLogger(__name__)


def parse_date_key(date_key: str) -> date:
    try:
        return datetime.strptime(date_key, DATE_KEY_FORMAT).date()
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date key '{date_key}', expected YYYY-MM-DD") from None


def date_keys_between(start: date, end: date) -> List[str]:
    if end < start:
        raise ValueError(f"End date {end} is before start date {start}")
    return [(start + timedelta(days=i)).strftime(DATE_KEY_FORMAT) for i in range((end - start).days + 1)]


def period_label(start: date, end: date) -> str:
    if start == end:
        return start.strftime(DATE_KEY_FORMAT)
    return f"{start.strftime(DATE_KEY_FORMAT)} to {end.strftime(DATE_KEY_FORMAT)}"


def upsert_plan_field(plan: Dict[str, PlanEntry], library: MealLibrary, date_key: str,
                      field: str, value: str) -> Tuple[Dict[str, PlanEntry], PlanEntry]:
    """Set one field of the entry for date_key.

    A missing entry is first synthesized from the library defaults (first meal
    of each category). Other fields and other dates are left as they were.
    Returns the new plan mapping and the updated entry.
    """
    if field not in PLAN_FIELDS:
        raise ValueError(f"Unknown plan field: {field}")
    parse_date_key(date_key)
    current = plan.get(date_key) or PlanEntry.default_for(date_key, library)
    entry = current.with_field(field, value)
    new_plan = dict(plan)
    new_plan[date_key] = entry
    return new_plan, entry


class PlanStore:
    def __init__(self, plan_repository: PlanRepository, library_repository: LibraryRepository):
        self.plan_repository = plan_repository
        self.library_repository = library_repository

    def upsert(self, date_key: str, field: str, value: str) -> PlanEntry:
        library = self.library_repository.load()
        updated = {}

        def _apply(plan):
            new_plan, updated["entry"] = upsert_plan_field(plan, library, date_key, field, value)
            return new_plan

        self.plan_repository.update(_apply)
        logger.info("Plan %s: %s -> %s", date_key, field, value)
        return updated["entry"]

    def entries_between(self, start: date, end: date, fill_defaults: bool = True) -> List[PlanEntry]:
        """Entries for every date in [start, end], in date order.

        Dates without a stored entry get the library defaults when
        fill_defaults is set, otherwise they are left out.
        """
        keys = date_keys_between(start, end)
        plan = self.plan_repository.load()
        library = self.library_repository.load() if fill_defaults else None
        entries = []
        for key in keys:
            if key in plan:
                entries.append(plan[key])
            elif fill_defaults:
                entries.append(PlanEntry.default_for(key, library))
        return entries
