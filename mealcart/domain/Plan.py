"""Plan domain entities: a PlanEntry assigns meals to the slots of one calendar date."""
from typing import Dict, List, Optional, Tuple

from mealcart.domain.MealLibrary import MealCategory, MealLibrary

# Plan field identifier -> library category the value is resolved against
PLAN_FIELDS: Dict[str, MealCategory] = {
    "breakfast": MealCategory.BREAKFAST_COMBOS,
    "lunch_main": MealCategory.LUNCH_MAINS,
    "lunch_veg1": MealCategory.LUNCH_VEG1,
    "lunch_veg2": MealCategory.LUNCH_VEG2,
    "lunch_meat": MealCategory.LUNCH_MEAT,
    "dinner": MealCategory.DINNER_COMBOS,
}


class LunchPlan:
    def __init__(self, main: str = "", veg1: str = "", veg2: str = "", meat: str = ""):
        self.main = main
        self.veg1 = veg1
        self.veg2 = veg2
        self.meat = meat

    def copy(self, **changes) -> "LunchPlan":
        values = self.to_dict()
        values.update(changes)
        return LunchPlan(**values)

    @staticmethod
    def from_dict(data):
        d = data if isinstance(data, dict) else {}
        return LunchPlan(**{k: str(d.get(k) or "") for k in ("main", "veg1", "veg2", "meat")})

    def to_dict(self):
        return {"main": self.main, "veg1": self.veg1, "veg2": self.veg2, "meat": self.meat}


class PlanEntry:
    def __init__(self, date_key: str, breakfast: str = "", lunch: Optional[LunchPlan] = None,
                 dinner: str = ""):
        self.date_key = date_key
        self.breakfast = breakfast
        self.lunch = lunch.copy() if lunch else LunchPlan()
        self.dinner = dinner

    def get_field(self, field: str) -> str:
        if field not in PLAN_FIELDS:
            raise ValueError(f"Unknown plan field: {field}")
        if field.startswith("lunch_"):
            return getattr(self.lunch, field[len("lunch_"):])
        return getattr(self, field)

    def with_field(self, field: str, value: str) -> "PlanEntry":
        '''Returns a copy with one field replaced; all other fields are kept.'''
        if field not in PLAN_FIELDS:
            raise ValueError(f"Unknown plan field: {field}")
        entry = self.copy()
        if field.startswith("lunch_"):
            entry.lunch = entry.lunch.copy(**{field[len("lunch_"):]: value})
        else:
            setattr(entry, field, value)
        return entry

    def components(self) -> List[Tuple[MealCategory, str]]:
        '''The six (category, meal name) references of this entry.'''
        return [(category, self.get_field(field)) for field, category in PLAN_FIELDS.items()]

    def copy(self) -> "PlanEntry":
        return PlanEntry(self.date_key, self.breakfast, self.lunch.copy(), self.dinner)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PlanEntry):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        lunch = ", ".join(v for v in self.lunch.to_dict().values() if v)
        return f"{self.date_key}: B: {self.breakfast} | L: {lunch} | D: {self.dinner}"

    __repr__ = __str__

    @staticmethod
    def default_for(date_key: str, library: MealLibrary) -> "PlanEntry":
        '''Entry built from the first meal of each relevant category.'''
        return PlanEntry(
            date_key,
            breakfast=library.default_name(MealCategory.BREAKFAST_COMBOS),
            lunch=LunchPlan(
                main=library.default_name(MealCategory.LUNCH_MAINS),
                veg1=library.default_name(MealCategory.LUNCH_VEG1),
                veg2=library.default_name(MealCategory.LUNCH_VEG2),
                meat=library.default_name(MealCategory.LUNCH_MEAT),
            ),
            dinner=library.default_name(MealCategory.DINNER_COMBOS),
        )

    @staticmethod
    def from_dict(data, date_key: Optional[str] = None):
        d = data if isinstance(data, dict) else {}
        breakfast = d.get("breakfast") or ""
        # Weekly plans of older versions stored breakfast as a list of dishes
        if isinstance(breakfast, list):
            breakfast = ", ".join(str(b) for b in breakfast)
        return PlanEntry(
            date_key=date_key or str(d.get("date_key") or d.get("dateKey") or ""),
            breakfast=str(breakfast),
            lunch=LunchPlan.from_dict(d.get("lunch")),
            dinner=str(d.get("dinner") or ""),
        )

    def to_dict(self):
        return {
            "date_key": self.date_key,
            "breakfast": self.breakfast,
            "lunch": self.lunch.to_dict(),
            "dinner": self.dinner,
        }
