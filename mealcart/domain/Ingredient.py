"""MealIngredient domain entity: name, reference amount, unit and provenance."""
from enum import Enum
from typing import Optional


class Provenance(str, Enum):
    AI = "AI"
    MANUAL = "Manual"

    @classmethod
    def parse(cls, value) -> "Provenance":
        '''Lenient parse; anything that is not clearly manual counts as AI.'''
        if isinstance(value, Provenance):
            return value
        if isinstance(value, str) and value.strip().lower() == "manual":
            return cls.MANUAL
        return cls.AI


def _to_amount(value) -> float:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value if value >= 0 else 0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0
    return parsed if parsed >= 0 else 0


class MealIngredient:
    def __init__(self, name: str = "", amount: float = 0, unit: str = "",
                 provenance: Provenance = Provenance.AI):
        self.name = name
        self.amount = amount
        self.unit = unit
        self.provenance = Provenance.parse(provenance)

    @property
    def is_manual(self) -> bool:
        return self.provenance is Provenance.MANUAL

    def match_key(self) -> str:
        '''Key used for name matching: trimmed, case-insensitive.'''
        return (self.name or "").strip().lower()

    def copy(self, name: Optional[str] = None, amount: Optional[float] = None,
             unit: Optional[str] = None, provenance: Optional[Provenance] = None) -> "MealIngredient":
        '''Returns a new ingredient with the given fields replaced.'''
        return MealIngredient(
            name=self.name if name is None else name,
            amount=self.amount if amount is None else amount,
            unit=self.unit if unit is None else unit,
            provenance=self.provenance if provenance is None else provenance,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, MealIngredient):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        return f"{self.name} - {self.amount} {self.unit} ({self.provenance.value})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data, default_provenance: Provenance = Provenance.AI):
        '''Creates a MealIngredient from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        # Older records used "quantity" instead of "amount"
        amount = d.get("amount", d.get("quantity", 0))
        return MealIngredient(
            name=str(d.get("name") or ""),
            amount=_to_amount(amount),
            unit=str(d.get("unit") or ""),
            provenance=Provenance.parse(d.get("provenance", default_provenance)),
        )

    def to_dict(self):
        '''Converts the MealIngredient to a dictionary for JSON persistence.'''
        return {
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
            "provenance": self.provenance.value,
        }
