"""Shopping list entities: ShoppingItem rows of the active list and archived snapshots."""
from datetime import datetime
from typing import List, Optional
from uuid import uuid4


def new_id() -> str:
    return uuid4().hex


class ShoppingItem:
    def __init__(self, name: str = "", quantity: float = 0, unit: str = "",
                 actual_cost: Optional[float] = None, id: Optional[str] = None):
        self.id = id or new_id()
        self.name = name
        self.quantity = quantity
        self.unit = unit
        self.actual_cost = actual_cost

    def copy(self, **changes) -> "ShoppingItem":
        values = {
            "id": self.id, "name": self.name, "quantity": self.quantity,
            "unit": self.unit, "actual_cost": self.actual_cost,
        }
        values.update(changes)
        return ShoppingItem(**values)

    def __str__(self) -> str:
        cost = f" - cost: {self.actual_cost}" if self.actual_cost is not None else ""
        return f"{self.name} - {self.quantity} {self.unit}{cost}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = data if isinstance(data, dict) else {}
        cost = d.get("actual_cost", d.get("actualCost"))
        try:
            cost = float(cost) if cost is not None else None
        except (TypeError, ValueError):
            cost = None
        quantity = d.get("quantity", 0)
        if not isinstance(quantity, (int, float)) or isinstance(quantity, bool):
            try:
                quantity = float(quantity)
            except (TypeError, ValueError):
                quantity = 0
        return ShoppingItem(
            id=str(d.get("id") or "") or None,
            name=str(d.get("name") or ""),
            quantity=quantity,
            unit=str(d.get("unit") or ""),
            actual_cost=cost,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "actual_cost": self.actual_cost,
        }


class SavedShoppingList:
    """Archived snapshot of a shopping list. Holds its own copies of the items."""

    def __init__(self, name: str, items: List[ShoppingItem], period_label: str = "",
                 created_at: Optional[datetime] = None, id: Optional[str] = None):
        self.id = id or new_id()
        self.name = name
        self.period_label = period_label
        self.created_at = created_at or datetime.now()
        self._items = tuple(item.copy() for item in items)

    @property
    def items(self) -> List[ShoppingItem]:
        return [item.copy() for item in self._items]

    def __str__(self) -> str:
        return f"{self.name} ({self.period_label}) - {len(self._items)} items"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = data if isinstance(data, dict) else {}
        items = d.get("items") or []
        if not isinstance(items, list):
            raise ValueError(f"Items of saved list '{d.get('name')}' must be a list")
        created = d.get("created_at")
        try:
            created_at = datetime.fromisoformat(created) if created else None
        except (TypeError, ValueError):
            created_at = None
        return SavedShoppingList(
            id=str(d.get("id") or "") or None,
            name=str(d.get("name") or ""),
            period_label=str(d.get("period_label") or ""),
            created_at=created_at,
            items=[ShoppingItem.from_dict(i) for i in items if isinstance(i, dict)],
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "period_label": self.period_label,
            "items": [item.to_dict() for item in self._items],
        }
