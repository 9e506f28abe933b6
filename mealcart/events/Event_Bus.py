"""Simple Event Bus / Observer implementation for user-visible notifications.

Event names used so far:
  library.sync_failed -> payload {"operation": str, "message": str}
  library.sync_partial -> payload {"operation": str, "message": str, "updated": int, "missing": list}
  shopping.estimate_failed -> payload {"operation": str, "message": str}
  shopping.unresolved_meals -> payload {"operation": str, "message": str, "meals": list}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
LIBRARY_SYNC_FAILED = "library.sync_failed"
LIBRARY_SYNC_PARTIAL = "library.sync_partial"
SHOPPING_ESTIMATE_FAILED = "shopping.estimate_failed"
SHOPPING_UNRESOLVED_MEALS = "shopping.unresolved_meals"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:  # a broken subscriber must not break the publisher
				logger.exception("[EventBus] Error delivering %s to %s", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def publish(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus (sugar function)."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'publish',
	'LIBRARY_SYNC_FAILED', 'LIBRARY_SYNC_PARTIAL', 'SHOPPING_ESTIMATE_FAILED', 'SHOPPING_UNRESOLVED_MEALS'
]
