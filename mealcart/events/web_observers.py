"""Notification feed polled by the web layer.

Subscribes to the GLOBAL_EVENT_BUS for every user-facing notification and
keeps the most recent ones in memory. Clients poll
/api/notifications?since=<cursor> and only receive what is newer.

Each recorded event gets an increasing integer id, which doubles as the
cursor. The feed is per process; notifications are advisory, nothing is
persisted.
"""
from __future__ import annotations
import logging
from collections import deque
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Deque, Dict, Optional

from .Event_Bus import (
    GLOBAL_EVENT_BUS,
    LIBRARY_SYNC_FAILED, LIBRARY_SYNC_PARTIAL, SHOPPING_ESTIMATE_FAILED, SHOPPING_UNRESOLVED_MEALS
)

logger = logging.getLogger(__name__)

MAX_EVENTS = 300
OBSERVED_EVENTS = (LIBRARY_SYNC_FAILED, LIBRARY_SYNC_PARTIAL, SHOPPING_ESTIMATE_FAILED, SHOPPING_UNRESOLVED_MEALS)
# Payload keys copied into the stored event
_FIELDS = ('operation', 'message', 'updated', 'missing', 'meals')


class NotificationFeed:
    def __init__(self, max_events: int = MAX_EVENTS):
        self._lock = Lock()
        self._events: Deque[Dict[str, Any]] = deque(maxlen=max_events)
        self._last_id = 0

    def record(self, event_name: str, payload: Any) -> None:
        """EventBus subscriber: store one notification."""
        fields = {k: payload[k] for k in _FIELDS if k in payload} if isinstance(payload, dict) else {}
        with self._lock:
            self._last_id += 1
            self._events.append({
                'id': self._last_id,
                'type': event_name,
                'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
                **fields,
            })

    def since(self, cursor: Optional[int] = None) -> Dict[str, Any]:
        with self._lock:
            events = [e for e in self._events if cursor is None or e['id'] > cursor]
            next_cursor = self._last_id if self._events else (cursor or 0)
        return {'events': events, 'next_cursor': next_cursor}


FEED = NotificationFeed()
_started = False


def start():
    """Subscribe the feed to the bus. Safe to call more than once."""
    global _started
    if _started:
        return
    for name in OBSERVED_EVENTS:
        GLOBAL_EVENT_BUS.subscribe(name, FEED.record)
    _started = True
    logger.debug("Notification feed subscribed to %d events", len(OBSERVED_EVENTS))


def get_events(since: int | None = None) -> Dict[str, Any]:
    """Events newer than since (all buffered ones when since is None), plus next_cursor."""
    return FEED.since(since)


__all__ = ['NotificationFeed', 'FEED', 'start', 'get_events', 'OBSERVED_EVENTS']
