from typing import Optional
from fastapi import APIRouter, Query

from mealcart.events.web_observers import get_events

router = APIRouter(tags=["notifications"])


@router.get('/api/notifications')
def api_notifications(
    since: Optional[int] = Query(default=None, description="Return events with id greater than this value")
):
    """
    Return recent user-facing notifications (failed or partial syncs, estimates).

    Client polling strategy:
        1. First call without 'since' to load current backlog.
        2. Store 'next_cursor' from response.
        3. Subsequent polls: /api/notifications?since=<next_cursor>
    """
    return get_events(since)
