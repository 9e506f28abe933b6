from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from mealcart.api.deps import AppContext, get_context
from mealcart.utilities.validators import DATE_KEY_PATTERN, PlanUpdateInput

router = APIRouter(prefix="/api/plan", tags=["plan"])


@router.get("")
def get_plan(start: Optional[date] = Query(default=None), end: Optional[date] = Query(default=None),
             ctx: AppContext = Depends(get_context)):
    """Plan entries for [start, end]; defaults to the current ISO week."""
    if start is None:
        today = date.today()
        start = today - timedelta(days=today.isoweekday() - 1)
    if end is None:
        end = start + timedelta(days=6)
    try:
        entries = ctx.plan_store.entries_between(start, end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"start": start.isoformat(), "end": end.isoformat(), "entries": [e.to_dict() for e in entries]}


@router.put("/{date_key}")
def update_plan_field(payload: PlanUpdateInput, date_key: str = Path(..., pattern=DATE_KEY_PATTERN),
                      ctx: AppContext = Depends(get_context)):
    try:
        entry = ctx.plan_store.upsert(date_key, payload.field, payload.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return entry.to_dict()
