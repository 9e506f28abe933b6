from fastapi import APIRouter, Depends, HTTPException

from mealcart.api.deps import AppContext, get_context
from mealcart.utilities.validators import ShoppingListGenerateInput, CostInput, SaveListInput

router = APIRouter(tags=["shopping"])


def _items_payload(items):
    return [item.to_dict() for item in items]


# -------------------- API: Active shopping list --------------------
@router.get('/api/shopping-list')
def get_shopping_list(ctx: AppContext = Depends(get_context)):
    items = ctx.shopping.active_items()
    return {"items": _items_payload(items), "count": len(items)}


@router.post('/api/shopping-list/generate')
def generate_shopping_list(payload: ShoppingListGenerateInput, ctx: AppContext = Depends(get_context)):
    try:
        result = ctx.shopping.generate(payload.start, payload.end, payload.mode)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    items = result["items"]
    return {**result, "items": _items_payload(items), "count": len(items)}


# -------------------- API: Costs --------------------
@router.put('/api/shopping-list/items/{item_id}/cost')
def set_item_cost(item_id: str, payload: CostInput, ctx: AppContext = Depends(get_context)):
    try:
        item = ctx.shopping.set_actual_cost(item_id, payload.actual_cost)
    except KeyError:
        raise HTTPException(status_code=404, detail='Shopping item not found')
    return {"item": item.to_dict(), "total_cost": ctx.shopping.total_cost()}


@router.get('/api/shopping-list/costs')
def get_costs(ctx: AppContext = Depends(get_context)):
    items = ctx.shopping.active_items()
    return {"items": _items_payload(items), "total_cost": ctx.shopping.total_cost()}


# -------------------- API: Saved lists --------------------
@router.get('/api/shopping-lists/saved')
def list_saved(ctx: AppContext = Depends(get_context)):
    saved = ctx.shopping.list_saved()
    return {"lists": [s.to_dict() for s in saved], "count": len(saved)}


@router.post('/api/shopping-lists/saved')
def save_active(payload: SaveListInput, ctx: AppContext = Depends(get_context)):
    return ctx.shopping.save_active(payload.name, payload.period_label).to_dict()


@router.post('/api/shopping-lists/saved/{list_id}/load')
def load_saved(list_id: str, ctx: AppContext = Depends(get_context)):
    try:
        items = ctx.shopping.load_saved(list_id)
    except KeyError:
        raise HTTPException(status_code=404, detail='Saved list not found')
    return {"items": _items_payload(items), "count": len(items)}


@router.delete('/api/shopping-lists/saved/{list_id}')
def delete_saved(list_id: str, ctx: AppContext = Depends(get_context)):
    try:
        ctx.shopping.delete_saved(list_id)
    except KeyError:
        raise HTTPException(status_code=404, detail='Saved list not found')
    return {"success": True}
