from fastapi import APIRouter, Depends, HTTPException

from mealcart.api.deps import AppContext, get_context
from mealcart.domain.MealLibrary import MealCategory
from mealcart.logic.library import editing
from mealcart.utilities.errors import DuplicateMealName
from mealcart.utilities.validators import MealItemInput, IngredientInput, IngredientUpdateInput

router = APIRouter(prefix="/api/library", tags=["library"])


def _library_payload(library):
    return {
        "categories": [
            {"key": cat.value, "label": cat.label, "items": [item.to_dict() for item in library.items(cat)]}
            for cat in MealCategory
        ],
        "duplicates": editing.duplicate_names(library),
    }


def _edit(ctx: AppContext, fn, *args, **kwargs):
    """Run one library edit under the repository lock, mapping errors to HTTP."""
    try:
        library = ctx.library.update(lambda current: fn(current, *args, **kwargs))
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateMealName as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _library_payload(library)


# -------------------- Library --------------------
@router.get("")
def get_library(ctx: AppContext = Depends(get_context)):
    return _library_payload(ctx.library.load())


@router.post("/{category}/items")
def add_item(category: MealCategory, payload: MealItemInput, ctx: AppContext = Depends(get_context)):
    return _edit(ctx, editing.add_item, category, payload.name)


@router.put("/{category}/items/{index}")
def rename_item(category: MealCategory, index: int, payload: MealItemInput,
                ctx: AppContext = Depends(get_context)):
    return _edit(ctx, editing.rename_item, category, index, payload.name)


@router.delete("/{category}/items/{index}")
def delete_item(category: MealCategory, index: int, ctx: AppContext = Depends(get_context)):
    return _edit(ctx, editing.delete_item, category, index)


# -------------------- Ingredients (user edits are Manual) --------------------
@router.post("/{category}/items/{index}/ingredients")
def add_ingredient(category: MealCategory, index: int, payload: IngredientInput,
                   ctx: AppContext = Depends(get_context)):
    return _edit(ctx, editing.add_ingredient, category, index, payload.name, payload.amount, payload.unit)


@router.put("/{category}/items/{index}/ingredients/{ing_index}")
def update_ingredient(category: MealCategory, index: int, ing_index: int, payload: IngredientUpdateInput,
                      ctx: AppContext = Depends(get_context)):
    return _edit(ctx, editing.update_ingredient, category, index, ing_index,
                 name=payload.name, amount=payload.amount, unit=payload.unit)


@router.delete("/{category}/items/{index}/ingredients/{ing_index}")
def delete_ingredient(category: MealCategory, index: int, ing_index: int,
                      ctx: AppContext = Depends(get_context)):
    return _edit(ctx, editing.delete_ingredient, category, index, ing_index)


# -------------------- Suggestions --------------------
@router.post("/suggest-all")
async def suggest_all(ctx: AppContext = Depends(get_context)):
    return await ctx.sync.fetch_all()


@router.post("/{category}/items/{index}/suggest")
async def suggest_one(category: MealCategory, index: int, ctx: AppContext = Depends(get_context)):
    try:
        outcome = await ctx.sync.fetch_one(category, index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if outcome["status"] == "applied":
        outcome["item"] = ctx.library.load().get(category, index).to_dict()
    return outcome
