"""
Input validation schemas using Pydantic for better data integrity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import date

from mealcart.utilities.constants import DEFAULT_UNIT

PlanField = Literal["breakfast", "lunch_main", "lunch_veg1", "lunch_veg2", "lunch_meat", "dinner"]
DATE_KEY_PATTERN = r'^\d{4}-\d{2}-\d{2}$'


class MealItemInput(BaseModel):
    """Schema for adding or renaming a meal."""
    name: str = Field(..., min_length=1, max_length=200)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate meal name."""
        if not v.strip():
            raise ValueError('Meal name cannot be empty')
        return v.strip()


class IngredientInput(BaseModel):
    """Schema for a user-entered ingredient."""
    name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(0, ge=0, le=1000000)
    unit: str = Field(DEFAULT_UNIT, max_length=20)

    @field_validator('name', 'unit')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v:
            raise ValueError('Ingredient name cannot be empty')
        return v


class IngredientUpdateInput(BaseModel):
    """Schema for editing an ingredient; omitted fields stay unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[float] = Field(None, ge=0, le=1000000)
    unit: Optional[str] = Field(None, max_length=20)


class SuggestedIngredient(BaseModel):
    """One ingredient as returned by the suggestion service."""
    name: str = Field(..., min_length=1)
    amount: float = Field(0, ge=0)
    unit: str = ""

    @field_validator('name', 'unit')
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip() if isinstance(v, str) else v


class EstimatedItem(BaseModel):
    """One row of a whole-plan estimate."""
    name: str = Field(..., min_length=1)
    quantity: float = Field(..., ge=0)
    unit: str = ""


class PlanUpdateInput(BaseModel):
    """Schema for meal plan update validation."""
    field: PlanField
    value: str = Field(..., max_length=200)


class ShoppingListGenerateInput(BaseModel):
    """Schema for generating the active shopping list over a date range."""
    start: date
    end: date
    mode: Literal["library", "estimate"] = "library"


class CostInput(BaseModel):
    """Schema for recording the actual cost of a shopping item."""
    actual_cost: float = Field(..., ge=0)


class SaveListInput(BaseModel):
    """Schema for archiving the active shopping list."""
    name: str = Field(..., min_length=1, max_length=200)
    period_label: str = Field("", max_length=100)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('List name cannot be empty')
        return v.strip()
