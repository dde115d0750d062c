"""
Ingredient Pydantic schemas for API request/response models.
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from costbook.core.options import Allergen, Unit


def _normalize_allergens(values: List[Allergen]) -> List[Allergen]:
    """Drop duplicates; "none" may only appear on its own."""
    unique = list(dict.fromkeys(values))
    if Allergen.NONE in unique and len(unique) > 1:
        raise ValueError("'none' cannot be combined with other allergens")
    return unique


class IngredientCreate(BaseModel):
    """Request model for creating an ingredient."""
    name: str = Field(min_length=1, max_length=255)
    unit_cost: Decimal = Field(ge=0, max_digits=10, decimal_places=4)
    unit: Unit
    allergens: List[Allergen] = Field(default_factory=list)
    supplier: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()

    @field_validator("allergens")
    @classmethod
    def allergens_consistent(cls, v):
        if v is None:
            return v
        return _normalize_allergens(v)


class IngredientUpdate(BaseModel):
    """
    Partial update for an ingredient.

    Only fields present in the request are applied.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    unit_cost: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=4)
    unit: Optional[Unit] = None
    allergens: Optional[List[Allergen]] = None
    supplier: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    @field_validator("name", "unit_cost", "unit", "allergens")
    @classmethod
    def required_not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()

    @field_validator("allergens")
    @classmethod
    def allergens_consistent(cls, v):
        if v is None:
            return v
        return _normalize_allergens(v)


class IngredientResponse(BaseModel):
    """Response model for a single ingredient."""
    id: int
    name: str
    unit_cost: Decimal
    unit: Unit
    allergens: List[Allergen] = []
    supplier: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
