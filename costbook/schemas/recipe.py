"""
Recipe Pydantic schemas: recipes, ingredient lines, steps and costing.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from costbook.core.options import Category, Equipment, SortBy, Subcategory, Unit
from costbook.schemas.ingredient import IngredientResponse


# ============ Recipe Schemas ============

class RecipeCreate(BaseModel):
    """Request model for creating a recipe. Cost fields are derived, not accepted."""
    name: str = Field(min_length=1, max_length=255)
    category: Category
    subcategory: Optional[Subcategory] = None
    servings: int = Field(gt=0)
    prep_time: int = Field(gt=0, description="Preparation time in minutes")
    selling_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = None
    equipment: List[Equipment] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()

    @field_validator("equipment")
    @classmethod
    def unique_equipment(cls, v):
        if v is None:
            return v
        return list(dict.fromkeys(v))


class RecipeUpdate(BaseModel):
    """Partial update for a recipe. selling_price, subcategory and notes may be cleared with null."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[Category] = None
    subcategory: Optional[Subcategory] = None
    servings: Optional[int] = Field(default=None, gt=0)
    prep_time: Optional[int] = Field(default=None, gt=0)
    selling_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = None
    equipment: Optional[List[Equipment]] = None

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    @field_validator("name", "category", "servings", "prep_time", "equipment")
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

    @field_validator("equipment")
    @classmethod
    def unique_equipment(cls, v):
        if v is None:
            return v
        return list(dict.fromkeys(v))


class RecipeResponse(BaseModel):
    """Response model for a single recipe."""
    id: int
    name: str
    category: Category
    subcategory: Optional[Subcategory] = None
    servings: int
    prep_time: int
    total_cost: Optional[Decimal] = None
    cost_per_serving: Optional[Decimal] = None
    selling_price: Optional[Decimal] = None
    profit_margin: Optional[Decimal] = None
    notes: Optional[str] = None
    equipment: List[Equipment] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecipeFilter(BaseModel):
    """Listing filters; all optional and combined with AND."""
    search: Optional[str] = None
    category: Optional[Category] = None
    subcategory: Optional[Subcategory] = None
    sort_by: Optional[SortBy] = None

    model_config = ConfigDict(use_enum_values=True)


# ============ Recipe Ingredient Schemas ============

class RecipeIngredientCreate(BaseModel):
    """Request model for adding an ingredient line to a recipe."""
    ingredient_id: int
    quantity: Decimal = Field(gt=0, max_digits=10, decimal_places=4)
    unit: Unit

    model_config = ConfigDict(extra="forbid", use_enum_values=True)


class RecipeIngredientUpdate(BaseModel):
    """Partial update for an ingredient line. The owning recipe cannot change."""
    ingredient_id: Optional[int] = None
    quantity: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=4)
    unit: Optional[Unit] = None

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    @field_validator("ingredient_id", "quantity", "unit")
    @classmethod
    def required_not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v


class RecipeIngredientResponse(BaseModel):
    id: int
    recipe_id: int
    ingredient_id: int
    quantity: Decimal
    unit: Unit

    model_config = ConfigDict(from_attributes=True)


class RecipeIngredientDetail(RecipeIngredientResponse):
    """Ingredient line joined with its ingredient."""
    ingredient: IngredientResponse


class RecipeCostsResponse(BaseModel):
    total_cost: Optional[Decimal] = None
    cost_per_serving: Optional[Decimal] = None
    profit_margin: Optional[Decimal] = None

    model_config = ConfigDict(from_attributes=True)


class RecipeIngredientMutationResponse(BaseModel):
    """Ingredient line plus the owning recipe's recomputed costs."""
    recipe_ingredient: Optional[RecipeIngredientResponse] = None
    recipe_costs: RecipeCostsResponse
    success: bool = True


# ============ Step Schemas ============

class StepCreate(BaseModel):
    """
    Request model for adding a step.

    Without step_number the step is appended. With step_number k (1..N+1)
    it is inserted at k and later steps move down one place.
    """
    description: str = Field(min_length=1)
    step_number: Optional[int] = Field(default=None, gt=0)

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v):
        if not v.strip():
            raise ValueError("description must not be blank")
        return v


class StepUpdate(BaseModel):
    """Partial update for a step. A new step_number moves the step within 1..N."""
    description: Optional[str] = Field(default=None, min_length=1)
    step_number: Optional[int] = Field(default=None, gt=0)

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    @field_validator("description", "step_number")
    @classmethod
    def required_not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("description must not be blank")
        return v


class StepResponse(BaseModel):
    id: int
    recipe_id: int
    step_number: int
    description: str

    model_config = ConfigDict(from_attributes=True)


# ============ Composite / Costing Schemas ============

class FullRecipeResponse(RecipeResponse):
    """Recipe with its ingredient lines (insertion order) and steps (by number)."""
    ingredients: List[RecipeIngredientDetail] = []
    steps: List[StepResponse] = []


class IngredientCostResponse(BaseModel):
    recipe_ingredient_id: int
    ingredient_id: int
    ingredient_name: str
    quantity: Decimal
    unit: Unit
    unit_cost: Decimal
    line_cost: Decimal


class CostBreakdownResponse(BaseModel):
    recipe_id: int
    recipe_name: str
    servings: int
    selling_price: Optional[Decimal] = None
    total_cost: Decimal
    cost_per_serving: Decimal
    profit_margin: Optional[Decimal] = None
    ingredient_breakdown: List[IngredientCostResponse]
