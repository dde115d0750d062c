"""
Reporting Pydantic schemas.
"""
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class RecipeMarginResponse(BaseModel):
    recipe_id: int
    recipe_name: str
    profit_margin: Decimal

    model_config = ConfigDict(from_attributes=True)


class IngredientPriceResponse(BaseModel):
    ingredient_id: int
    ingredient_name: str
    unit_cost: Decimal
    unit: str

    model_config = ConfigDict(from_attributes=True)


class ReportSummaryResponse(BaseModel):
    total_recipes: int
    total_ingredients: int
    costed_recipes: int
    average_margin: Decimal
    low_margin_count: int  # Costed recipes below the low-margin threshold
    highest_margin_recipe: Optional[RecipeMarginResponse] = None
    top_ingredients: List[IngredientPriceResponse]
    category_counts: Dict[str, int]

    model_config = ConfigDict(from_attributes=True)
