"""
Reporting Service.

Portfolio-level figures for the dashboard: recipe and ingredient counts,
average margin, best performer, low-margin recipes and cost drivers.
"""
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from costbook.core.config import get_settings
from costbook.models.ingredient import Ingredient
from costbook.models.recipe import Recipe


@dataclass
class RecipeMargin:
    recipe_id: int
    recipe_name: str
    profit_margin: Decimal


@dataclass
class IngredientPrice:
    ingredient_id: int
    ingredient_name: str
    unit_cost: Decimal
    unit: str


@dataclass
class ReportSummary:
    total_recipes: int
    total_ingredients: int
    costed_recipes: int  # recipes with a positive cost per serving
    average_margin: Decimal
    low_margin_count: int
    highest_margin_recipe: Optional[RecipeMargin]
    top_ingredients: list[IngredientPrice] = field(default_factory=list)
    category_counts: dict[str, int] = field(default_factory=dict)


class ReportService:
    """Builds the summary from current recipe and ingredient rows."""

    TOP_INGREDIENTS = 5

    def __init__(self, db: Session, low_margin_threshold: Optional[int] = None):
        self.db = db
        if low_margin_threshold is None:
            low_margin_threshold = get_settings().LOW_MARGIN_THRESHOLD
        self.low_margin_threshold = Decimal(low_margin_threshold)

    def summary(self) -> ReportSummary:
        recipes = self.db.execute(select(Recipe).order_by(Recipe.id)).scalars().all()
        ingredients = self.db.execute(select(Ingredient).order_by(Ingredient.id)).scalars().all()

        costed = [r for r in recipes if r.cost_per_serving is not None and r.cost_per_serving > 0]

        # Costed recipes without a selling price count as 0% margin
        margins = [r.profit_margin or Decimal(0) for r in costed]
        average_margin = Decimal(0)
        if margins:
            average_margin = (sum(margins, Decimal(0)) / len(margins)).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )

        low_margin_count = sum(1 for m in margins if m < self.low_margin_threshold)

        highest = None
        with_margin = [r for r in costed if r.profit_margin is not None]
        if with_margin:
            best = max(with_margin, key=lambda r: r.profit_margin)
            highest = RecipeMargin(
                recipe_id=best.id,
                recipe_name=best.name,
                profit_margin=best.profit_margin,
            )

        top = sorted(ingredients, key=lambda i: i.unit_cost, reverse=True)[:self.TOP_INGREDIENTS]

        return ReportSummary(
            total_recipes=len(recipes),
            total_ingredients=len(ingredients),
            costed_recipes=len(costed),
            average_margin=average_margin,
            low_margin_count=low_margin_count,
            highest_margin_recipe=highest,
            top_ingredients=[
                IngredientPrice(
                    ingredient_id=i.id,
                    ingredient_name=i.name,
                    unit_cost=i.unit_cost,
                    unit=i.unit,
                )
                for i in top
            ],
            category_counts=dict(Counter(r.category for r in recipes)),
        )
