"""
Recipe Costing Engine.

Derives a recipe's total cost, cost per serving and profit margin from its
ingredient lines and the current ingredient unit costs.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from costbook.core.config import get_settings
from costbook.core.errors import RecipeNotFoundError
from costbook.models.ingredient import Ingredient
from costbook.models.recipe import Recipe, RecipeIngredient

logger = logging.getLogger(__name__)


@dataclass
class IngredientCost:
    """Cost of a single ingredient line in a recipe."""
    recipe_ingredient_id: int
    ingredient_id: int
    ingredient_name: str
    quantity: Decimal
    unit: str
    unit_cost: Decimal
    line_cost: Decimal  # quantity * unit_cost


@dataclass
class RecipeCosts:
    """Derived financial fields of a recipe."""
    total_cost: Decimal
    cost_per_serving: Decimal
    profit_margin: Optional[Decimal]  # None without a positive selling price


@dataclass
class CostBreakdown:
    """Read-only costing view of a recipe."""
    recipe_id: int
    recipe_name: str
    servings: int
    selling_price: Optional[Decimal]
    costs: RecipeCosts
    ingredient_breakdown: list[IngredientCost]


def _quantum(places: int) -> Decimal:
    return Decimal(1).scaleb(-places)


class CostingEngine:
    """
    Calculates recipe costs.

    Formulas:
    total_cost = Σ (quantity_i × unit_cost_i)
    cost_per_serving = total_cost / servings
    profit_margin = (selling_price - cost_per_serving) / selling_price × 100

    Every run is a full recompute over the current ingredient lines, so the
    result does not depend on the order or history of mutations.
    """

    def __init__(
        self,
        db: Session,
        cost_places: Optional[int] = None,
        margin_places: Optional[int] = None,
    ):
        settings = get_settings()
        self.db = db
        self.cost_quantum = _quantum(cost_places or settings.COST_DECIMAL_PLACES)
        self.margin_quantum = _quantum(margin_places or settings.MARGIN_DECIMAL_PLACES)

    def _line_costs(self, recipe_id: int) -> list[IngredientCost]:
        rows = self.db.execute(
            select(RecipeIngredient, Ingredient)
            .join(Ingredient, RecipeIngredient.ingredient_id == Ingredient.id)
            .where(RecipeIngredient.recipe_id == recipe_id)
            .order_by(RecipeIngredient.id)
        ).all()

        lines = []
        for line, ingredient in rows:
            lines.append(IngredientCost(
                recipe_ingredient_id=line.id,
                ingredient_id=ingredient.id,
                ingredient_name=ingredient.name,
                quantity=line.quantity,
                unit=line.unit,
                unit_cost=ingredient.unit_cost,
                line_cost=line.quantity * ingredient.unit_cost,
            ))
        return lines

    def compute(
        self,
        line_costs: Sequence[Decimal],
        servings: int,
        selling_price: Optional[Decimal],
    ) -> RecipeCosts:
        """Pure costing arithmetic; no database access."""
        total_cost = sum(line_costs, Decimal(0)).quantize(self.cost_quantum, rounding=ROUND_HALF_UP)
        cost_per_serving = (total_cost / servings).quantize(self.cost_quantum, rounding=ROUND_HALF_UP)

        profit_margin = None
        if selling_price is not None and selling_price > 0:
            profit_margin = (
                (selling_price - cost_per_serving) / selling_price * 100
            ).quantize(self.margin_quantum, rounding=ROUND_HALF_UP)

        return RecipeCosts(
            total_cost=total_cost,
            cost_per_serving=cost_per_serving,
            profit_margin=profit_margin,
        )

    def recalculate(self, recipe_id: int) -> RecipeCosts:
        """
        Recompute and persist a recipe's derived fields.

        Raises RecipeNotFoundError if the recipe does not exist. The caller
        owns the transaction; values are only flushed here.
        """
        recipe = self.db.get(Recipe, recipe_id)
        if not recipe:
            raise RecipeNotFoundError(recipe_id)

        lines = self._line_costs(recipe_id)
        costs = self.compute([lc.line_cost for lc in lines], recipe.servings, recipe.selling_price)

        recipe.total_cost = costs.total_cost
        recipe.cost_per_serving = costs.cost_per_serving
        recipe.profit_margin = costs.profit_margin
        recipe.touch()
        self.db.flush()

        logger.debug(
            f"Recalculated recipe {recipe_id}: total={costs.total_cost} "
            f"per_serving={costs.cost_per_serving} margin={costs.profit_margin}"
        )
        return costs

    def breakdown(self, recipe_id: int) -> Optional[CostBreakdown]:
        """
        Per-ingredient cost breakdown with current totals.

        Returns None if the recipe is not found. Nothing is persisted.
        """
        recipe = self.db.get(Recipe, recipe_id)
        if not recipe:
            return None

        lines = self._line_costs(recipe_id)
        costs = self.compute([lc.line_cost for lc in lines], recipe.servings, recipe.selling_price)

        return CostBreakdown(
            recipe_id=recipe.id,
            recipe_name=recipe.name,
            servings=recipe.servings,
            selling_price=recipe.selling_price,
            costs=costs,
            ingredient_breakdown=lines,
        )
