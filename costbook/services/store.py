"""
Entity Store for ingredients, recipes, recipe ingredient lines and steps.

All mutations go through this service so the costing engine runs whenever a
recipe's ingredient linkage changes, and step numbers stay dense.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from costbook.core.errors import (
    IngredientInUseError,
    IngredientNotFoundError,
    RecipeNotFoundError,
)
from costbook.core.locks import KeyedLock, recipe_locks
from costbook.models.ingredient import Ingredient
from costbook.models.recipe import Recipe, RecipeIngredient, Step, utcnow
from costbook.schemas.ingredient import IngredientCreate, IngredientUpdate
from costbook.schemas.recipe import (
    RecipeCreate,
    RecipeFilter,
    RecipeIngredientCreate,
    RecipeIngredientUpdate,
    RecipeUpdate,
    StepCreate,
    StepUpdate,
)
from costbook.services.costing import CostBreakdown, CostingEngine, RecipeCosts
from costbook.services.recipe_assembly import (
    FullRecipe,
    assemble_full_recipe,
    close_step_gap,
    get_recipe_ingredients,
    get_recipe_steps,
    move_step,
    next_step_number,
    open_step_slot,
)
from costbook.services.recipe_filter import filter_recipes

logger = logging.getLogger(__name__)

# Recipe fields that feed the costing formulas
COST_INPUT_FIELDS = {"servings", "selling_price"}


class RecipeStore:
    """
    CRUD over the four entity types.

    Reads return None (or False for deletes) when an entity is missing;
    operations that need an existing parent raise a NotFoundError instead.
    Each mutating call runs in one transaction and rolls back on failure,
    so a failed cost recomputation never leaves derived fields half-written.
    """

    def __init__(self, db: Session, locks: KeyedLock = recipe_locks):
        self.db = db
        self.locks = locks
        self.costing = CostingEngine(db)

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # ============ Ingredients ============

    def list_ingredients(self) -> list[Ingredient]:
        return list(self.db.execute(select(Ingredient).order_by(Ingredient.id)).scalars().all())

    def get_ingredient(self, ingredient_id: int) -> Optional[Ingredient]:
        return self.db.get(Ingredient, ingredient_id)

    def create_ingredient(self, data: IngredientCreate) -> Ingredient:
        ingredient = Ingredient(**data.model_dump())
        with self._transaction():
            self.db.add(ingredient)
            self.db.flush()
        logger.info(f"Created ingredient {ingredient.id} ({ingredient.name})")
        return ingredient

    def update_ingredient(self, ingredient_id: int, patch: IngredientUpdate) -> Optional[Ingredient]:
        """
        Apply a partial update.

        A unit cost change recomputes every recipe that uses the ingredient.
        """
        ingredient = self.db.get(Ingredient, ingredient_id)
        if not ingredient:
            return None

        changes = patch.model_dump(exclude_unset=True)
        with self._transaction():
            for field, value in changes.items():
                setattr(ingredient, field, value)
            self.db.flush()

            if "unit_cost" in changes:
                for recipe_id in self._recipes_using(ingredient_id):
                    with self.locks.hold(recipe_id):
                        self.costing.recalculate(recipe_id)
        return ingredient

    def delete_ingredient(self, ingredient_id: int) -> bool:
        """
        Delete an unused ingredient.

        Raises IngredientInUseError while any recipe line references it.
        """
        ingredient = self.db.get(Ingredient, ingredient_id)
        if not ingredient:
            return False

        recipe_ids = self._recipes_using(ingredient_id)
        if recipe_ids:
            raise IngredientInUseError(ingredient_id, recipe_ids)

        with self._transaction():
            self.db.delete(ingredient)
        logger.info(f"Deleted ingredient {ingredient_id}")
        return True

    def _recipes_using(self, ingredient_id: int) -> list[int]:
        return list(self.db.execute(
            select(RecipeIngredient.recipe_id)
            .where(RecipeIngredient.ingredient_id == ingredient_id)
            .distinct()
            .order_by(RecipeIngredient.recipe_id)
        ).scalars().all())

    # ============ Recipes ============

    def get_recipes(self, recipe_filter: Optional[RecipeFilter] = None) -> list[Recipe]:
        return filter_recipes(self.db, recipe_filter)

    def get_recipe(self, recipe_id: int) -> Optional[Recipe]:
        return self.db.get(Recipe, recipe_id)

    def get_full_recipe(self, recipe_id: int) -> Optional[FullRecipe]:
        return assemble_full_recipe(self.db, recipe_id)

    def create_recipe(self, data: RecipeCreate) -> Recipe:
        now = utcnow()
        recipe = Recipe(
            **data.model_dump(),
            total_cost=None,
            cost_per_serving=None,
            profit_margin=None,
            created_at=now,
            updated_at=now,
        )
        with self._transaction():
            self.db.add(recipe)
            self.db.flush()
        logger.info(f"Created recipe {recipe.id} ({recipe.name})")
        return recipe

    def update_recipe(self, recipe_id: int, patch: RecipeUpdate) -> Optional[Recipe]:
        """
        Apply a partial update and refresh updated_at.

        Changing servings or selling price recomputes the derived cost fields.
        """
        with self.locks.hold(recipe_id):
            recipe = self.db.get(Recipe, recipe_id)
            if not recipe:
                return None

            changes = patch.model_dump(exclude_unset=True)
            with self._transaction():
                for field, value in changes.items():
                    setattr(recipe, field, value)
                recipe.touch()
                self.db.flush()

                if COST_INPUT_FIELDS & changes.keys():
                    self.costing.recalculate(recipe_id)
            return recipe

    def delete_recipe(self, recipe_id: int) -> bool:
        """Delete a recipe together with its ingredient lines and steps."""
        with self.locks.hold(recipe_id):
            recipe = self.db.get(Recipe, recipe_id)
            if not recipe:
                return False

            with self._transaction():
                lines = self.db.execute(
                    delete(RecipeIngredient).where(RecipeIngredient.recipe_id == recipe_id)
                ).rowcount
                steps = self.db.execute(
                    delete(Step).where(Step.recipe_id == recipe_id)
                ).rowcount
                self.db.delete(recipe)

        self.locks.discard(recipe_id)
        logger.info(f"Deleted recipe {recipe_id} with {lines} ingredient line(s) and {steps} step(s)")
        return True

    # ============ Recipe Ingredients ============

    def get_recipe_ingredients(self, recipe_id: int) -> list[RecipeIngredient]:
        return get_recipe_ingredients(self.db, recipe_id)

    def get_recipe_ingredient(self, recipe_ingredient_id: int) -> Optional[RecipeIngredient]:
        return self.db.get(RecipeIngredient, recipe_ingredient_id)

    def add_ingredient_to_recipe(self, recipe_id: int, data: RecipeIngredientCreate) -> RecipeIngredient:
        with self.locks.hold(recipe_id):
            if not self.db.get(Recipe, recipe_id):
                raise RecipeNotFoundError(recipe_id)
            if not self.db.get(Ingredient, data.ingredient_id):
                raise IngredientNotFoundError(data.ingredient_id)

            line = RecipeIngredient(recipe_id=recipe_id, **data.model_dump())
            with self._transaction():
                self.db.add(line)
                self.db.flush()
                self.costing.recalculate(recipe_id)
            return line

    def update_recipe_ingredient(
        self,
        recipe_ingredient_id: int,
        patch: RecipeIngredientUpdate,
    ) -> Optional[RecipeIngredient]:
        line = self.db.get(RecipeIngredient, recipe_ingredient_id)
        if not line:
            return None

        changes = patch.model_dump(exclude_unset=True)
        if "ingredient_id" in changes and not self.db.get(Ingredient, changes["ingredient_id"]):
            raise IngredientNotFoundError(changes["ingredient_id"])

        recipe_id = line.recipe_id
        with self.locks.hold(recipe_id):
            with self._transaction():
                for field, value in changes.items():
                    setattr(line, field, value)
                self.db.flush()
                self.costing.recalculate(recipe_id)
            return line

    def remove_ingredient_from_recipe(self, recipe_ingredient_id: int) -> bool:
        line = self.db.get(RecipeIngredient, recipe_ingredient_id)
        if not line:
            return False

        recipe_id = line.recipe_id
        with self.locks.hold(recipe_id):
            with self._transaction():
                self.db.delete(line)
                self.db.flush()
                self.costing.recalculate(recipe_id)
        return True

    # ============ Steps ============

    def get_recipe_steps(self, recipe_id: int) -> list[Step]:
        return get_recipe_steps(self.db, recipe_id)

    def get_step(self, step_id: int) -> Optional[Step]:
        return self.db.get(Step, step_id)

    def add_step_to_recipe(self, recipe_id: int, data: StepCreate) -> Step:
        """Append a step, or insert it at an explicit step number."""
        with self.locks.hold(recipe_id):
            if not self.db.get(Recipe, recipe_id):
                raise RecipeNotFoundError(recipe_id)

            with self._transaction():
                siblings = get_recipe_steps(self.db, recipe_id)
                if data.step_number is None:
                    step_number = next_step_number(siblings)
                else:
                    open_step_slot(siblings, data.step_number)
                    step_number = data.step_number

                step = Step(recipe_id=recipe_id, step_number=step_number, description=data.description)
                self.db.add(step)
                self.db.flush()
            return step

    def update_step(self, step_id: int, patch: StepUpdate) -> Optional[Step]:
        step = self.db.get(Step, step_id)
        if not step:
            return None

        changes = patch.model_dump(exclude_unset=True)
        with self.locks.hold(step.recipe_id):
            with self._transaction():
                if "description" in changes:
                    step.description = changes["description"]
                if "step_number" in changes:
                    siblings = get_recipe_steps(self.db, step.recipe_id)
                    move_step(siblings, step, changes["step_number"])
                self.db.flush()
            return step

    def delete_step(self, step_id: int) -> bool:
        """Delete a step and close the gap it leaves in the numbering."""
        step = self.db.get(Step, step_id)
        if not step:
            return False

        recipe_id = step.recipe_id
        deleted_number = step.step_number
        with self.locks.hold(recipe_id):
            with self._transaction():
                self.db.delete(step)
                self.db.flush()
                close_step_gap(get_recipe_steps(self.db, recipe_id), deleted_number)
                self.db.flush()
        return True

    # ============ Costing ============

    def calculate_recipe_costs(self, recipe_id: int) -> RecipeCosts:
        """Recompute and persist a recipe's costs. Raises RecipeNotFoundError."""
        with self.locks.hold(recipe_id):
            with self._transaction():
                return self.costing.recalculate(recipe_id)

    def cost_breakdown(self, recipe_id: int) -> Optional[CostBreakdown]:
        return self.costing.breakdown(recipe_id)
