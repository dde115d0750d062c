"""
Recipe Aggregation.

Assembles the composite FullRecipe view and keeps each recipe's step numbers
a dense 1..N sequence across insertions, moves and deletions.
"""
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from costbook.core.errors import StepNumberError
from costbook.models.recipe import Recipe, RecipeIngredient, Step


@dataclass
class FullRecipe:
    """A recipe with its ingredient lines and steps. Assembled on demand, never stored."""
    recipe: Recipe
    ingredients: list[RecipeIngredient] = field(default_factory=list)
    steps: list[Step] = field(default_factory=list)


def get_recipe_ingredients(db: Session, recipe_id: int) -> list[RecipeIngredient]:
    """Ingredient lines of a recipe in insertion order, each with its ingredient loaded."""
    return list(db.execute(
        select(RecipeIngredient)
        .options(joinedload(RecipeIngredient.ingredient))
        .where(RecipeIngredient.recipe_id == recipe_id)
        .order_by(RecipeIngredient.id)
    ).scalars().all())


def get_recipe_steps(db: Session, recipe_id: int) -> list[Step]:
    """Steps of a recipe ordered by step number."""
    return list(db.execute(
        select(Step)
        .where(Step.recipe_id == recipe_id)
        .order_by(Step.step_number, Step.id)
    ).scalars().all())


def assemble_full_recipe(db: Session, recipe_id: int) -> Optional[FullRecipe]:
    """Returns None if the recipe is not found."""
    recipe = db.get(Recipe, recipe_id)
    if not recipe:
        return None

    return FullRecipe(
        recipe=recipe,
        ingredients=get_recipe_ingredients(db, recipe_id),
        steps=get_recipe_steps(db, recipe_id),
    )


# ============ Step ordering ============

def next_step_number(steps: list[Step]) -> int:
    """max(step_number) + 1, or 1 for a recipe without steps."""
    if not steps:
        return 1
    return max(s.step_number for s in steps) + 1


def open_step_slot(steps: list[Step], step_number: int) -> None:
    """
    Make room for a new step at `step_number` (1..N+1).

    Steps at or after the slot move down one place.
    """
    max_allowed = len(steps) + 1
    if step_number < 1 or step_number > max_allowed:
        raise StepNumberError(step_number, max_allowed)

    for s in steps:
        if s.step_number >= step_number:
            s.step_number += 1


def move_step(steps: list[Step], step: Step, new_number: int) -> None:
    """Move `step` to `new_number` (1..N), shifting the steps in between."""
    max_allowed = len(steps)
    if new_number < 1 or new_number > max_allowed:
        raise StepNumberError(new_number, max_allowed)

    old_number = step.step_number
    if new_number == old_number:
        return

    for s in steps:
        if s.id == step.id:
            continue
        if new_number < old_number and new_number <= s.step_number < old_number:
            s.step_number += 1
        elif new_number > old_number and old_number < s.step_number <= new_number:
            s.step_number -= 1
    step.step_number = new_number


def close_step_gap(steps: list[Step], deleted_number: int) -> int:
    """
    Renumber the remaining steps after a deletion.

    Every step after the deleted one moves up exactly one place.
    Returns the number of steps renumbered.
    """
    renumbered = 0
    for s in steps:
        if s.step_number > deleted_number:
            s.step_number -= 1
            renumbered += 1
    return renumbered
