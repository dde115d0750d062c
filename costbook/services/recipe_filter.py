"""
Recipe Filter & Sort.

Category filters run in the database. Name search and sorting run in Python:
search needs Unicode case folding and the derived cost fields are stored as
decimal strings.
"""
import unicodedata
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from costbook.core.options import SortBy
from costbook.models.recipe import Recipe
from costbook.schemas.recipe import RecipeFilter


def collation_key(name: str) -> str:
    """Accent- and case-insensitive key so "Éclair" sorts next to "eclair"."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


def _nulls_last(value: Optional[Decimal], descending: bool = False) -> tuple:
    if value is None:
        return (1, Decimal(0))
    return (0, -value if descending else value)


def sort_recipes(recipes: Sequence[Recipe], sort_by: Optional[str]) -> list[Recipe]:
    """
    Order recipes by a named sort order.

    Recipes without a cost (or margin) always come last. Sorting is stable,
    so ties keep insertion order. Unknown or missing sort_by keeps the input order.
    """
    recipes = list(recipes)
    if sort_by == SortBy.NAME:
        recipes.sort(key=lambda r: (collation_key(r.name), r.name))
    elif sort_by == SortBy.COST_LOW:
        recipes.sort(key=lambda r: _nulls_last(r.cost_per_serving))
    elif sort_by == SortBy.COST_HIGH:
        recipes.sort(key=lambda r: _nulls_last(r.cost_per_serving, descending=True))
    elif sort_by == SortBy.MARGIN:
        recipes.sort(key=lambda r: _nulls_last(r.profit_margin, descending=True))
    return recipes


def filter_recipes(db: Session, recipe_filter: Optional[RecipeFilter] = None) -> list[Recipe]:
    """List recipes matching all given predicates, in the requested order."""
    query = select(Recipe).order_by(Recipe.id)

    if recipe_filter is None:
        return list(db.execute(query).scalars().all())

    if recipe_filter.category:
        query = query.where(Recipe.category == recipe_filter.category)

    if recipe_filter.subcategory:
        query = query.where(Recipe.subcategory == recipe_filter.subcategory)

    recipes = db.execute(query).scalars().all()

    if recipe_filter.search:
        term = recipe_filter.search.casefold()
        recipes = [r for r in recipes if term in r.name.casefold()]

    return sort_recipes(recipes, recipe_filter.sort_by)
