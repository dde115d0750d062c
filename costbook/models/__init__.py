"""
SQLAlchemy models for Costbook.
"""
from costbook.models.ingredient import Ingredient
from costbook.models.recipe import Recipe, RecipeIngredient, Step


__all__ = [
    "Ingredient",
    "Recipe",
    "RecipeIngredient",
    "Step",
]
