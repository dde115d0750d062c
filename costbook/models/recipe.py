"""
Recipe models.

Recipe: a dish or drink with servings, pricing and derived cost fields
RecipeIngredient: join table linking a recipe to an ingredient with a quantity
Step: one ordered preparation instruction
"""
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Index, JSON
from sqlalchemy.orm import relationship

from costbook.db.base import Base
from costbook.db.types import DecimalString


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo on round trip."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Recipe(Base):
    """
    A recipe with its costing results.

    total_cost, cost_per_serving and profit_margin are derived by the costing
    engine and stay NULL until the first costing pass.
    """
    __tablename__ = "recipes"
    __table_args__ = (
        Index("idx_recipes_category", "category"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False)
    subcategory = Column(String(50))
    servings = Column(Integer, nullable=False)
    prep_time = Column(Integer, nullable=False)  # minutes

    # Derived
    total_cost = Column(DecimalString)
    cost_per_serving = Column(DecimalString)
    profit_margin = Column(DecimalString)  # percent of selling price

    selling_price = Column(DecimalString)
    notes = Column(Text)
    equipment = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    def touch(self) -> None:
        self.updated_at = utcnow()


class RecipeIngredient(Base):
    """
    Usage of an ingredient in a recipe.

    `unit` is recorded as entered; quantity × ingredient unit cost assumes
    both are expressed in compatible units.
    """
    __tablename__ = "recipe_ingredients"
    __table_args__ = (
        Index("idx_recipe_ingredients_recipe", "recipe_id"),
        Index("idx_recipe_ingredients_ingredient", "ingredient_id"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    ingredient_id = Column(Integer, ForeignKey("ingredients.id", ondelete="RESTRICT"), nullable=False)
    quantity = Column(DecimalString, nullable=False)
    unit = Column(String(10), nullable=False)

    ingredient = relationship("Ingredient")


class Step(Base):
    """A preparation step. step_number is dense 1..N within a recipe."""
    __tablename__ = "steps"
    __table_args__ = (
        Index("idx_steps_recipe_number", "recipe_id", "step_number"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    step_number = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)
