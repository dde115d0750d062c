"""
Ingredient model: a priced raw material.
"""
from sqlalchemy import Column, Integer, String, Text, JSON

from costbook.db.base import Base
from costbook.db.types import DecimalString


class Ingredient(Base):
    """An ingredient with a cost per unit of measure."""
    __tablename__ = "ingredients"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    unit_cost = Column(DecimalString, nullable=False)  # currency per `unit`
    unit = Column(String(10), nullable=False)  # g, kg, ml, cl, L, pcs, ...
    allergens = Column(JSON, nullable=False, default=list)  # ["gluten", "milk"] or ["none"]
    supplier = Column(String(255))
    notes = Column(Text)
