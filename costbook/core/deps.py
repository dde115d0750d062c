"""
Shared FastAPI dependencies.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from costbook.db.session import get_db
from costbook.services.store import RecipeStore


def get_store(db: Session = Depends(get_db)) -> RecipeStore:
    """Entity store bound to the request's database session."""
    return RecipeStore(db)
