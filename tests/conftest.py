"""
Test configuration and fixtures.
"""
import os
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

# Use a throwaway in-memory database before importing app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_SAMPLE_DATA"] = "false"

from costbook.main import app
from costbook.core.locks import KeyedLock
from costbook.db.session import create_db_engine, create_session_factory, get_db, init_db
from costbook.schemas.ingredient import IngredientCreate
from costbook.schemas.recipe import RecipeCreate, RecipeIngredientCreate
from costbook.services.store import RecipeStore


@pytest.fixture(scope="function")
def engine() -> Generator[Engine, None, None]:
    """Fresh in-memory database per test."""
    engine = create_db_engine("sqlite://")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine: Engine) -> Generator[Session, None, None]:
    """Create a database session for the test."""
    TestingSessionLocal = create_session_factory(engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db: Session) -> RecipeStore:
    return RecipeStore(db, locks=KeyedLock())


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def make_ingredient(store: RecipeStore):
    """Factory for ingredients with sensible defaults."""
    def _make(name="Flour", unit_cost="0.002", unit="g", **kwargs):
        return store.create_ingredient(
            IngredientCreate(name=name, unit_cost=Decimal(unit_cost), unit=unit, **kwargs)
        )
    return _make


@pytest.fixture
def make_recipe(store: RecipeStore):
    """Factory for recipes with sensible defaults."""
    def _make(name="House Pasta", category="main", servings=4, prep_time=20, **kwargs):
        return store.create_recipe(
            RecipeCreate(name=name, category=category, servings=servings, prep_time=prep_time, **kwargs)
        )
    return _make


@pytest.fixture
def add_line(store: RecipeStore):
    """Add an ingredient line to a recipe."""
    def _add(recipe_id, ingredient_id, quantity, unit="g"):
        return store.add_ingredient_to_recipe(
            recipe_id,
            RecipeIngredientCreate(ingredient_id=ingredient_id, quantity=Decimal(quantity), unit=unit),
        )
    return _add
