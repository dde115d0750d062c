"""
Seed the sample ingredient catalogue and a demo recipe.

Run against the configured DATABASE_URL:
    python -m costbook.scripts.seed_demo
"""
from decimal import Decimal

from sqlalchemy.orm import Session

from costbook.schemas.ingredient import IngredientCreate
from costbook.schemas.recipe import RecipeCreate, RecipeIngredientCreate, StepCreate
from costbook.services.store import RecipeStore

SAMPLE_INGREDIENTS = [
    # unit costs in EUR per unit
    dict(name="Spaghetti", unit_cost=Decimal("0.002"), unit="g", allergens=["gluten"],
         supplier="Local Supplier", notes="Dried pasta"),
    dict(name="Eggs", unit_cost=Decimal("0.25"), unit="pcs", allergens=["eggs"],
         supplier="Local Farm", notes="Free-range eggs"),
    dict(name="Guanciale", unit_cost=Decimal("0.028"), unit="g", allergens=["none"],
         supplier="Italian Importer", notes="Cured pork cheek"),
    dict(name="Pecorino Romano", unit_cost=Decimal("0.025"), unit="g", allergens=["milk"],
         supplier="Italian Importer", notes="Aged sheep's milk cheese"),
    dict(name="Black Pepper", unit_cost=Decimal("0.05"), unit="g", allergens=["none"],
         supplier="Spice Trader", notes="Freshly ground"),
    dict(name="Salt", unit_cost=Decimal("0.001"), unit="g", allergens=["none"],
         supplier="Local Supplier", notes="Kosher salt"),
]

DEMO_RECIPE = dict(
    name="Spaghetti Carbonara",
    category="main",
    subcategory="italian",
    servings=4,
    prep_time=25,
    selling_price=Decimal("14.00"),
    equipment=["pot", "pan", "grater"],
)

# (ingredient name, quantity, unit)
DEMO_LINES = [
    ("Spaghetti", Decimal("400"), "g"),
    ("Eggs", Decimal("4"), "pcs"),
    ("Guanciale", Decimal("150"), "g"),
    ("Pecorino Romano", Decimal("100"), "g"),
    ("Black Pepper", Decimal("3"), "g"),
    ("Salt", Decimal("10"), "g"),
]

DEMO_STEPS = [
    "Bring a large pot of salted water to the boil and cook the spaghetti.",
    "Crisp the diced guanciale in a dry pan.",
    "Whisk the eggs with grated pecorino and plenty of black pepper.",
    "Toss the drained pasta with the guanciale off the heat, then stir in the egg mixture.",
]


def seed(db: Session) -> bool:
    """
    Insert the sample data into an empty database.

    Returns False without changes if ingredients already exist.
    """
    store = RecipeStore(db)

    if store.list_ingredients():
        print("Ingredients already exist, skipping seed.")
        return False

    print("Creating sample ingredients...")
    by_name = {}
    for data in SAMPLE_INGREDIENTS:
        ingredient = store.create_ingredient(IngredientCreate(**data))
        by_name[ingredient.name] = ingredient.id

    print("Creating demo recipe...")
    recipe = store.create_recipe(RecipeCreate(**DEMO_RECIPE))
    for name, quantity, unit in DEMO_LINES:
        store.add_ingredient_to_recipe(
            recipe.id,
            RecipeIngredientCreate(ingredient_id=by_name[name], quantity=quantity, unit=unit),
        )
    for description in DEMO_STEPS:
        store.add_step_to_recipe(recipe.id, StepCreate(description=description))

    print(f"Seeded {len(SAMPLE_INGREDIENTS)} ingredients and recipe '{recipe.name}'.")
    return True


if __name__ == "__main__":
    from costbook.db.session import SessionLocal, init_db

    init_db()
    with SessionLocal() as db:
        seed(db)
