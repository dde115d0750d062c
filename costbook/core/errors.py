"""
Domain exceptions raised by the store and costing engine.

The exception handlers registered in `costbook.main` translate them into
HTTP responses using each class's `status_code`.
"""


class CostbookError(Exception):
    """Base class for all domain errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CostbookError):
    """A required entity does not exist."""

    status_code = 404
    entity = "Entity"

    def __init__(self, entity_id: int):
        super().__init__(f"{self.entity} not found")
        self.entity_id = entity_id


class RecipeNotFoundError(NotFoundError):
    entity = "Recipe"


class IngredientNotFoundError(NotFoundError):
    entity = "Ingredient"


class IngredientInUseError(CostbookError):
    """Ingredient is still referenced by recipe lines and cannot be deleted."""

    status_code = 409

    def __init__(self, ingredient_id: int, recipe_ids: list[int]):
        super().__init__(
            f"Ingredient is used by {len(recipe_ids)} recipe(s) and cannot be deleted"
        )
        self.ingredient_id = ingredient_id
        self.recipe_ids = recipe_ids


class StepNumberError(CostbookError):
    """Requested step number would break the 1..N step sequence."""

    status_code = 422

    def __init__(self, step_number: int, max_allowed: int):
        super().__init__(
            f"Step number {step_number} is out of range (expected 1..{max_allowed})"
        )
        self.step_number = step_number
        self.max_allowed = max_allowed
