"""
Recipe ingredient line endpoints addressed by line id.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from costbook.core.deps import get_store
from costbook.routers.recipes import recipe_costs_response
from costbook.schemas.recipe import (
    RecipeIngredientMutationResponse,
    RecipeIngredientResponse,
    RecipeIngredientUpdate,
)
from costbook.services.store import RecipeStore

router = APIRouter(prefix="/recipe-ingredients", tags=["recipes"])


@router.patch("/{recipe_ingredient_id}", response_model=RecipeIngredientMutationResponse)
def update_recipe_ingredient(
    recipe_ingredient_id: int,
    update_data: RecipeIngredientUpdate,
    store: RecipeStore = Depends(get_store),
):
    """Change an ingredient line's ingredient, quantity or unit and recalculate costs."""
    line = store.update_recipe_ingredient(recipe_ingredient_id, update_data)
    if not line:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe ingredient not found")

    return RecipeIngredientMutationResponse(
        recipe_ingredient=RecipeIngredientResponse.model_validate(line),
        recipe_costs=recipe_costs_response(store, line.recipe_id),
    )


@router.delete("/{recipe_ingredient_id}", response_model=RecipeIngredientMutationResponse)
def remove_recipe_ingredient(recipe_ingredient_id: int, store: RecipeStore = Depends(get_store)):
    """Remove an ingredient line and return the recipe's recalculated costs."""
    line = store.get_recipe_ingredient(recipe_ingredient_id)
    if not line:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe ingredient not found")

    recipe_id = line.recipe_id
    if not store.remove_ingredient_from_recipe(recipe_ingredient_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe ingredient not found")

    return RecipeIngredientMutationResponse(
        recipe_costs=recipe_costs_response(store, recipe_id),
    )
