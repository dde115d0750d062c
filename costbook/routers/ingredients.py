"""
Ingredients router: CRUD over the priced ingredient catalogue.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from costbook.core.deps import get_store
from costbook.schemas.ingredient import IngredientCreate, IngredientResponse, IngredientUpdate
from costbook.services.store import RecipeStore

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


@router.get("", response_model=List[IngredientResponse])
def list_ingredients(store: RecipeStore = Depends(get_store)):
    """List all ingredients in creation order."""
    return [IngredientResponse.model_validate(i) for i in store.list_ingredients()]


@router.get("/{ingredient_id}", response_model=IngredientResponse)
def get_ingredient(ingredient_id: int, store: RecipeStore = Depends(get_store)):
    ingredient = store.get_ingredient(ingredient_id)
    if not ingredient:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ingredient not found")
    return IngredientResponse.model_validate(ingredient)


@router.post("", response_model=IngredientResponse, status_code=status.HTTP_201_CREATED)
def create_ingredient(data: IngredientCreate, store: RecipeStore = Depends(get_store)):
    ingredient = store.create_ingredient(data)
    return IngredientResponse.model_validate(ingredient)


@router.patch("/{ingredient_id}", response_model=IngredientResponse)
def update_ingredient(
    ingredient_id: int,
    update_data: IngredientUpdate,
    store: RecipeStore = Depends(get_store),
):
    """
    Update an ingredient's properties.

    Changing `unit_cost` recomputes the costs of every recipe using it.
    """
    ingredient = store.update_ingredient(ingredient_id, update_data)
    if not ingredient:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ingredient not found")
    return IngredientResponse.model_validate(ingredient)


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ingredient(ingredient_id: int, store: RecipeStore = Depends(get_store)):
    """Delete an ingredient. Returns 409 while recipes still use it."""
    if not store.delete_ingredient(ingredient_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ingredient not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
