"""
Recipes router.

Provides API endpoints for:
- Recipe CRUD and filtered listing
- Ingredient lines and steps scoped to a recipe
- Cost recalculation and per-ingredient cost breakdown
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from costbook.core.deps import get_store
from costbook.core.options import Category, SortBy, Subcategory
from costbook.schemas.recipe import (
    CostBreakdownResponse,
    FullRecipeResponse,
    IngredientCostResponse,
    RecipeCostsResponse,
    RecipeCreate,
    RecipeFilter,
    RecipeIngredientCreate,
    RecipeIngredientDetail,
    RecipeIngredientMutationResponse,
    RecipeIngredientResponse,
    RecipeResponse,
    RecipeUpdate,
    StepCreate,
    StepResponse,
)
from costbook.services.recipe_assembly import FullRecipe
from costbook.services.store import RecipeStore

router = APIRouter(prefix="/recipes", tags=["recipes"])


def get_recipe_or_404(store: RecipeStore, recipe_id: int):
    recipe = store.get_recipe(recipe_id)
    if not recipe:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return recipe


def full_recipe_response(full: FullRecipe) -> FullRecipeResponse:
    recipe = RecipeResponse.model_validate(full.recipe)
    return FullRecipeResponse(
        **recipe.model_dump(),
        ingredients=[RecipeIngredientDetail.model_validate(line) for line in full.ingredients],
        steps=[StepResponse.model_validate(step) for step in full.steps],
    )


def recipe_costs_response(store: RecipeStore, recipe_id: int) -> RecipeCostsResponse:
    """Derived cost fields as currently stored on the recipe."""
    return RecipeCostsResponse.model_validate(get_recipe_or_404(store, recipe_id))


# ============ Recipe Endpoints ============

@router.get("", response_model=List[RecipeResponse])
def list_recipes(
    search: Optional[str] = Query(None, description="Case-insensitive match on recipe name"),
    category: Optional[Category] = Query(None),
    subcategory: Optional[Subcategory] = Query(None),
    sort_by: Optional[SortBy] = Query(None, description="name, cost_low, cost_high or margin"),
    store: RecipeStore = Depends(get_store),
):
    """
    List recipes, optionally filtered and sorted.

    Without `sort_by` recipes come back in creation order. Cost and margin
    sorts place recipes that were never costed last.
    """
    recipe_filter = RecipeFilter(
        search=search,
        category=category,
        subcategory=subcategory,
        sort_by=sort_by,
    )
    return [RecipeResponse.model_validate(r) for r in store.get_recipes(recipe_filter)]


@router.get("/{recipe_id}", response_model=FullRecipeResponse)
def get_recipe(recipe_id: int, store: RecipeStore = Depends(get_store)):
    """Get a recipe with its ingredient lines and ordered steps."""
    full = store.get_full_recipe(recipe_id)
    if not full:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return full_recipe_response(full)


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(data: RecipeCreate, store: RecipeStore = Depends(get_store)):
    recipe = store.create_recipe(data)
    return RecipeResponse.model_validate(recipe)


@router.patch("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(
    recipe_id: int,
    update_data: RecipeUpdate,
    store: RecipeStore = Depends(get_store),
):
    """
    Update a recipe's properties.

    Changing `servings` or `selling_price` recalculates costs and margin.
    """
    recipe = store.update_recipe(recipe_id, update_data)
    if not recipe:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return RecipeResponse.model_validate(recipe)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(recipe_id: int, store: RecipeStore = Depends(get_store)):
    """Delete a recipe with all of its ingredient lines and steps."""
    if not store.delete_recipe(recipe_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============ Recipe Ingredient Endpoints ============

@router.get("/{recipe_id}/ingredients", response_model=List[RecipeIngredientDetail])
def list_recipe_ingredients(recipe_id: int, store: RecipeStore = Depends(get_store)):
    get_recipe_or_404(store, recipe_id)
    return [RecipeIngredientDetail.model_validate(line) for line in store.get_recipe_ingredients(recipe_id)]


@router.post(
    "/{recipe_id}/ingredients",
    response_model=RecipeIngredientMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_recipe_ingredient(
    recipe_id: int,
    data: RecipeIngredientCreate,
    store: RecipeStore = Depends(get_store),
):
    """
    Add an ingredient line to a recipe.

    Returns the new line with the recipe's recalculated costs.
    """
    line = store.add_ingredient_to_recipe(recipe_id, data)
    return RecipeIngredientMutationResponse(
        recipe_ingredient=RecipeIngredientResponse.model_validate(line),
        recipe_costs=recipe_costs_response(store, recipe_id),
    )


# ============ Step Endpoints ============

@router.get("/{recipe_id}/steps", response_model=List[StepResponse])
def list_recipe_steps(recipe_id: int, store: RecipeStore = Depends(get_store)):
    get_recipe_or_404(store, recipe_id)
    return [StepResponse.model_validate(step) for step in store.get_recipe_steps(recipe_id)]


@router.post("/{recipe_id}/steps", response_model=StepResponse, status_code=status.HTTP_201_CREATED)
def add_recipe_step(recipe_id: int, data: StepCreate, store: RecipeStore = Depends(get_store)):
    """
    Add a step to a recipe.

    Omit `step_number` to append. An explicit number inserts the step there
    and moves later steps down; it must lie between 1 and the step count + 1.
    """
    step = store.add_step_to_recipe(recipe_id, data)
    return StepResponse.model_validate(step)


# ============ Costing Endpoints ============

@router.post("/{recipe_id}/costs", response_model=RecipeCostsResponse)
def calculate_recipe_costs(recipe_id: int, store: RecipeStore = Depends(get_store)):
    """Recalculate and store total cost, cost per serving and profit margin."""
    costs = store.calculate_recipe_costs(recipe_id)
    return RecipeCostsResponse.model_validate(costs)


@router.get("/{recipe_id}/costs", response_model=CostBreakdownResponse)
def get_cost_breakdown(recipe_id: int, store: RecipeStore = Depends(get_store)):
    """
    Per-ingredient cost breakdown with current totals.

    Read-only: stored recipe fields are not modified.
    """
    result = store.cost_breakdown(recipe_id)
    if not result:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")

    return CostBreakdownResponse(
        recipe_id=result.recipe_id,
        recipe_name=result.recipe_name,
        servings=result.servings,
        selling_price=result.selling_price,
        total_cost=result.costs.total_cost,
        cost_per_serving=result.costs.cost_per_serving,
        profit_margin=result.costs.profit_margin,
        ingredient_breakdown=[
            IngredientCostResponse(
                recipe_ingredient_id=ic.recipe_ingredient_id,
                ingredient_id=ic.ingredient_id,
                ingredient_name=ic.ingredient_name,
                quantity=ic.quantity,
                unit=ic.unit,
                unit_cost=ic.unit_cost,
                line_cost=ic.line_cost,
            )
            for ic in result.ingredient_breakdown
        ]
    )
