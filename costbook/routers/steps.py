"""
Step endpoints addressed by step id.
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status

from costbook.core.deps import get_store
from costbook.schemas.recipe import StepResponse, StepUpdate
from costbook.services.store import RecipeStore

router = APIRouter(prefix="/steps", tags=["recipes"])


@router.patch("/{step_id}", response_model=StepResponse)
def update_step(step_id: int, update_data: StepUpdate, store: RecipeStore = Depends(get_store)):
    """Edit a step's description or move it to another position (1..N)."""
    step = store.update_step(step_id, update_data)
    if not step:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Step not found")
    return StepResponse.model_validate(step)


@router.delete("/{step_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_step(step_id: int, store: RecipeStore = Depends(get_store)):
    """Delete a step; later steps move up one place."""
    if not store.delete_step(step_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Step not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
