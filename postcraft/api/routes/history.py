from fastapi import APIRouter, Depends

from postcraft.core.errors import GenerationNotFound
from postcraft.dependencies.auth import get_current_user_id
from postcraft.schemas.generation import GenerationListResponse, GenerationResponse
from postcraft.store import Store, get_store

router = APIRouter()


@router.get("", response_model=GenerationListResponse)
def list_history(
    store: Store = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    return {"generations": store.list_generations(user_id)}


@router.get("/{generation_id}", response_model=GenerationResponse)
def get_history_item(
    generation_id: str,
    store: Store = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    # Records owned by other accounts are reported as missing
    generation = store.get_generation(generation_id, user_id)
    if not generation:
        raise GenerationNotFound()
    return {"generation": generation}


@router.delete("/{generation_id}")
def delete_history_item(
    generation_id: str,
    store: Store = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    if not store.delete_generation(generation_id, user_id):
        raise GenerationNotFound()
    return {"success": True}
