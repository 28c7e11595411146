from fastapi import APIRouter, Depends, status

from postcraft.dependencies.auth import get_current_user_id, get_workflow
from postcraft.schemas.generation import GenerateRequest, GenerationResponse
from postcraft.services.generation_workflow import GenerationWorkflow

router = APIRouter()


@router.post("", response_model=GenerationResponse, status_code=status.HTTP_201_CREATED)
def generate_content(
    data: GenerateRequest,
    user_id: str = Depends(get_current_user_id),
    workflow: GenerationWorkflow = Depends(get_workflow),
):
    """
    Generate content for all six formats from one prompt.
    Counts against the free plan quota only when the generation is stored.
    """
    record = workflow.generate(user_id, data)
    return {"generation": record}
