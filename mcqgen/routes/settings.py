# mcqgen/routes/settings.py
from fastapi import APIRouter, Depends

from mcqgen.core.exceptions import BadRequestError
from mcqgen.core.settings import settings
from mcqgen.prompts.mcq_prompt import PromptStore, get_prompt_store
from mcqgen.schemas.mcq import ModelSelectRequest, PromptUpdateRequest
from mcqgen.services.auth_service import get_current_user

router = APIRouter(prefix="/api", tags=["settings"], dependencies=[Depends(get_current_user)])


@router.get("/settings/model")
def get_model(store: PromptStore = Depends(get_prompt_store)):
    return {"currentModel": store.model, "allowedModels": settings.allowed_models_list}


@router.post("/settings/model")
def set_model(req: ModelSelectRequest, store: PromptStore = Depends(get_prompt_store)):
    if not store.set_model(req.model):
        raise BadRequestError("Invalid model selection", details={"model": req.model})
    return {"success": True, "currentModel": store.model}


@router.get("/prompt")
def get_prompt(store: PromptStore = Depends(get_prompt_store)):
    return {"prompt": store.prompt}


@router.post("/prompt")
def update_prompt(req: PromptUpdateRequest, store: PromptStore = Depends(get_prompt_store)):
    store.set_prompt(req.prompt)
    return {"success": True}
