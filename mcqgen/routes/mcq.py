# mcqgen/routes/mcq.py
import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from mcqgen.core.settings import settings
from mcqgen.db import get_db
from mcqgen.prompts.mcq_prompt import PromptStore, get_prompt_store
from mcqgen.schemas.error import ErrorResponse
from mcqgen.schemas.mcq import (
    GenerateRequest,
    GenerateResponse,
    McqRecord,
    ParseRequest,
    ParseResponse,
    RateRequest,
    RewriteRequest,
    SaveRequest,
    TokenEstimateRequest,
    TokenEstimateResponse,
    UpdateRequest,
)
from mcqgen.services import mcq_parser, mcq_store, token_budget
from mcqgen.services.auth_service import get_current_user
from mcqgen.services.mcq_generator import generate_mcq, rewrite_scenario

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/mcq",
    tags=["mcq"],
    dependencies=[Depends(get_current_user)],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


def _trace_id(request: Request):
    return getattr(request.state, "trace_id", None)


@router.post("/generate", response_model=GenerateResponse)
def generate(
    req: GenerateRequest,
    request: Request,
    store: PromptStore = Depends(get_prompt_store),
):
    result = generate_mcq(
        store,
        topic=req.topic,
        reference_text=req.reference_text,
        reasoning_effort=req.reasoning_effort,
        trace_id=_trace_id(request),
    )
    return GenerateResponse(
        raw=result.raw,
        parsed=result.parsed,
        needs_review=result.needs_review,
        model=result.model,
        reasoning_effort=result.reasoning_effort,
        reasoning=result.reasoning,
    )


@router.post("/parse", response_model=ParseResponse)
def parse_text(req: ParseRequest):
    """Re-derive the structured form from (edited) raw text."""
    parsed = mcq_parser.parse(req.text)
    if parsed is None:
        return ParseResponse(ok=False, missing=mcq_parser.missing_fields(req.text))
    return ParseResponse(ok=True, parsed=parsed)


@router.post("/token-estimate", response_model=TokenEstimateResponse)
def token_estimate(
    req: TokenEstimateRequest,
    store: PromptStore = Depends(get_prompt_store),
):
    tokens = token_budget.estimate_prompt_tokens(
        req.topic,
        req.reference_text,
        template=store.prompt,
        model=store.model,
    )
    limit = settings.PROMPT_TOKEN_LIMIT
    return TokenEstimateResponse(
        tokens=tokens,
        limit=limit,
        remaining=token_budget.remaining_budget(tokens, limit),
        over_limit=tokens > limit,
    )


@router.post("/rewrite-scenario")
def rewrite(
    req: RewriteRequest,
    request: Request,
    store: PromptStore = Depends(get_prompt_store),
):
    return {"text": rewrite_scenario(store, req.text, trace_id=_trace_id(request))}


@router.post("/save", response_model=McqRecord)
def save(req: SaveRequest, db: Session = Depends(get_db)):
    return mcq_store.create_mcq(db, req)


@router.get("/history", response_model=List[McqRecord])
def history(db: Session = Depends(get_db)):
    records = mcq_store.list_mcqs(db)
    logger.info("mcq_history_fetched", extra={"count": len(records)})
    return records


@router.get("/{mcq_id}", response_model=McqRecord)
def detail(mcq_id: int, db: Session = Depends(get_db)):
    return mcq_store.get_mcq(db, mcq_id)


@router.put("/{mcq_id}", response_model=McqRecord)
def update(mcq_id: int, req: UpdateRequest, db: Session = Depends(get_db)):
    return mcq_store.update_mcq(db, mcq_id, name=req.name, parsed_content=req.parsed_content)


@router.post("/{mcq_id}/rate")
def rate(mcq_id: int, req: RateRequest, db: Session = Depends(get_db)):
    mcq_store.rate_mcq(db, mcq_id, req.rating)
    return {"success": True}


@router.delete("/{mcq_id}")
def delete(mcq_id: int, db: Session = Depends(get_db)):
    mcq_store.delete_mcq(db, mcq_id)
    return {"message": "MCQ deleted successfully"}
