# mcqgen/services/mcq_store.py
"""
MCQ 저장소
CRUD over the `mcqs` table. Records are written once at save time and
afterwards only renamed/re-edited, rated or deleted.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from mcqgen.core.constants import ReasoningEfforts
from mcqgen.core.exceptions import McqNotFoundError, ValidationError
from mcqgen.core.settings import settings
from mcqgen.models import Mcq
from mcqgen.schemas.mcq import ParsedContent, SaveRequest

logger = logging.getLogger(__name__)


def create_mcq(db: Session, req: SaveRequest) -> Mcq:
    mcq = Mcq(
        name=req.name,
        topic=req.topic,
        raw_content=req.raw_content,
        parsed_content=req.parsed_content.model_dump(),
        model=req.model or settings.OPENAI_MODEL_NAME,
        reasoning=req.reasoning,
        reasoning_effort=req.reasoning_effort or ReasoningEfforts.DEFAULT,
    )
    db.add(mcq)
    db.commit()
    db.refresh(mcq)
    logger.info("mcq_saved", extra={"mcq_id": mcq.id, "model": mcq.model})
    return mcq


def get_mcq(db: Session, mcq_id: int) -> Mcq:
    mcq = db.get(Mcq, mcq_id)
    if mcq is None:
        raise McqNotFoundError(mcq_id)
    return mcq


def list_mcqs(db: Session, ids: Optional[Sequence[int]] = None) -> List[Mcq]:
    """All records (or the selected ones), newest first."""
    stmt = select(Mcq).order_by(Mcq.created_at.desc(), Mcq.id.desc())
    if ids:
        stmt = stmt.where(Mcq.id.in_(list(ids)))
    return list(db.scalars(stmt))


def update_mcq(
    db: Session,
    mcq_id: int,
    *,
    name: Optional[str] = None,
    parsed_content: Optional[ParsedContent] = None,
) -> Mcq:
    mcq = get_mcq(db, mcq_id)
    if name is not None:
        mcq.name = name
    if parsed_content is not None:
        mcq.parsed_content = parsed_content.model_dump()
    db.commit()
    db.refresh(mcq)
    logger.info("mcq_updated", extra={"mcq_id": mcq_id})
    return mcq


def rate_mcq(db: Session, mcq_id: int, rating: int) -> Mcq:
    if not 0 <= rating <= 5:
        raise ValidationError("Rating must be a number between 0 and 5", details={"rating": rating})
    mcq = get_mcq(db, mcq_id)
    mcq.rating = rating
    db.commit()
    db.refresh(mcq)
    logger.info("mcq_rated", extra={"mcq_id": mcq_id, "rating": rating})
    return mcq


def delete_mcq(db: Session, mcq_id: int) -> None:
    mcq = get_mcq(db, mcq_id)
    db.delete(mcq)
    db.commit()
    logger.info("mcq_deleted", extra={"mcq_id": mcq_id})


def parse_ids(raw: Optional[str]) -> Optional[List[int]]:
    """'1,2,3' → [1, 2, 3]; empty → None (meaning all records)."""
    if raw is None or not raw.strip():
        return None
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise ValidationError("ids must be a comma separated list of integers", details={"ids": raw})
