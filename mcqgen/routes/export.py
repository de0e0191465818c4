# mcqgen/routes/export.py
import os
import time
import traceback
from typing import Callable, List, Optional, Sequence, Tuple

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from starlette.background import BackgroundTask

from mcqgen.core.constants import HTTPHeaders
from mcqgen.core.exceptions import AppException, ExportError
from mcqgen.core.logging import logger, log_action
from mcqgen.db import get_db
from mcqgen.schemas.mcq import McqRecord
from mcqgen.services import mcq_store
from mcqgen.services.auth_service import get_current_user
from mcqgen.services.pdf_export import generate_pdf, generate_practice_pdf
from mcqgen.services.xlsx_export import generate_xlsx

router = APIRouter(prefix="/api/mcq/export", tags=["export"], dependencies=[Depends(get_current_user)])


def _send_file(tmp_path: str, filename: str, media_type: str) -> FileResponse:
    # 삭제는 FileResponse의 background에 연결 (응답 전송 완료 후 실행 보장)
    return FileResponse(
        path=tmp_path,
        media_type=media_type,
        filename=filename,
        background=BackgroundTask(lambda p: os.path.exists(p) and os.remove(p), tmp_path),
    )


def _load_records(db: Session, ids: Optional[str]) -> List[McqRecord]:
    selected = mcq_store.parse_ids(ids)
    return [McqRecord.model_validate(m) for m in mcq_store.list_mcqs(db, selected)]


def _export(
    request: Request,
    action: str,
    export_format: str,
    records: Sequence[McqRecord],
    build: Callable[[Sequence[McqRecord]], Tuple[str, str]],
    media_type: str,
) -> FileResponse:
    req_id = getattr(request.state, "req_id", None)
    t0 = time.time()
    try:
        tmp_path, filename = build(records)  # 반드시 절대경로 반환
    except AppException:
        raise
    except Exception as e:
        elapsed = int((time.time() - t0) * 1000)
        log_action(logger, req_id, action, elapsed, "9",
                   f"EXPORT_FAILED: {e}\n{traceback.format_exc()}", count=len(records))
        raise ExportError(export_format, original_error=e)

    elapsed = int((time.time() - t0) * 1000)
    log_action(logger, req_id, action, elapsed, "0", count=len(records))
    return _send_file(tmp_path, filename, media_type)


@router.get("/xlsx")
def export_xlsx(
    request: Request,
    ids: Optional[str] = Query(None, description="comma separated record ids; empty means all"),
    db: Session = Depends(get_db),
):
    records = _load_records(db, ids)
    return _export(request, "export_xlsx", "xlsx", records, generate_xlsx, HTTPHeaders.XLSX_CONTENT)


@router.get("/pdf")
def export_pdf(
    request: Request,
    ids: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    records = _load_records(db, ids)
    return _export(request, "export_pdf", "pdf", records, generate_pdf, HTTPHeaders.PDF_CONTENT)


@router.get("/pdf/learner")
def export_practice_pdf(
    request: Request,
    ids: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    records = _load_records(db, ids)
    return _export(request, "export_pdf_learner", "pdf", records, generate_practice_pdf, HTTPHeaders.PDF_CONTENT)
