"""
전역 에러 핸들러
Every failure leaves the API as {code, message, trace_id}
"""
import logging
import traceback
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from mcqgen.core.constants import ErrorCodes
from mcqgen.core.exceptions import AppException
from mcqgen.core.settings import settings

logger = logging.getLogger(__name__)


def _error_body(
    code: str,
    message: str,
    trace_id: Optional[str],
    **extra: Any,
) -> Dict[str, Any]:
    content: Dict[str, Any] = {"code": code, "message": message}
    if trace_id:
        content["trace_id"] = trace_id
    content.update(extra)
    return content


def _field_errors(errors) -> List[Dict[str, str]]:
    return [
        {
            "field": " -> ".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in errors
    ]


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register the global exception handlers on the application

    Args:
        app: FastAPI 애플리케이션 인스턴스
    """

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        trace_id = getattr(request.state, "trace_id", None)

        # 4xx는 warning, 5xx는 error
        log_level = logging.WARNING if exc.status_code < 500 else logging.ERROR
        logger.log(
            log_level,
            exc.code,
            extra={
                "trace_id": trace_id,
                "error_message": exc.message,
                "status_code": exc.status_code,
                "details": exc.details,
                "path": str(request.url.path),
                "method": request.method,
            },
        )

        extra = {}
        if exc.details and settings.DEBUG:
            extra["details"] = exc.details
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, exc.message, trace_id, **extra),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """
        HTTPException raised by dependencies (e.g. get_current_user).
        A dict detail already carries message/code and is passed through.
        """
        trace_id = getattr(request.state, "trace_id", None)
        if isinstance(exc.detail, dict):
            detail = dict(exc.detail)
            code = detail.pop("code", ErrorCodes.HTTP_ERROR)
            message = detail.pop("message", "")
            content = _error_body(code, message, trace_id, **detail)
        else:
            content = _error_body(ErrorCodes.HTTP_ERROR, str(exc.detail), trace_id)
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        trace_id = getattr(request.state, "trace_id", None)
        errors = _field_errors(exc.errors())

        logger.warning(
            "validation_error",
            extra={
                "trace_id": trace_id,
                "path": str(request.url.path),
                "errors": errors,
            },
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(ErrorCodes.VALIDATION_ERROR, "Invalid request.", trace_id, errors=errors),
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        # 응답 모델 검증 실패 등 라우트 내부에서 발생한 pydantic 오류
        trace_id = getattr(request.state, "trace_id", None)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(
                ErrorCodes.VALIDATION_ERROR,
                "Data validation failed.",
                trace_id,
                errors=_field_errors(exc.errors()),
            ),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        trace_id = getattr(request.state, "trace_id", None)

        logger.error(
            "unhandled_exception",
            extra={
                "trace_id": trace_id,
                "error_type": type(exc).__name__,
                "error_message": str(exc),
                "path": str(request.url.path),
                "method": request.method,
            },
            exc_info=True,
        )

        extra = {}
        if settings.DEBUG:
            message = f"{type(exc).__name__}: {exc}"
            extra["stack_trace"] = traceback.format_exc()
        else:
            message = "An internal error occurred. Please try again later."
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(ErrorCodes.INTERNAL_ERROR, message, trace_id, **extra),
        )
