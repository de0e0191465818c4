# mcqgen/main.py
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import Response

from mcqgen.core.settings import settings, validate_required_settings
from mcqgen.core.logging import configure_logging
from mcqgen.db import init_db
from mcqgen.middleware.error_handler import setup_exception_handlers
from mcqgen.middleware.request_context import RequestContextMiddleware

# 라우터들
from mcqgen.routes.auth import router as auth_router
from mcqgen.routes.export import router as export_router
from mcqgen.routes.mcq import router as mcq_router
from mcqgen.routes.settings import router as settings_router

# ---------- 앱 초기화 ----------
configure_logging(settings.LOG_LEVEL)


# ---------- 시작 ----------
@asynccontextmanager
async def lifespan(app: FastAPI):
    missing = validate_required_settings()
    if missing:
        logging.getLogger("mcqgen").warning("missing_settings", extra={"missing": missing})
    init_db()
    yield


app = FastAPI(title=settings.SERVICE_NAME or "MCQ Generator", lifespan=lifespan)

# ---------- 미들웨어 ----------
app.add_middleware(RequestContextMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-Id", "Content-Disposition"],
    max_age=600,
)

access_logger = logging.getLogger("access")


@app.middleware("http")
async def access_log_middleware(request: Request, call_next):
    start = time.perf_counter()
    response: Response | None = None
    try:
        response = await call_next(request)
        return response
    finally:
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        access_logger.info(
            "request_done",
            extra={
                # RequestContextMiddleware가 안쪽에서 세팅한 값
                "trace_id": getattr(request.state, "trace_id", None),
                "method": request.method,
                "path": request.url.path,
                "status": getattr(response, "status_code", None),
                "latency_ms": elapsed_ms,
            },
        )


# ---------- 전역 예외 핸들러 ----------
setup_exception_handlers(app)


# ---------- 라우터 등록 ----------
app.include_router(auth_router, prefix="/api/auth")
app.include_router(export_router)  # /api/mcq/export/* 는 /api/mcq/{id} 보다 먼저
app.include_router(mcq_router)
app.include_router(settings_router)


# ---------- OpenAPI ----------
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version="1.0.0",
        description="Generate, review and export clinical multiple-choice questions",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {})
    openapi_schema["components"]["securitySchemes"]["bearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "UUID",
    }
    for path in openapi_schema.get("paths", {}):
        if path.startswith("/api/auth/login") or path == "/api/health":
            continue
        for method in openapi_schema["paths"][path]:
            openapi_schema["paths"][path][method]["security"] = [{"bearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


# ---------- 헬스 체크 ----------
@app.get("/api/health")
def health_check():
    return {"message": "OK"}
