# mcqgen/middleware/request_context.py
import re
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from mcqgen.core.constants import HTTPHeaders

# 클라이언트가 보낸 id는 로그에 그대로 찍히므로 안전한 문자만 허용
_SAFE_REQ_ID = re.compile(r"^[A-Za-z0-9._:\-]{1,128}$")


def _get_req_id_from_headers(request: Request) -> Optional[str]:
    # Starlette 헤더는 case-insensitive (X-Request-ID / x-request-id 모두 매칭)
    value = request.headers.get(HTTPHeaders.REQUEST_ID)
    if value and _SAFE_REQ_ID.match(value):
        return value
    return None


def _expose_header(response: Response, name: str) -> None:
    expose = response.headers.get("Access-Control-Expose-Headers")
    if expose:
        items = {h.strip() for h in expose.split(",")}
        items.add(name)
        response.headers["Access-Control-Expose-Headers"] = ", ".join(sorted(items))
    else:
        response.headers["Access-Control-Expose-Headers"] = name


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a request id to request.state and echo it on the response."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()

        trace_id = _get_req_id_from_headers(request) or str(uuid.uuid4())
        # 라우트/로거 양쪽에서 쓰는 이름 모두 세팅
        request.state.trace_id = trace_id
        request.state.req_id = trace_id

        response = await call_next(request)

        request.state.elapsed_ms = int((time.perf_counter() - start) * 1000)
        response.headers[HTTPHeaders.REQUEST_ID] = trace_id
        _expose_header(response, HTTPHeaders.REQUEST_ID)
        return response
