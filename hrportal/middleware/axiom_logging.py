"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Sends one structured event per API call to Axiom: method, path, params,
JSON body, status code, duration and the error ``detail`` for 4xx/5xx.
Credentials and personal contact data (phone numbers, emails) are masked;
multipart uploads are summarized instead of read.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hrportal.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 — Keys whose values never leave the process
_SENSITIVE_KEYS = re.compile(
    r"(password|secret|token|authorization|api_?key|credential|phone|email)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}
_SKIP_PREFIXES = ("/uploads/",)

_MAX_DETAIL = 500
_MAX_DEPTH = 5
_MAX_ITEMS = 20


def _mask(data: Any, depth: int = 0) -> Any:
    """민감 필드 재귀 마스킹 — Recursively mask sensitive keys in dicts/lists."""
    if depth > _MAX_DEPTH:
        return "..."
    if isinstance(data, dict):
        return {
            key: "***" if _SENSITIVE_KEYS.search(str(key)) else _mask(value, depth + 1)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [_mask(item, depth + 1) for item in data[:_MAX_ITEMS]]
    if isinstance(data, str) and len(data) > 2000:
        return data[:2000] + "...(truncated)"
    return data


def _should_skip(path: str) -> bool:
    return path in _SKIP_PATHS or path.startswith(_SKIP_PREFIXES)


async def _read_body(request: Request) -> Any:
    """요청 body 요약 — JSON은 마스킹 후 그대로, 멀티파트는 표시만."""
    if request.method not in ("POST", "PUT", "PATCH", "DELETE"):
        return None
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/"):
        return "(multipart body)"
    body = await request.body()
    if not body:
        return None
    try:
        return _mask(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(non-json body)"


async def _buffer_error(response: Response) -> tuple[Response, str]:
    """에러 응답 body를 읽어 detail을 추출하고 응답을 다시 구성합니다.

    Drain the streaming error response, extract ``detail`` and return a
    replayable response with the same body and headers.
    """
    raw = b""
    async for chunk in response.body_iterator:
        raw += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

    try:
        payload = json.loads(raw)
        detail = payload.get("detail", payload) if isinstance(payload, dict) else payload
        detail = detail if isinstance(detail, str) else json.dumps(detail)
    except (json.JSONDecodeError, UnicodeDecodeError):
        detail = raw.decode("utf-8", errors="replace")

    rebuilt = Response(
        content=raw,
        status_code=response.status_code,
        headers=dict(response.headers),
        media_type=response.media_type,
    )
    return rebuilt, detail[:_MAX_DETAIL]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Pass-through when ``AXIOM_API_TOKEN``/``AXIOM_DATASET`` are not configured.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._dataset: str = settings.AXIOM_DATASET
        self._client: AxiomClient | None = None
        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._client is None or _should_skip(request.url.path):
            return await call_next(request)

        started = time.perf_counter()
        event: dict[str, Any] = {"method": request.method, "path": request.url.path}
        if request.query_params:
            event["query_params"] = _mask(dict(request.query_params))
        body = await _read_body(request)
        if body is not None:
            event["request_body"] = body

        event["status_code"] = 500
        try:
            response = await call_next(request)
            event["status_code"] = response.status_code
            if request.path_params:
                event["path_params"] = dict(request.path_params)
            if response.status_code >= 400:
                response, event["error"] = await _buffer_error(response)
            return response
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            self._ingest(event)

    def _ingest(self, event: dict[str, Any]) -> None:
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception as exc:  # 로깅 실패가 요청 처리를 깨뜨리지 않음
            logger.debug("Axiom ingest failed: %s", exc)
