"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 예외 처리기, 라우터 등록.

FastAPI application entry point — Middleware, exception handlers and router
registration. Configures logging, CORS, the uploads static mount, health check
and includes every API router under ``/api``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from hrportal.config import settings
from hrportal.middleware.axiom_logging import AxiomLoggingMiddleware
from hrportal.services.storage_service import UPLOADS_DIR, UPLOADS_URL_PREFIX
from hrportal.utils.exceptions import FieldValidationError

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Axiom API 로깅 미들웨어 — CORS보다 먼저 등록하여 모든 요청을 캡처
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# 예외 처리기 — Exception handlers
# ---------------------------------------------------------------------------
@app.exception_handler(FieldValidationError)
async def field_validation_handler(request: Request, exc: FieldValidationError) -> JSONResponse:
    """필드별 검증 오류 — 400 {"detail", "errors"}."""
    return JSONResponse(status_code=400, content={"detail": exc.detail, "errors": exc.errors})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 스키마 오류를 400 + 필드 목록으로 변환합니다.

    Map FastAPI's 422 schema errors to 400 with ``{field, message}`` items.
    The location prefix (body/query/path) is dropped from the field name.
    """
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        errors.append({"field": ".".join(loc), "message": error.get("msg", "Invalid value")})
    return JSONResponse(status_code=400, content={"detail": "Invalid data", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# 업로드된 프로필 사진 — Uploaded profile pictures served as static files
app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=UPLOADS_DIR, check_dir=False), name="uploads")

# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from hrportal.api import api_router  # noqa: E402

app.include_router(api_router, prefix="/api")
