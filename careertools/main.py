"""
careertools API — Application entry point.

Bootstraps FastAPI, wires up the security-header middleware and error
handlers, registers route groups, and manages the optional MongoDB
connection behind the Request Gate.

Extension points:
  - Add new tool routes with app.include_router() below; protect them with
    Depends(tool_guard(...)) from routes/guard.py
  - Add new error types by subclassing ToolError in core/errors.py
  - Change startup behaviour in the lifespan context manager
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from careertools.core import database as db_module
from careertools.core.config import APP_VERSION, settings
from careertools.core.database import close_mongo_connection, connect_to_mongo
from careertools.core.errors import RateLimitDenied, SecurityRejected, ToolError
from careertools.core.rate_limit import limiter
from careertools.routes.cover_letter import router as cover_letter_router
from careertools.routes.guard import elapsed_ms, failure_label
from careertools.routes.health import router as health_router
from careertools.routes.insights import router as insights_router
from careertools.routes.keyword_extract import router as keyword_extract_router
from careertools.routes.linkedin_profile import router as linkedin_profile_router
from careertools.routes.resume_gap import router as resume_gap_router
from careertools.routes.security import router as security_router
from careertools.routes.skill_gap import router as skill_gap_router
from careertools.security.gate import request_gate
from careertools.security.store import MongoGateStore

# ─── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ─── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage startup and shutdown lifecycle.

    MongoDB is only opened when the gate is configured to share its state
    across instances. If it cannot be reached the gate keeps its in-memory
    store and the API still serves traffic.
    """
    logger.info("Starting careertools API (env: %s)", settings.environment)
    if settings.gate_store_backend == "mongo":
        await connect_to_mongo()
        if db_module.db_client.db is not None:
            store = MongoGateStore(db_module.db_client.db)
            await store.ensure_indexes()
            request_gate.store = store
            logger.info("Request Gate using MongoDB store")
    yield
    logger.info("Shutting down careertools API")
    await close_mongo_connection()


# ─── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="careertools API",
    description=(
        "AI career tools: keyword extraction, cover letters, resume and skill gap "
        "analysis, salary, roadmap, relocation and wellbeing insights, and LinkedIn "
        "profile drafts. Every tool request passes the Request Gate and a tiered rate limiter."
    ),
    version=APP_VERSION,
    lifespan=lifespan,
    # Disable docs in production to reduce attack surface
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
)


# ─── Rate limiting ─────────────────────────────────────────────────────────────
# slowapi covers the non-AI routes; tool routes use the tiered limiter via
# tool_guard and answer RateLimitDenied below.
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# ─── Error handlers ────────────────────────────────────────────────────────────
def _error_body(request: Request, error_type: str, message: str) -> dict:
    return {
        "error": f"{failure_label(request)} failed",
        "message": message,
        "type": error_type,
        "processingTime": elapsed_ms(request),
    }


async def _tool_error_handler(request: Request, exc: ToolError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s failed: %s (%s)", failure_label(request), exc.message, exc.error_type)
    headers = request_gate.cors_headers(request)
    if exc.retry_after is not None:
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse(
        _error_body(request, exc.error_type, exc.message),
        status_code=exc.status_code,
        headers=headers,
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = "Invalid request body"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        if first.get("type") == "missing":
            message = f"{field} is required"
        elif field:
            message = f"{field}: {first.get('msg', 'invalid value')}"
        else:
            message = first.get("msg", message)
    return JSONResponse(
        _error_body(request, "VALIDATION_ERROR", message),
        status_code=400,
        headers=request_gate.cors_headers(request),
    )


async def _security_rejected_handler(request: Request, exc: SecurityRejected) -> JSONResponse:
    return exc.response


async def _rate_limit_denied_handler(request: Request, exc: RateLimitDenied) -> JSONResponse:
    result = exc.result
    retry_after = result.retry_after or 0
    return JSONResponse(
        {
            "error": "RATE_LIMIT_EXCEEDED",
            "message": result.message,
            "tier": result.tier,
            "resetTime": result.reset_time.isoformat(),
            "retryAfter": retry_after,
            "processingTime": elapsed_ms(request),
        },
        status_code=429,
        headers={
            **request_gate.cors_headers(request),
            "X-RateLimit-Limit": str(result.limit),
            "X-RateLimit-Remaining": str(result.remaining),
            "X-RateLimit-Reset": result.reset_time.isoformat(),
            "Retry-After": str(retry_after),
        },
    )


app.add_exception_handler(ToolError, _tool_error_handler)
app.add_exception_handler(RequestValidationError, _validation_error_handler)
app.add_exception_handler(SecurityRejected, _security_rejected_handler)
app.add_exception_handler(RateLimitDenied, _rate_limit_denied_handler)


# ─── Middleware ─────────────────────────────────────────────────────────────────
# Times every request and stamps the security headers on every response,
# including error responses. Unexpected exceptions become UNKNOWN_ERROR here so
# callers never see a stack trace.
@app.middleware("http")
async def security_headers(request: Request, call_next):
    request.state.started_at = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        response = JSONResponse(
            _error_body(request, "UNKNOWN_ERROR", "Unknown error occurred"),
            status_code=500,
            headers=request_gate.cors_headers(request),
        )
    response.headers["Content-Security-Policy"] = request_gate.csp_header()
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


# ─── Routes ────────────────────────────────────────────────────────────────────
app.include_router(health_router, prefix="/health", tags=["health"])

# AI career tools
app.include_router(keyword_extract_router)
app.include_router(cover_letter_router)
app.include_router(resume_gap_router)
app.include_router(skill_gap_router)
app.include_router(insights_router)
app.include_router(linkedin_profile_router)

# Diagnostics
app.include_router(security_router)


@app.get("/", tags=["root"])
async def root():
    """API root — basic metadata."""
    return {
        "name": "careertools API",
        "version": APP_VERSION,
        "status": "running",
        "environment": settings.environment,
        "docs": "/docs" if settings.environment != "production" else None,
    }
