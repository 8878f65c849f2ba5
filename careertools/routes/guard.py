"""
guard.py — Shared plumbing for the AI tool routes.

Every tool route is protected the same way:

    @router.post("/api/keyword-extract")
    async def keyword_extract(
        request: Request,
        payload: KeywordExtractRequest,
        limit: RateLimitResult = Depends(tool_guard("keyword-extract", "Keyword extraction")),
    ): ...

FastAPI resolves the guard dependency before it reports body validation
errors, so a blocked or over-limit client gets its 403 / 429 without the
body ever being looked at. The guard:

  1. labels the request so error handlers can say "<Tool> failed"
  2. runs the Request Gate (403 via SecurityRejected); upload routes pass
     their own max_request_size
  3. logs advisory violations
  4. checks the tiered rate limiter (429 via RateLimitDenied)

and hands the RateLimitResult to the route for the success headers.
"""

import logging
import time
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from careertools.core.errors import RateLimitDenied, SecurityRejected
from careertools.core.rate_limit import RateLimitResult, rate_limiter
from careertools.security.gate import request_gate

logger = logging.getLogger(__name__)


def elapsed_ms(request: Request) -> int:
    """Milliseconds since the timing middleware saw the request."""
    started = getattr(request.state, "started_at", None)
    if started is None:
        return 0
    return int((time.perf_counter() - started) * 1000)


def failure_label(request: Request) -> str:
    return getattr(request.state, "failure_label", "Request")


def tool_guard(route_key: str, label: str, max_request_size: Optional[int] = None):
    async def guard(request: Request) -> RateLimitResult:
        request.state.failure_label = label

        gate = await request_gate.validate_request(request, max_request_size=max_request_size)
        if not gate.valid:
            raise SecurityRejected(gate.rejection)
        for violation in gate.violations:
            logger.info(
                "Advisory %s violation from %s on %s",
                violation.kind.value,
                violation.client_address,
                route_key,
            )

        limit = await rate_limiter.check(request, route_key)
        if not limit.allowed:
            raise RateLimitDenied(limit)
        return limit

    return guard


def preflight(request: Request) -> Response:
    """CORS preflight answer: 200, no body."""
    return Response(status_code=200, headers=request_gate.cors_headers(request))


def tool_response(request: Request, body: dict, limit: RateLimitResult) -> JSONResponse:
    took = elapsed_ms(request)
    return JSONResponse(
        {**body, "processingTime": took, "success": True},
        headers={
            **request_gate.cors_headers(request),
            "X-RateLimit-Remaining": str(limit.remaining),
            "X-Processing-Time": str(took),
        },
    )
