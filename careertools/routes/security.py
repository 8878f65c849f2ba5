"""
Security diagnostics endpoint.

  GET /api/security/metrics — snapshot of the Request Gate's state: recent
                              violations, blocked and suspicious clients.

Operator-only. Callers must send the configured METRICS_TOKEN in the
X-Metrics-Token header; with no token configured the route does not exist
(404). Limited per client by slowapi on top of that.
"""

import hmac

from fastapi import APIRouter, HTTPException, Request

from careertools.core.config import settings
from careertools.core.rate_limit import limiter
from careertools.security.gate import request_gate

router = APIRouter(tags=["security"])


@router.get("/api/security/metrics", summary="Request Gate diagnostics")
@limiter.limit(settings.metrics_rate_limit)
async def security_metrics(request: Request):
    if not settings.metrics_token:
        raise HTTPException(status_code=404, detail="Not Found")

    supplied = request.headers.get("x-metrics-token", "")
    if not hmac.compare_digest(supplied.encode("utf-8"), settings.metrics_token.encode("utf-8")):
        raise HTTPException(status_code=403, detail="Invalid metrics token")

    return await request_gate.security_metrics()
