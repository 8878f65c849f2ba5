"""
rate_limit.py — Rate limiting for the career-tool endpoints.

Two limiters live here, both built on the `limits` library:

1. `rate_limiter` (RateLimiter) — the tiered, per-route budget every AI tool
   route checks after the Request Gate and before calling Gemini. Each route
   has three moving-window tiers checked in order:

       burst   a few requests per 10–20 seconds
       minute  requests per minute
       free    requests per hour (the figure shown in X-RateLimit-Limit)

   A request is counted against every tier only once all tiers admit it.
   The result carries remaining / reset / retry-after so the route can
   answer with a standard 429. Storage is chosen by URI
   (RATE_LIMIT_STORAGE_URI); any storage failure fails open.

2. `limiter` (slowapi) — plain decorator limits for the non-AI routes:

    @router.get("/api/security/metrics")
    @limiter.limit(settings.metrics_rate_limit)
    async def metrics(request: Request): ...

Both key requests by the same resolved client address as the gate.
"""

import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from limits import (
    RateLimitItem,
    RateLimitItemPerHour,
    RateLimitItemPerMinute,
    RateLimitItemPerSecond,
)
from limits.aio.strategies import MovingWindowRateLimiter
from limits.storage import storage_from_string
from slowapi import Limiter
from starlette.requests import Request

from careertools.core.config import settings
from careertools.security.client import resolve_client_address

logger = logging.getLogger(__name__)

# Most restrictive first.
TIERS = ("burst", "minute", "free")


@dataclass(frozen=True)
class RouteLimits:
    burst: RateLimitItem
    minute: RateLimitItem
    free: RateLimitItem

    def tier(self, name: str) -> RateLimitItem:
        return getattr(self, name)


DEFAULT_LIMITS = RouteLimits(
    burst=RateLimitItemPerSecond(2, 10),
    minute=RateLimitItemPerMinute(10),
    free=RateLimitItemPerHour(5),
)

ROUTE_LIMITS: dict[str, RouteLimits] = {
    "keyword-extract": DEFAULT_LIMITS,
    "cover-letter-generate": RouteLimits(
        burst=RateLimitItemPerSecond(1, 20),
        minute=RateLimitItemPerMinute(2),
        free=RateLimitItemPerHour(3),
    ),
    "resume-gap-analysis": RouteLimits(
        burst=RateLimitItemPerSecond(1, 15),
        minute=RateLimitItemPerMinute(3),
        free=RateLimitItemPerHour(4),
    ),
}


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_time: datetime
    limit: int
    tier: Optional[str] = None
    retry_after: Optional[int] = None
    message: Optional[str] = None


def limits_for(route_key: str) -> RouteLimits:
    return ROUTE_LIMITS.get(route_key, DEFAULT_LIMITS)


def _client_key(request: Request) -> str:
    return resolve_client_address(request, settings.trusted_proxies)


class RateLimiter:
    """Tiered per-route, per-client limiter on a `limits` moving window."""

    def __init__(self, storage_uri: str = "async+memory://") -> None:
        self.storage_uri = storage_uri
        self._connect()

    def _connect(self) -> None:
        self._storage = storage_from_string(self.storage_uri)
        self._strategy = MovingWindowRateLimiter(self._storage)

    async def reset(self) -> None:
        """Forget every counter (tests call this between cases)."""
        self._connect()

    async def check(self, request: Request, route_key: str) -> RateLimitResult:
        client = _client_key(request)
        route = limits_for(route_key)
        budget = route.free.amount

        try:
            for tier in TIERS:
                item = route.tier(tier)
                if not await self._strategy.test(item, route_key, tier, client):
                    reset_at, _ = await self._strategy.get_window_stats(item, route_key, tier, client)
                    retry_after = max(1, math.ceil(reset_at - time.time()))
                    logger.info("Rate limit hit: route=%s tier=%s client=%s", route_key, tier, client)
                    return RateLimitResult(
                        allowed=False,
                        remaining=0,
                        reset_time=datetime.fromtimestamp(reset_at, tz=timezone.utc),
                        limit=budget,
                        tier=tier,
                        retry_after=retry_after,
                        message=(
                            f"Rate limit exceeded for {tier} tier. "
                            f"{item.amount}/{item.amount} requests used. "
                            f"Try again in {_humanize(retry_after)}."
                        ),
                    )

            # test() then hit() is not atomic: with shared storage two
            # concurrent requests can both pass test() and overshoot a tier by one.
            remaining = []
            for tier in TIERS:
                item = route.tier(tier)
                await self._strategy.hit(item, route_key, tier, client)
                _, left = await self._strategy.get_window_stats(item, route_key, tier, client)
                remaining.append(left)
            reset_at, _ = await self._strategy.get_window_stats(route.free, route_key, "free", client)
        except Exception as exc:
            logger.error("Rate limiting storage error for %s: %s", route_key, exc)
            return RateLimitResult(
                allowed=True,
                remaining=budget - 1,
                reset_time=datetime.fromtimestamp(
                    time.time() + route.free.get_expiry(), tz=timezone.utc
                ),
                limit=budget,
                message="Rate limiting service temporarily unavailable",
            )

        return RateLimitResult(
            allowed=True,
            remaining=min(remaining),
            reset_time=datetime.fromtimestamp(reset_at, tz=timezone.utc),
            limit=budget,
            tier="allowed",
        )


def _humanize(seconds: int) -> str:
    if seconds < 60:
        return f"{seconds} second" + ("s" if seconds != 1 else "")
    minutes = math.ceil(seconds / 60)
    return f"{minutes} minute" + ("s" if minutes != 1 else "")


rate_limiter = RateLimiter(settings.rate_limit_storage_uri)

# Decorator-style limiter for non-AI routes. Attach in main.py:
#     app.state.limiter = limiter
#     app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
limiter = Limiter(key_func=_client_key)
