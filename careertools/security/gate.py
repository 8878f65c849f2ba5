"""
gate.py — Request Gate for the public career-tool endpoints.

Every tool route passes its request through RequestGate.validate_request()
before the rate limiter and before any AI call. The gate runs a fixed
sequence of header checks, records what it finds against the client's
address, and decides allow / deny:

  1. blocked address   → deny at once (one high "suspicious-activity" violation)
  2. origin / referer  → high if the origin is not on the allow-list
  3. user-agent        → medium if empty, high if it matches the denylist
  4. content-length    → medium if above the configured maximum (upload
                         routes may pass a larger ceiling)
  5. CSRF provenance   → medium if a state-changing request has neither
                         Origin nor Referer

Any high violation denies the request with a 403. Medium and low
violations are advisory: they are returned to the caller and counted
against the client. A client whose running count exceeds the threshold is
added to the blocked set and stays there even after its count expires.

The gate never raises on malformed headers. Missing or unparseable values
are treated as absent.
"""

import hashlib
import hmac
import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

from fastapi.responses import JSONResponse
from starlette.requests import Request

from careertools.core.config import settings
from careertools.security.client import resolve_client_address
from careertools.security.config import AI_API_ORIGIN, SecurityConfig
from careertools.security.store import GateStore, MemoryGateStore
from careertools.security.violations import (
    SecurityViolation,
    Severity,
    ViolationKind,
    is_blocking,
    utcnow,
)

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443}

# Methods that cannot change state and therefore skip the CSRF check.
_SAFE_METHODS = {"GET", "OPTIONS"}

_REJECTION_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

_CSP_DIRECTIVES = (
    "default-src 'self'",
    "script-src 'self' 'unsafe-inline' 'unsafe-eval'",
    "style-src 'self' 'unsafe-inline'",
    "img-src 'self' data: https:",
    "font-src 'self' data:",
    f"connect-src 'self' {AI_API_ORIGIN}",
    "frame-ancestors 'none'",
    "base-uri 'self'",
    "form-action 'self'",
)

_RECENT_VIOLATIONS_SHOWN = 20


@dataclass(frozen=True)
class GateResult:
    valid: bool
    violations: list[SecurityViolation] = field(default_factory=list)
    rejection: Optional[JSONResponse] = None


def _origin_of(url: Optional[str]) -> Optional[str]:
    """Origin ("scheme://host[:port]") of a Referer value, or None if unusable."""
    if not url:
        return None
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None

    scheme = parts.scheme.lower()
    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"
    origin = f"{scheme}://{host}"
    if port is not None and _DEFAULT_PORTS.get(scheme) != port:
        origin += f":{port}"
    return origin


def _content_length(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        length = int(value.strip())
    except ValueError:
        return None
    return length if length >= 0 else None


class RequestGate:
    """
    Allow / deny decisions plus the CORS and CSP headers for tool responses.

    State (blocked set, suspicion counts, violation log) lives in the
    injected GateStore. The clock is injectable so tests can age records.
    """

    def __init__(
        self,
        config: SecurityConfig,
        store: Optional[GateStore] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.config = config
        self.store = store if store is not None else MemoryGateStore()
        self._clock = clock

    # ── Validation ────────────────────────────────────────────────────────────

    async def validate_request(
        self, request: Request, max_request_size: Optional[int] = None
    ) -> GateResult:
        """Run the checks; *max_request_size* overrides the configured ceiling for upload routes."""
        now = self._clock()
        address = self.client_address(request)
        user_agent = request.headers.get("user-agent", "")

        if await self.store.is_blocked(address):
            violation = SecurityViolation(
                kind=ViolationKind.SUSPICIOUS_ACTIVITY,
                client_address=address,
                user_agent=user_agent,
                severity=Severity.HIGH,
                details={"reason": "blocked_ip"},
                observed_at=now,
            )
            return GateResult(
                valid=False,
                violations=[violation],
                rejection=self._rejection(request, "Access denied"),
            )

        origin = request.headers.get("origin") or None
        referer = request.headers.get("referer") or None
        referer_origin = _origin_of(referer)

        checks = [
            self._check_origin(address, user_agent, origin, referer, referer_origin, now),
            self._check_user_agent(address, user_agent, now),
            self._check_size(
                address, user_agent, request.headers.get("content-length"),
                max_request_size or self.config.max_request_size, now,
            ),
        ]
        if request.method.upper() not in _SAFE_METHODS:
            checks.append(self._check_csrf(address, user_agent, origin, referer_origin, now))
        violations = [v for v in checks if v is not None]

        # Expired records go first so a returning client starts a fresh count.
        await self.store.prune(now - self.config.retention)

        newly_blocked = False
        if violations:
            record = await self.store.record_violations(address, violations, now)
            if record.violation_count > self.config.block_threshold:
                await self.store.block(address, now)
                newly_blocked = True
                logger.warning(
                    "Client %s blocked after %d security violations",
                    address,
                    record.violation_count,
                )

        if newly_blocked or any(is_blocking(v) for v in violations):
            return GateResult(
                valid=False,
                violations=violations,
                rejection=self._rejection(request, "Security violation detected"),
            )
        return GateResult(valid=True, violations=violations)

    def _violation(self, kind, address, user_agent, severity, details, now) -> SecurityViolation:
        return SecurityViolation(
            kind=kind,
            client_address=address,
            user_agent=user_agent,
            severity=severity,
            details=details,
            observed_at=now,
        )

    def _check_origin(self, address, user_agent, origin, referer, referer_origin, now):
        allowed = self.config.cors_origins
        if origin is not None:
            if origin not in allowed:
                return self._violation(
                    ViolationKind.ORIGIN_MISMATCH, address, user_agent, Severity.HIGH,
                    {"origin": origin, "allowed": list(allowed)}, now,
                )
            return None

        if referer_origin is not None and referer_origin not in allowed:
            return self._violation(
                ViolationKind.ORIGIN_MISMATCH, address, user_agent, Severity.HIGH,
                {"referer": referer, "allowed": list(allowed)}, now,
            )
        return None

    def _check_user_agent(self, address, user_agent, now):
        if not user_agent:
            return self._violation(
                ViolationKind.USER_AGENT, address, user_agent, Severity.MEDIUM,
                {"reason": "missing_user_agent"}, now,
            )

        lowered = user_agent.lower()
        for signature in self.config.blocked_user_agents:
            if signature.lower() in lowered:
                return self._violation(
                    ViolationKind.USER_AGENT, address, user_agent, Severity.HIGH,
                    {"reason": "blocked_user_agent", "matched": signature}, now,
                )
        return None

    def _check_size(self, address, user_agent, raw_length, limit, now):
        # Only the declared length is judged; the body itself is not counted.
        length = _content_length(raw_length)
        if length is not None and length > limit:
            return self._violation(
                ViolationKind.OVERSIZED_BODY, address, user_agent, Severity.MEDIUM,
                {"size": length, "limit": limit}, now,
            )
        return None

    def _check_csrf(self, address, user_agent, origin, referer_origin, now):
        if not self.config.csrf_protection:
            return None
        if origin is None and referer_origin is None:
            return self._violation(
                ViolationKind.MISSING_CSRF_PROVENANCE, address, user_agent, Severity.MEDIUM,
                {"reason": "missing_origin_and_referer"}, now,
            )
        return None

    # ── Maintenance ───────────────────────────────────────────────────────────

    async def cleanup(self) -> None:
        """Drop expired log entries and suspicion records. Blocks are kept."""
        await self.store.prune(self._clock() - self.config.retention)

    async def reset(self) -> None:
        await self.store.reset()

    # ── Headers ───────────────────────────────────────────────────────────────

    def client_address(self, request: Request) -> str:
        return resolve_client_address(request, self.config.trusted_proxies)

    def cors_headers(self, request: Request) -> dict[str, str]:
        origin = request.headers.get("origin")
        if origin and origin in self.config.cors_origins:
            allowed_origin = origin
        else:
            allowed_origin = self.config.cors_origins[0] if self.config.cors_origins else "null"
        return {
            "Access-Control-Allow-Origin": allowed_origin,
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Requested-With",
            "Access-Control-Max-Age": "86400",
            "Vary": "Origin",
        }

    def csp_header(self) -> str:
        return "; ".join(_CSP_DIRECTIVES)

    def _rejection(self, request: Request, message: str) -> JSONResponse:
        return JSONResponse(
            {
                "error": "Security violation",
                "message": message,
                "timestamp": self._clock().isoformat(),
            },
            status_code=403,
            headers={**_REJECTION_HEADERS, **self.cors_headers(request)},
        )

    # ── Diagnostics ───────────────────────────────────────────────────────────

    async def security_metrics(self) -> dict[str, Any]:
        """Snapshot of recent violations and the blocked / suspicious sets."""
        now = self._clock()
        recent = await self.store.violations_since(now - self.config.retention)
        last_hour = [v for v in recent if v.observed_at > now - timedelta(hours=1)]
        suspicious = await self.store.suspicious_clients()

        return {
            "totalViolations24h": len(recent),
            "violationsLastHour": len(last_hour),
            "blockedAddresses": await self.store.blocked_addresses(),
            "suspiciousClients": [
                {
                    "clientAddress": address,
                    "violationCount": record.violation_count,
                    "firstSeenAt": record.first_seen_at.isoformat(),
                }
                for address, record in suspicious.items()
            ],
            "violationsByKind": dict(Counter(v.kind.value for v in recent)),
            "recentViolations": [v.to_dict() for v in recent[-_RECENT_VIOLATIONS_SHOWN:]],
            "generatedAt": now.isoformat(),
        }

    def request_signature(self, request: Request, secret: str) -> str:
        """HMAC-SHA256 over "address:user-agent:unix-seconds"."""
        payload = "{}:{}:{}".format(
            self.client_address(request),
            request.headers.get("user-agent", ""),
            int(time.time()),
        )
        return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


# Module-level singleton — the app and routes share one gate; main.py may
# swap its store for MongoGateStore at startup.
request_gate = RequestGate(SecurityConfig.from_settings(settings))
