"""
violations.py — Security violation records and the blocking policy.

A SecurityViolation is created while a request is validated and is never
mutated afterwards. Whether a violation blocks the request is decided in
exactly one place, is_blocking().
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ViolationKind(str, Enum):
    ORIGIN_MISMATCH = "origin-mismatch"
    USER_AGENT = "missing-or-blocked-user-agent"
    OVERSIZED_BODY = "oversized-body"
    MISSING_CSRF_PROVENANCE = "missing-csrf-provenance"
    SUSPICIOUS_ACTIVITY = "suspicious-activity"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SecurityViolation:
    kind: ViolationKind
    client_address: str
    user_agent: str
    severity: Severity
    details: dict[str, Any] = field(default_factory=dict)
    observed_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "clientAddress": self.client_address,
            "userAgent": self.user_agent,
            "severity": self.severity.value,
            "details": dict(self.details),
            "observedAt": self.observed_at.isoformat(),
        }


def is_blocking(violation: SecurityViolation) -> bool:
    """High-severity violations reject the request; the rest are advisory."""
    return violation.severity is Severity.HIGH
