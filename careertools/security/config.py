"""
config.py — Immutable Request Gate configuration.

Resolved once from the settings singleton at startup and read-only
afterwards. Tests build their own instances directly.
"""

from dataclasses import dataclass
from datetime import timedelta

from careertools.core.config import Settings

# The one external host the pages and API are allowed to talk to.
AI_API_ORIGIN = "https://generativelanguage.googleapis.com"

DEFAULT_BLOCKED_USER_AGENTS = (
    "bot",
    "crawler",
    "spider",
    "scraper",
    "curl",
    "wget",
    "python-requests",
    "postman",
    "insomnia",
    "automated",
)


@dataclass(frozen=True)
class SecurityConfig:
    cors_origins: tuple[str, ...]
    max_request_size: int = 50_000
    csrf_protection: bool = True
    blocked_user_agents: tuple[str, ...] = DEFAULT_BLOCKED_USER_AGENTS
    trusted_proxies: tuple[str, ...] = ("127.0.0.1", "::1")
    block_threshold: int = 10
    retention: timedelta = timedelta(hours=24)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SecurityConfig":
        return cls(
            cors_origins=tuple(settings.cors_origins),
            max_request_size=settings.max_request_size,
            csrf_protection=settings.csrf_protection,
            blocked_user_agents=tuple(settings.blocked_user_agents),
            trusted_proxies=tuple(settings.trusted_proxies),
            block_threshold=settings.suspicious_block_threshold,
            retention=timedelta(hours=settings.security_retention_hours),
        )
