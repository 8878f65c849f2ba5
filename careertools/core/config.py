"""
Application configuration loaded from environment variables.

Uses pydantic-settings for type-safe env var parsing with automatic
.env file loading. All secrets are injected via environment — never
hard-coded.

To extend: add new fields here and document them in .env.example.
See https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

APP_VERSION = "0.1.0"


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    # ─── Core ──────────────────────────────────────────────────────
    environment: str = "development"
    debug: bool = False

    # ─── CORS ──────────────────────────────────────────────────────
    # Comma-separated production origins of the marketing site.
    # The local dev origin is appended everywhere except production.
    site_origins_str: str = "https://prosumely.com,https://www.prosumely.com"
    dev_origin: str = "http://localhost:3000"

    @property
    def cors_origins(self) -> list[str]:
        origins = _split(self.site_origins_str)
        if self.environment != "production" and self.dev_origin not in origins:
            origins.append(self.dev_origin)
        return origins

    # ─── Request gate ──────────────────────────────────────────────
    max_request_size: int = 50_000  # bytes, judged from Content-Length
    csrf_protection: bool = True
    blocked_user_agents_str: str = (
        "bot,crawler,spider,scraper,curl,wget,python-requests,postman,insomnia,automated"
    )
    trusted_proxies_str: str = "127.0.0.1,::1"
    suspicious_block_threshold: int = 10
    security_retention_hours: int = 24

    # "memory" keeps gate state in-process; "mongo" shares it across instances.
    gate_store_backend: str = "memory"

    @property
    def blocked_user_agents(self) -> list[str]:
        return [ua.lower() for ua in _split(self.blocked_user_agents_str)]

    @property
    def trusted_proxies(self) -> list[str]:
        return _split(self.trusted_proxies_str)

    # ─── MongoDB ───────────────────────────────────────────────────
    # Only used when gate_store_backend == "mongo".
    mongo_uri: str = "mongodb://localhost:27017/careertools"
    mongo_db_name: str = "careertools"

    # ─── Rate limiting ─────────────────────────────────────────────
    # Any storage URI understood by the `limits` library, e.g.
    # "async+mongodb://host:27017" in production.
    rate_limit_storage_uri: str = "async+memory://"
    metrics_rate_limit: str = "30/minute"

    # Shared secret for GET /api/security/metrics. Empty disables the route.
    metrics_token: str = ""

    # ─── AI ────────────────────────────────────────────────────────
    # Get from https://aistudio.google.com/
    gemini_api_key: str = ""

    # When True, all AI calls return canned mock responses.
    # Always True in tests; set False in production with a real key.
    ai_mock_mode: bool = True

    # Client-side bound on a single Gemini call.
    gemini_timeout_seconds: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Don't fail on unknown env vars
    )


# Module-level singleton — import this everywhere instead of instantiating Settings()
settings = Settings()
