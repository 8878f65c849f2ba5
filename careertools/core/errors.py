"""
errors.py — Error taxonomy shared by the tool routes and the AI client.

Every failure a caller can see maps to one of these types. Route handlers
and the Gemini client raise them; the handlers registered in main.py turn
them into JSON bodies of the shape

    {"error": "<tool> failed", "message": "...", "type": "<TYPE>", "processingTime": <ms>}

with the CORS headers attached, so no failure path leaks a stack trace.

    VALIDATION_ERROR     400  caller can fix the input
    RATE_LIMIT_EXCEEDED  429  our limiter or the AI provider's quota
    CONFIG_ERROR         503  server-side secret missing
    API_ERROR            500  upstream AI call failed or returned junk
    UNKNOWN_ERROR        500  anything else
"""

from typing import Optional


class ToolError(Exception):
    """Base class for errors that are rendered as a JSON error body."""

    error_type: str = "UNKNOWN_ERROR"
    status_code: int = 500

    def __init__(self, message: str, *, retry_after: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.retry_after = retry_after


class ValidationFailed(ToolError):
    error_type = "VALIDATION_ERROR"
    status_code = 400


class ConfigError(ToolError):
    error_type = "CONFIG_ERROR"
    status_code = 503


class UpstreamAPIError(ToolError):
    error_type = "API_ERROR"
    status_code = 500


class UpstreamQuotaExceeded(ToolError):
    """The AI provider itself refused the call (HTTP 429 / ResourceExhausted).

    Distinct from our own limiter: the provider's free-tier quota resets on
    a schedule we cannot influence, so the message tells the user when to
    come back instead of retrying.
    """

    error_type = "RATE_LIMIT_EXCEEDED"
    status_code = 429


# ─── Pre-handler rejections ────────────────────────────────────────────────────
# Raised by the route guard before the tool runs. Their bodies differ from the
# ToolError shape, so main.py registers a handler for each.

class SecurityRejected(Exception):
    """The Request Gate denied the request; `response` is its 403."""

    def __init__(self, response) -> None:
        super().__init__("Security violation")
        self.response = response


class RateLimitDenied(Exception):
    """Our own tiered limiter denied the request; `result` says which tier."""

    def __init__(self, result) -> None:
        super().__init__(result.message or "Rate limit exceeded")
        self.result = result
