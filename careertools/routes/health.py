"""
Health check endpoint.

Used by the load balancer and uptime monitors. Returns 200 whenever the
process is alive, with enough detail to tell "API down" apart from
"MongoDB unreachable" or "AI running in mock mode".
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from careertools.ai.gemini_client import gemini_client
from careertools.core import database as db_module
from careertools.core.config import APP_VERSION, settings

logger = logging.getLogger(__name__)
router = APIRouter()


class HealthResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str       # Always "ok" if the API process is alive
    version: str
    database: str     # "connected" | "disconnected" | "not configured"
    environment: str
    ai_mode: str      # "mock" | "live" | "unconfigured"


@router.get("", response_model=HealthResponse, response_model_by_alias=True, summary="API health check")
async def health_check() -> HealthResponse:
    db_status = "not configured"
    if settings.gate_store_backend == "mongo":
        db_status = "disconnected"
        try:
            # Access via module reference so tests can patch db_module.db_client
            if db_module.db_client.client is not None:
                await db_module.db_client.client.admin.command("ping")
                db_status = "connected"
        except Exception as exc:
            logger.warning("DB ping failed: %s", exc)

    if gemini_client.mock_mode:
        ai_mode = "mock"
    elif gemini_client.configured:
        ai_mode = "live"
    else:
        ai_mode = "unconfigured"

    return HealthResponse(
        status="ok",
        version=APP_VERSION,
        database=db_status,
        environment=settings.environment,
        ai_mode=ai_mode,
    )
