"""
MongoDB connection management using Motor (async driver).

Only opened when GATE_STORE_BACKEND=mongo: the Request Gate then keeps its
blocked set, suspicion counts and violation log in MongoDB so every
instance of the API agrees on who is blocked. With the default in-memory
gate store the API never touches MongoDB.

The connection is opened in FastAPI's lifespan (startup) and closed
on shutdown.
"""

import logging
import re

import certifi
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from careertools.core.config import settings

logger = logging.getLogger(__name__)


class DatabaseClient:
    """
    Holds the Motor client and selected database.

    A class rather than bare globals so tests can safely replace
    .client and .db.
    """

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None


# Module-level singleton — all app code references this object
db_client = DatabaseClient()


async def connect_to_mongo() -> None:
    """
    Create the MongoDB connection and validate it with a ping.

    Fails soft: when MongoDB is unreachable the client stays None and the
    caller keeps the in-memory gate store.
    """
    logger.info("Connecting to MongoDB at %s", _redact_uri(settings.mongo_uri))
    # Timestamps come back timezone-aware, matching the in-memory store.
    options = {"serverSelectionTimeoutMS": 5000, "tz_aware": True}
    if settings.mongo_uri.startswith("mongodb+srv://"):
        # Atlas TLS: use certifi's CA bundle rather than the system store.
        options["tlsCAFile"] = certifi.where()
    try:
        db_client.client = AsyncIOMotorClient(settings.mongo_uri, **options)
        db_client.db = db_client.client[settings.mongo_db_name]
        await db_client.client.admin.command("ping")
        logger.info("MongoDB connection established (db: %s)", settings.mongo_db_name)
    except Exception as exc:
        logger.warning(
            "MongoDB unavailable at startup: %s. Falling back to in-memory gate state.",
            exc,
        )
        db_client.client = None
        db_client.db = None


async def close_mongo_connection() -> None:
    """Close the MongoDB connection gracefully on app shutdown."""
    if db_client.client is not None:
        db_client.client.close()
        logger.info("MongoDB connection closed")


def _redact_uri(uri: str) -> str:
    """Strip credentials from URI before logging."""
    return re.sub(r"://[^:]+:[^@]+@", "://<redacted>@", uri)
