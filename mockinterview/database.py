"""Database Configuration and Connection Management Module

This module handles MongoDB connectivity for the mock interview application. It
owns the process-wide motor client, hands out the configured database to route
dependencies, and creates the indexes the conversation store relies on.

Index contract:
- conversations.openKey is unique and sparse. openKey is only present while a
  conversation is active or paused, so at most one non-terminal conversation
  exists per (session, user) pair. A racing insert fails with DuplicateKeyError.
- conversations (user, createdAt desc) backs the newest-first listing.

Dependencies:
- motor: For async MongoDB interactions.
- pymongo: For index definitions.
- loguru: For logging operations.
- mockinterview.core.config: For connection settings.

Author: @kcaparas1630
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from loguru import logger
from mockinterview.core.config import get_settings

CONVERSATIONS_COLLECTION = "conversations"
SESSIONS_COLLECTION = "sessions"

_client: Optional[AsyncIOMotorClient] = None


def get_motor_client() -> AsyncIOMotorClient:
    """Return the shared motor client, creating it on first use."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = AsyncIOMotorClient(settings.mongodb_uri, tz_aware=True)
        logger.info("MongoDB client created")
    return _client


def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency returning the configured database.

    Example:
        @router.get("/conversations")
        async def list_conversations(db: AsyncIOMotorDatabase = Depends(get_database)):
            ...
    """
    return get_motor_client()[get_settings().mongodb_db_name]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the indexes the stores rely on.

    Raises:
        Exception: If index creation fails

    Note:
        This operation is idempotent - existing indexes won't be modified
    """
    try:
        conversations = db[CONVERSATIONS_COLLECTION]
        await conversations.create_index("openKey", unique=True, sparse=True, name="open_conversation_per_session_user")
        await conversations.create_index([("user", ASCENDING), ("createdAt", DESCENDING)], name="user_created_at")
        logger.info("Database indexes ensured")
    except Exception as e:
        logger.error(f"Error creating database indexes: {e}")
        raise


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB client closed")
