"""
Database connection
"""

import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from novel_api.core.config import settings
from novel_api.core.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

# One client per process; MongoClient pools connections and is thread safe.
_client: Optional[MongoClient] = None


def connect() -> MongoClient:
    """Create the shared client and make sure the server answers"""
    global _client
    if _client is not None:
        return _client

    client = MongoClient(
        settings.DATABASE_URL,
        serverSelectionTimeoutMS=settings.DB_TIMEOUT_MS,
        tz_aware=True,
    )
    try:
        client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        raise StoreUnavailable(f"Could not connect to MongoDB: {e}") from e

    _client = client
    logger.info(f"Connected to MongoDB database '{settings.DB_NAME}'")
    return _client


def close() -> None:
    """Close the shared client"""
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB connection closed")


def get_client() -> MongoClient:
    if _client is None:
        raise StoreUnavailable("Database client is not initialised")
    return _client


# Database dependency
def get_db() -> Database:
    """Database dependency"""
    return get_client()[settings.DB_NAME]


def novels_collection(db: Database) -> Collection:
    return db[settings.COLLECTION_NAME]


def users_collection(db: Database) -> Collection:
    return db[settings.USERS_COLLECTION]


def comments_collection(db: Database) -> Collection:
    return db[settings.COMMENTS_COLLECTION]


def ping(db: Database) -> bool:
    """Database connection check"""
    try:
        db.command("ping")
        return True
    except PyMongoError as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False
