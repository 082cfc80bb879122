# questmap/infra/db.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from questmap.domain.usecase.ports import UnavailableError
from questmap.infra.settings import (
    DB_NAME,
    MONGO_APPNAME,
    MONGO_OP_TIMEOUT_MS,
    MONGO_SERVER_SELECTION_TIMEOUT_MS,
    MONGODB_URI,
)

log = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None


def get_client() -> AsyncIOMotorClient:
    """Return a cached AsyncIOMotorClient (lazy init)."""
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(
            MONGODB_URI,
            appname=MONGO_APPNAME,
            serverSelectionTimeoutMS=MONGO_SERVER_SELECTION_TIMEOUT_MS,
            socketTimeoutMS=MONGO_OP_TIMEOUT_MS,
            connectTimeoutMS=MONGO_OP_TIMEOUT_MS,
            tz_aware=True,
            uuidRepresentation="standard",
        )
    return _client


def get_db() -> AsyncIOMotorDatabase:
    return get_client()[DB_NAME]


async def ping() -> bool:
    try:
        await get_client().admin.command("ping")
        return True
    except PyMongoError as e:
        log.warning("Mongo ping failed: %s", e)
        return False


@contextmanager
def store_guard(what: str) -> Iterator[None]:
    """Translate driver failures into the domain's UnavailableError."""
    try:
        yield
    except PyMongoError as exc:
        raise UnavailableError(f"{what} store unavailable") from exc


async def close_client() -> None:
    """Close the cached client (useful for app shutdown / tests)."""
    global _client
    if _client is not None:
        _client.close()
        _client = None
