# tests/integration/conftest.py
from __future__ import annotations

import pytest
import pytest_asyncio
from motor.motor_asyncio import AsyncIOMotorClient
from testcontainers.mongodb import MongoDbContainer

TEST_DB = "questmap_test"


@pytest.fixture(scope="session")
def mongo_uri():
    """Start MongoDB in a container for the session; skip when Docker is missing."""
    container = MongoDbContainer("mongo:7.0")
    try:
        container.start()
    except Exception as exc:
        pytest.skip(f"MongoDB container unavailable: {exc}")
    try:
        yield container.get_connection_url()
    finally:
        container.stop()


@pytest_asyncio.fixture
async def mongo_db(mongo_uri):
    # A client per test keeps Motor on the test's own event loop.
    client = AsyncIOMotorClient(mongo_uri, tz_aware=True, uuidRepresentation="standard")
    await client.drop_database(TEST_DB)
    yield client[TEST_DB]
    await client.drop_database(TEST_DB)
    client.close()
