from __future__ import annotations

from typing import Any, cast

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from questmap.domain.models.score.ScoreModel import ScoreRecord
from questmap.infra.db import store_guard
from questmap.infra.serialization import from_bson, to_bson

MongoDatabase = AsyncIOMotorDatabase


class ScoresRepoMongo:
    """Append-only score ledger, one document per (user_id, quest_id)."""

    def __init__(self, db: MongoDatabase) -> None:
        self._collection: Any = db["quest_scores"]

    async def ensure_indexes(self) -> None:
        await self._collection.create_index(
            [("user_id", ASCENDING), ("quest_id", ASCENDING)],
            unique=True,
            name="uq_user_quest",
        )
        await self._collection.create_index(
            [("user_id", ASCENDING), ("answered_at", DESCENDING)],
            name="ix_user_answered_at",
        )
        await self._collection.create_index("quest_id", name="ix_quest_id")

    async def insert_once(self, record: ScoreRecord) -> bool:
        """Insert unless the pair already exists. True only if this call wrote it."""
        doc = to_bson(record)
        filter_doc = {"user_id": doc["user_id"], "quest_id": doc["quest_id"]}
        with store_guard("score"):
            try:
                result = await self._collection.update_one(
                    filter_doc, {"$setOnInsert": doc}, upsert=True
                )
            except DuplicateKeyError:
                # Lost a concurrent upsert race; the other writer's record stands.
                return False
        return result.upserted_id is not None

    async def list_for_user(self, user_id: str) -> list[ScoreRecord]:
        cursor = self._collection.find({"user_id": user_id}).sort(
            [("answered_at", DESCENDING), ("_id", DESCENDING)]
        )
        with store_guard("score"):
            docs = await cursor.to_list(length=None)
        return [cast(ScoreRecord, from_bson(ScoreRecord, doc)) for doc in docs]
