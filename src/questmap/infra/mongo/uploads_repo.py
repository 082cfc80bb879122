from __future__ import annotations

from typing import Any, AsyncIterator, Sequence, cast

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from questmap.domain.models.upload.UploadModel import UploadRecord
from questmap.infra.db import store_guard
from questmap.infra.serialization import from_bson, to_bson

MongoDatabase = AsyncIOMotorDatabase


class UploadsRepoMongo:
    def __init__(self, db: MongoDatabase) -> None:
        self._collection: Any = db["uploads"]

    async def ensure_indexes(self) -> None:
        await self._collection.create_index("upload_id", unique=True, name="uq_upload_id")
        await self._collection.create_index(
            [
                ("user_id", ASCENDING),
                ("quest_id", ASCENDING),
                ("uploaded_at", DESCENDING),
            ],
            name="ix_user_quest_uploaded_at",
        )

    async def add(self, record: UploadRecord) -> None:
        with store_guard("upload"):
            await self._collection.insert_one(to_bson(record))

    async def latest_for_quests(
        self, user_id: str, quest_ids: Sequence[int]
    ) -> dict[int, UploadRecord]:
        """Most recent upload per quest for one user, in a single round trip."""
        if not quest_ids:
            return {}
        pipeline = [
            {"$match": {"user_id": user_id, "quest_id": {"$in": list(quest_ids)}}},
            {"$sort": {"uploaded_at": -1, "_id": -1}},
            {"$group": {"_id": "$quest_id", "doc": {"$first": "$$ROOT"}}},
        ]
        with store_guard("upload"):
            docs = await self._collection.aggregate(pipeline).to_list(length=None)
        return {
            int(doc["_id"]): cast(UploadRecord, from_bson(UploadRecord, doc["doc"]))
            for doc in docs
        }

    async def iter_quest_uploads(self) -> AsyncIterator[UploadRecord]:
        """Uploads attached to a quest, oldest first."""
        cursor = self._collection.find({"quest_id": {"$ne": None}}).sort(
            [("uploaded_at", ASCENDING), ("_id", ASCENDING)]
        )
        with store_guard("upload"):
            async for doc in cursor:
                yield cast(UploadRecord, from_bson(UploadRecord, doc))
