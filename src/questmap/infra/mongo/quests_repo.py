from __future__ import annotations

from typing import Any, cast

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from questmap.domain.models.quest.QuestModel import (
    PHOTO_MISSION,
    Quest,
    QuestType,
    Region,
)
from questmap.infra.db import store_guard
from questmap.infra.serialization import from_bson, to_bson

Document = dict[str, Any]
MongoDatabase = AsyncIOMotorDatabase

_PHOTO_FILTER: Document = {
    "option_a": PHOTO_MISSION,
    "option_b": PHOTO_MISSION,
    "option_c": PHOTO_MISSION,
    "option_d": PHOTO_MISSION,
}


def type_filter(quest_type: QuestType) -> Document:
    if quest_type is QuestType.PHOTO:
        return dict(_PHOTO_FILTER)
    return {"$nor": [dict(_PHOTO_FILTER)]}


class QuestsRepoMongo:
    """Region catalog. Deleting a quest also deletes its score records."""

    def __init__(self, db: MongoDatabase) -> None:
        self._collection: Any = db["quests"]
        self._scores: Any = db["quest_scores"]

    async def ensure_indexes(self) -> None:
        await self._collection.create_index("quest_id", unique=True, name="uq_quest_id")
        await self._collection.create_index(
            [("city", ASCENDING), ("town", ASCENDING), ("village", ASCENDING)],
            name="ix_region",
        )

    async def get(self, quest_id: int) -> Quest | None:
        with store_guard("quest"):
            doc = await self._collection.find_one({"quest_id": quest_id})
        return from_bson(Quest, doc)

    async def sample(self, region: Region, quest_type: QuestType) -> Quest | None:
        pipeline = [
            {"$match": {**region.as_filter(), **type_filter(quest_type)}},
            {"$sample": {"size": 1}},
        ]
        with store_guard("quest"):
            docs = await self._collection.aggregate(pipeline).to_list(length=1)
        if not docs:
            return None
        return from_bson(Quest, cast(Document, docs[0]))

    async def list_regions(self) -> list[Region]:
        pipeline = [
            {
                "$group": {
                    "_id": {"city": "$city", "town": "$town", "village": "$village"}
                }
            },
            {"$sort": {"_id.city": 1, "_id.town": 1, "_id.village": 1}},
        ]
        with store_guard("quest"):
            docs = await self._collection.aggregate(pipeline).to_list(length=None)
        regions: list[Region] = []
        for doc in docs:
            key = doc["_id"]
            if not key.get("city"):
                continue
            regions.append(Region(key["city"], key.get("town"), key.get("village")))
        return regions

    async def list_photo_quests(self) -> list[Quest]:
        with store_guard("quest"):
            docs = await self._collection.find(type_filter(QuestType.PHOTO)).to_list(
                length=None
            )
        return [cast(Quest, from_bson(Quest, doc)) for doc in docs]

    async def upsert(self, quest: Quest) -> None:
        quest.validate()
        doc = to_bson(quest)
        with store_guard("quest"):
            await self._collection.replace_one(
                {"quest_id": quest.quest_id}, doc, upsert=True
            )

    async def delete(self, quest_id: int) -> bool:
        with store_guard("quest"):
            res = await self._collection.delete_one({"quest_id": quest_id})
            if res.deleted_count == 1:
                await self._scores.delete_many({"quest_id": quest_id})
        return res.deleted_count == 1
