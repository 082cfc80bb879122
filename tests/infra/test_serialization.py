from __future__ import annotations

from datetime import datetime, timedelta, timezone

from questmap.domain.models.quest.QuestModel import Quest, QuestType, Region
from questmap.domain.models.upload.UploadModel import UploadRecord
from questmap.infra.serialization import from_bson, to_bson


def test_to_bson_stores_naive_utc() -> None:
	kst = timezone(timedelta(hours=9))
	payload = to_bson({"at": datetime(2025, 5, 1, 18, 0, tzinfo=kst), "kind": QuestType.PHOTO})

	assert payload == {"at": datetime(2025, 5, 1, 9, 0), "kind": "photo"}


def test_from_bson_ignores_mongo_id_and_restores_aware_datetimes() -> None:
	quest = Quest.photo(quest_id=4, region=Region("Jeju", "Gujwa", "Sehwa"), question="Snap")
	doc = {"_id": "abc", **to_bson(quest)}

	restored = from_bson(Quest, doc)

	assert restored is not None
	assert restored.quest_id == 4
	assert restored.is_photo
	assert restored.created_at.tzinfo is timezone.utc


def test_from_bson_fills_defaults_and_optional_ints() -> None:
	restored = from_bson(
		UploadRecord,
		{
			"user_id": "u1",
			"storage_key": "k",
			"public_url": "u",
			"size_bytes": 3.0,
			"content_type": "image/png",
			"quest_id": 5.0,
		},
	)

	assert restored is not None
	assert restored.quest_id == 5 and isinstance(restored.quest_id, int)
	assert restored.size_bytes == 3
	assert len(restored.upload_id) == 32


def test_from_bson_none() -> None:
	assert from_bson(Quest, None) is None
