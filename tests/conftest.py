from __future__ import annotations

import os
import random
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Dict, List, Optional, Sequence, Tuple

import pytest

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/questmap_test")
os.environ.setdefault("S3_REGION", "us-east-1")
os.environ.setdefault("RECONCILE_ON_STARTUP", "false")

from questmap.core.settings import Settings, load_settings
from questmap.domain.models.quest.QuestModel import Quest, QuestType, Region
from questmap.domain.models.score.ScoreModel import ScoreRecord
from questmap.domain.models.upload.UploadModel import UploadRecord
from questmap.domain.usecase.ports import MediaStoreError, UnavailableError
from questmap.services.default_images import DefaultImageDirectory
from questmap.services.media_resolver import MediaResolver

T0 = datetime(2025, 11, 1, 9, 0, tzinfo=timezone.utc)


class InMemoryQuestsRepo:
    def __init__(self, quests: Sequence[Quest] = ()) -> None:
        self.store: Dict[int, Quest] = {q.quest_id: q for q in quests}
        self.rng = random.Random(7)
        self.sample_calls: List[Tuple[Dict[str, str], QuestType]] = []
        self.unavailable = False

    def _check(self) -> None:
        if self.unavailable:
            raise UnavailableError("quest store unavailable")

    async def get(self, quest_id: int) -> Optional[Quest]:
        self._check()
        return self.store.get(quest_id)

    async def sample(self, region: Region, quest_type: QuestType) -> Optional[Quest]:
        self._check()
        self.sample_calls.append((region.as_filter(), quest_type))
        matches = [
            q
            for q in self.store.values()
            if region.contains(q.region) and q.quest_type is quest_type
        ]
        return self.rng.choice(matches) if matches else None

    async def list_regions(self) -> List[Region]:
        self._check()
        return sorted(
            {q.region for q in self.store.values()},
            key=lambda r: (r.city, r.town or "", r.village or ""),
        )

    async def list_photo_quests(self) -> List[Quest]:
        self._check()
        return [q for q in self.store.values() if q.is_photo]

    async def upsert(self, quest: Quest) -> None:
        quest.validate()
        self.store[quest.quest_id] = quest

    async def delete(self, quest_id: int) -> bool:
        return self.store.pop(quest_id, None) is not None


class InMemoryScoresRepo:
    def __init__(self) -> None:
        self.records: Dict[Tuple[str, int], ScoreRecord] = {}
        self.insert_calls: List[ScoreRecord] = []
        self.fail_inserts = False
        self.unavailable = False

    async def insert_once(self, record: ScoreRecord) -> bool:
        self.insert_calls.append(record)
        if self.fail_inserts:
            raise UnavailableError("score store unavailable")
        key = (record.user_id, record.quest_id)
        if key in self.records:
            return False
        self.records[key] = record
        return True

    async def list_for_user(self, user_id: str) -> List[ScoreRecord]:
        if self.unavailable:
            raise UnavailableError("score store unavailable")
        rows = [r for (uid, _), r in self.records.items() if uid == user_id]
        return sorted(rows, key=lambda r: r.answered_at, reverse=True)


class InMemoryUploadsRepo:
    def __init__(self) -> None:
        self.records: List[UploadRecord] = []
        self.unavailable = False
        self.lookup_calls = 0

    async def add(self, record: UploadRecord) -> None:
        if self.unavailable:
            raise UnavailableError("upload store unavailable")
        self.records.append(record)

    async def latest_for_quests(
        self, user_id: str, quest_ids: Sequence[int]
    ) -> Dict[int, UploadRecord]:
        self.lookup_calls += 1
        if self.unavailable:
            raise UnavailableError("upload store unavailable")
        latest: Dict[int, UploadRecord] = {}
        for record in self.records:
            if record.user_id != user_id or record.quest_id not in quest_ids:
                continue
            current = latest.get(record.quest_id)  # type: ignore[arg-type]
            if current is None or record.uploaded_at > current.uploaded_at:
                latest[record.quest_id] = record  # type: ignore[index]
        return latest

    async def iter_quest_uploads(self) -> AsyncIterator[UploadRecord]:
        for record in sorted(self.records, key=lambda r: r.uploaded_at):
            if record.quest_id is not None:
                yield record


class FakeMediaStore:
    def __init__(self, keys: Sequence[str] = ()) -> None:
        self.objects: Dict[str, Tuple[bytes, str]] = {k: (b"img", "image/jpeg") for k in keys}
        self.list_calls = 0
        self.sign_calls: List[Tuple[str, int]] = []
        self.fail_list = False
        self.fail_put = False
        self.fail_delete = False
        self.delete_calls: List[str] = []
        self.unsignable: set[str] = set()

    async def put_object(self, key: str, data: bytes, content_type: str) -> None:
        if self.fail_put:
            raise MediaStoreError(f"Could not store {key}")
        self.objects[key] = (data, content_type)

    async def delete_object(self, key: str) -> None:
        self.delete_calls.append(key)
        if self.fail_delete:
            raise MediaStoreError(f"Could not delete {key}")
        self.objects.pop(key, None)

    async def list_keys(self, prefix: str) -> List[str]:
        self.list_calls += 1
        if self.fail_list:
            raise MediaStoreError(f"Could not list {prefix}")
        return [k for k in self.objects if k.startswith(prefix)]

    async def signed_url(self, key: str, expires_in: int) -> str:
        self.sign_calls.append((key, expires_in))
        if key not in self.objects or key in self.unsignable:
            raise MediaStoreError(f"Object not found: {key}")
        return f"https://signed.example/{key}?expires={expires_in}"


def question_quest(quest_id: int, region: Region, correct: str = "B", question: str = "") -> Quest:
    return Quest(
        quest_id=quest_id,
        city=region.city,
        town=region.town,
        village=region.village,
        question=question or f"Question {quest_id}",
        option_a=f"{quest_id}-a",
        option_b=f"{quest_id}-b",
        option_c=f"{quest_id}-c",
        option_d=f"{quest_id}-d",
        correct_answer=correct,
    )


WOLJEONG = Region("Jeju", "Aewol", "Woljeong")
SEHWA = Region("Jeju", "Gujwa", "Sehwa")
SEOGWI = Region("Seogwipo", "Seogwi")


@pytest.fixture
def catalog() -> List[Quest]:
    return [
        question_quest(1, WOLJEONG, correct="B"),
        question_quest(2, WOLJEONG, correct="C"),
        question_quest(3, SEHWA, correct="B"),
        Quest.photo(quest_id=4, region=SEHWA, question="Photograph Sehwa beach"),
        Quest.photo(quest_id=5, region=SEOGWI, question="Photograph Jeongbang falls"),
    ]


@pytest.fixture
def quests_repo(catalog: List[Quest]) -> InMemoryQuestsRepo:
    return InMemoryQuestsRepo(catalog)


@pytest.fixture
def scores_repo() -> InMemoryScoresRepo:
    return InMemoryScoresRepo()


@pytest.fixture
def uploads_repo() -> InMemoryUploadsRepo:
    return InMemoryUploadsRepo()


@pytest.fixture
def media_store() -> FakeMediaStore:
    return FakeMediaStore(
        ["defaults/default_2.jpg", "defaults/default_1.png", "defaults/readme.txt"]
    )


@pytest.fixture
def settings() -> Settings:
    return replace(
        load_settings(),
        s3_bucket="test-bucket",
        media_public_base_url="https://media.example",
        max_upload_bytes=1024,
        signed_url_ttl_seconds=120,
    )


@pytest.fixture
def default_images(media_store: FakeMediaStore) -> DefaultImageDirectory:
    return DefaultImageDirectory(media_store=media_store, prefix="defaults/")


@pytest.fixture
def media_resolver(
    uploads_repo: InMemoryUploadsRepo,
    default_images: DefaultImageDirectory,
    media_store: FakeMediaStore,
    settings: Settings,
) -> MediaResolver:
    return MediaResolver(
        uploads_repo=uploads_repo,
        default_images=default_images,
        media_store=media_store,
        signed_url_ttl=settings.signed_url_ttl_seconds,
        max_default_slots=settings.default_image_slots,
    )


@pytest.fixture
def answered_at():
    """Clock helper: ``answered_at(n)`` is ``n`` minutes after a fixed start."""

    def _at(minutes: int) -> datetime:
        return T0 + timedelta(minutes=minutes)

    return _at


@pytest.fixture
def make_question_quest():
    return question_quest
