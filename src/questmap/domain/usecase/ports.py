from __future__ import annotations

from typing import Any, AsyncIterator, Mapping, Optional, Protocol, Sequence

from questmap.domain.models.quest.QuestModel import Quest, QuestType, Region
from questmap.domain.models.score.ScoreModel import ScoreRecord
from questmap.domain.models.upload.UploadModel import UploadRecord


class BadRequestError(ValueError):
    """A required input is missing or malformed."""


class NotFoundError(LookupError):
    """The requested quest, user history or object does not exist."""

    def __init__(self, message: str, *, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.details = dict(details or {})


class UnavailableError(RuntimeError):
    """A backing store could not be reached."""


class MediaStoreError(UnavailableError):
    """The object store rejected or failed a request (missing key, timeout, ...)."""


class QuestsRepo(Protocol):
    async def get(self, quest_id: int) -> Quest | None: ...

    async def sample(self, region: Region, quest_type: QuestType) -> Quest | None: ...

    async def list_regions(self) -> list[Region]: ...

    async def list_photo_quests(self) -> list[Quest]: ...

    async def upsert(self, quest: Quest) -> None: ...

    async def delete(self, quest_id: int) -> bool: ...


class ScoresRepo(Protocol):
    async def insert_once(self, record: ScoreRecord) -> bool: ...

    async def list_for_user(self, user_id: str) -> list[ScoreRecord]: ...


class UploadsRepo(Protocol):
    async def add(self, record: UploadRecord) -> None: ...

    async def latest_for_quests(
        self, user_id: str, quest_ids: Sequence[int]
    ) -> dict[int, UploadRecord]: ...

    def iter_quest_uploads(self) -> AsyncIterator[UploadRecord]: ...


class MediaStore(Protocol):
    async def put_object(self, key: str, data: bytes, content_type: str) -> None: ...

    async def delete_object(self, key: str) -> None: ...

    async def list_keys(self, prefix: str) -> list[str]: ...

    async def signed_url(self, key: str, expires_in: int) -> str: ...
