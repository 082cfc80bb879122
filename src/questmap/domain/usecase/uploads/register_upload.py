from __future__ import annotations

import logging
import mimetypes
import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from questmap.domain.models.quest.QuestModel import Quest
from questmap.domain.models.score.ScoreModel import ScoreRecord
from questmap.domain.models.upload.UploadModel import UploadRecord
from questmap.domain.usecase._shared import clean_user_id, ensure_quest
from questmap.domain.usecase.ports import (
    BadRequestError,
    MediaStore,
    MediaStoreError,
    QuestsRepo,
    ScoresRepo,
    UploadsRepo,
)
from questmap.domain.usecase.scores.record_score import record_score_best_effort

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from questmap.core.settings import Settings
    from questmap.services.media_resolver import MediaResolver

log = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[\s/\\]+")
_EXTENSION_RE = re.compile(r"^\.[A-Za-z0-9]{1,8}$")


def build_storage_key(user_id: str, filename: Optional[str], content_type: str) -> str:
    suffix = PurePosixPath(filename or "").suffix.lower()
    if not _EXTENSION_RE.fullmatch(suffix):
        suffix = mimetypes.guess_extension(content_type) or ""
    owner = _UNSAFE_KEY_CHARS.sub("_", user_id)
    return f"uploads/{owner}/{uuid4().hex}{suffix}"


@dataclass(slots=True)
class UploadOutcome:
    record: UploadRecord
    signed_url: Optional[str] = None
    auto_scored: Optional[bool] = None


@dataclass(slots=True)
class RegisterUpload:
    """Store an uploaded image and complete the photo mission it belongs to."""

    uploads_repo: UploadsRepo
    quests_repo: QuestsRepo
    scores_repo: ScoresRepo
    media_store: MediaStore
    media_resolver: "MediaResolver"
    settings: "Settings"

    async def execute(
        self,
        *,
        user_id: Optional[str],
        data: bytes,
        content_type: Optional[str],
        filename: Optional[str] = None,
        quest_id: Optional[int | str] = None,
    ) -> UploadOutcome:
        uid = clean_user_id(user_id)
        if uid is None:
            raise BadRequestError("user_id is required")
        if not data:
            raise BadRequestError("file is required")

        content_type = (content_type or "").split(";")[0].strip().lower()
        if not content_type.startswith("image/"):
            raise BadRequestError(
                f"Only image uploads are accepted, got {content_type or 'unknown'}"
            )
        if len(data) > self.settings.max_upload_bytes:
            raise BadRequestError(
                f"File exceeds the {self.settings.max_upload_bytes} byte limit"
            )

        quest: Quest | None = None
        if quest_id is not None and str(quest_id).strip():
            quest = await ensure_quest(self.quests_repo, quest_id)

        key = build_storage_key(uid, filename, content_type)
        await self.media_store.put_object(key, data, content_type)

        record = UploadRecord(
            user_id=uid,
            quest_id=quest.quest_id if quest else None,
            storage_key=key,
            public_url=self.settings.public_url_for(key),
            size_bytes=len(data),
            content_type=content_type,
        )
        try:
            await self.uploads_repo.add(record)
        except Exception:
            await self._discard_object(key)
            raise

        outcome = UploadOutcome(record=record)
        if quest is not None and quest.is_photo:
            outcome.auto_scored = await record_score_best_effort(
                self.scores_repo,
                ScoreRecord.for_photo(
                    quest, user_id=uid, answered_at=record.uploaded_at
                ),
                source="upload",
            )
        outcome.signed_url = await self.media_resolver.sign(key)
        return outcome

    async def _discard_object(self, key: str) -> None:
        """Remove an object whose upload record could not be written."""
        try:
            await self.media_store.delete_object(key)
        except MediaStoreError as exc:
            log.warning(
                "Could not remove orphaned upload object",
                extra={"storage_key": key},
                exc_info=exc,
            )
