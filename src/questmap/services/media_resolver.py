from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from questmap.domain.models.score.ScoreModel import ScoreRecord
from questmap.domain.usecase.ports import MediaStore, UploadsRepo
from questmap.services.default_images import DefaultImageDirectory

SOURCE_UPLOAD = "upload"
SOURCE_DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ResolvedImage:
    url: Optional[str] = None
    source: Optional[str] = None
    storage_key: Optional[str] = None


class MediaResolver:
    """Attach a freshly signed image URL to each history entry.

    The user's latest upload for the quest wins; otherwise the next default
    image is handed out, at most ``max_default_slots`` per listing. Stored
    URLs are never returned, every URL is signed at response time.
    """

    def __init__(
        self,
        *,
        uploads_repo: UploadsRepo,
        default_images: DefaultImageDirectory,
        media_store: MediaStore,
        signed_url_ttl: int = 300,
        max_default_slots: int = 3,
        logger: logging.Logger | None = None,
    ) -> None:
        self._uploads = uploads_repo
        self._defaults = default_images
        self._store = media_store
        self._ttl = signed_url_ttl
        self._slots = max_default_slots
        self._log = logger or logging.getLogger(__name__)

    async def sign(self, storage_key: str) -> Optional[str]:
        """Return a signed URL, or None when the key cannot be signed."""
        try:
            return await self._store.signed_url(storage_key, self._ttl)
        except Exception as exc:
            self._log.warning(
                "Signed URL generation failed",
                extra={"storage_key": storage_key},
                exc_info=exc,
            )
            return None

    async def resolve(
        self, user_id: str, records: Sequence[ScoreRecord]
    ) -> list[ResolvedImage]:
        """Resolve one image per record, preserving the order of ``records``."""
        if not records:
            return []

        try:
            uploads = await self._uploads.latest_for_quests(
                user_id, [record.quest_id for record in records]
            )
        except Exception as exc:
            self._log.warning(
                "Upload lookup failed; history served without images",
                extra={"user_id": user_id},
                exc_info=exc,
            )
            return [ResolvedImage() for _ in records]

        defaults: list[str] = []
        if any(record.quest_id not in uploads for record in records):
            listing = await self._defaults.list_default_images()
            defaults = listing[: self._slots]

        planned: list[tuple[Optional[str], Optional[str]]] = []
        next_slot = 0
        for record in records:
            upload = uploads.get(record.quest_id)
            if upload is not None:
                planned.append((upload.storage_key, SOURCE_UPLOAD))
            elif next_slot < len(defaults):
                planned.append((defaults[next_slot], SOURCE_DEFAULT))
                next_slot += 1
            else:
                planned.append((None, None))

        urls = await asyncio.gather(
            *(self._sign_planned(key) for key, _ in planned)
        )

        resolved: list[ResolvedImage] = []
        for (key, source), url in zip(planned, urls):
            if url is None:
                resolved.append(ResolvedImage(storage_key=key))
            else:
                resolved.append(ResolvedImage(url=url, source=source, storage_key=key))
        return resolved

    async def _sign_planned(self, storage_key: Optional[str]) -> Optional[str]:
        if storage_key is None:
            return None
        return await self.sign(storage_key)
