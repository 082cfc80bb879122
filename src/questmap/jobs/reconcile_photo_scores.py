"""Startup backfill of score records for photo uploads that predate them."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from questmap.domain.models.score.ScoreModel import ScoreRecord
from questmap.domain.usecase.ports import QuestsRepo, ScoresRepo, UploadsRepo


@dataclass(slots=True)
class ReconcileStats:
    scanned: int = 0
    inserted: int = 0
    skipped: int = 0
    failed: int = 0


class ReconcilePhotoScores:
    """Give every photo-quest upload its score record, oldest upload first.

    Uses the same write-once insert as the live upload path, so running it
    again only produces skips. Failures are logged per upload and never
    raised.
    """

    def __init__(
        self,
        *,
        quests_repo: QuestsRepo,
        uploads_repo: UploadsRepo,
        scores_repo: ScoresRepo,
        logger: logging.Logger | None = None,
    ) -> None:
        self._quests = quests_repo
        self._uploads = uploads_repo
        self._scores = scores_repo
        self._log = logger or logging.getLogger(__name__)

    async def run(self) -> ReconcileStats:
        stats = ReconcileStats()
        try:
            photo_quests = {
                quest.quest_id: quest for quest in await self._quests.list_photo_quests()
            }
        except Exception as exc:
            self._log.warning(
                "Photo score reconciliation skipped: quest catalog unavailable",
                exc_info=exc,
            )
            return stats

        try:
            async for upload in self._uploads.iter_quest_uploads():
                stats.scanned += 1
                quest = photo_quests.get(upload.quest_id)  # type: ignore[arg-type]
                if quest is None:
                    stats.skipped += 1
                    continue
                record = ScoreRecord.for_photo(
                    quest, user_id=upload.user_id, answered_at=upload.uploaded_at
                )
                try:
                    inserted = await self._scores.insert_once(record)
                except Exception as exc:
                    stats.failed += 1
                    self._log.warning(
                        "Photo score backfill failed",
                        extra={
                            "upload_id": upload.upload_id,
                            "user_id": upload.user_id,
                            "quest_id": upload.quest_id,
                        },
                        exc_info=exc,
                    )
                    continue
                if inserted:
                    stats.inserted += 1
                else:
                    stats.skipped += 1
        except Exception as exc:
            self._log.warning("Photo score reconciliation interrupted", exc_info=exc)

        self._log.info("Photo score reconciliation finished", extra=asdict(stats))
        return stats
