from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from questmap.domain.models.score.ScoreModel import ScoreRecord
from questmap.domain.usecase._shared import clean_user_id
from questmap.domain.usecase.ports import BadRequestError, ScoresRepo

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from questmap.services.media_resolver import MediaResolver


@dataclass(slots=True)
class HistoryEntry:
    record: ScoreRecord
    image_url: Optional[str] = None
    image_source: Optional[str] = None


@dataclass(slots=True)
class QuestHistory:
    user_id: str
    entries: list[HistoryEntry] = field(default_factory=lambda: [])

    @property
    def total_score(self) -> int:
        return sum(entry.record.awarded_score for entry in self.entries)


@dataclass(slots=True)
class ListQuestHistory:
    scores_repo: ScoresRepo
    media_resolver: "MediaResolver"

    async def execute(self, user_id: Optional[str]) -> QuestHistory:
        uid = clean_user_id(user_id)
        if uid is None:
            raise BadRequestError("user_id is required")

        records = await self.scores_repo.list_for_user(uid)
        images = await self.media_resolver.resolve(uid, records)
        return QuestHistory(
            user_id=uid,
            entries=[
                HistoryEntry(record=record, image_url=image.url, image_source=image.source)
                for record, image in zip(records, images)
            ],
        )
