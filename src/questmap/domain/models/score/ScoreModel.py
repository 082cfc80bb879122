from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from questmap.domain.models.quest.QuestModel import PHOTO_ANSWER, Quest, Region


@dataclass
class ScoreRecord:
    """Write-once outcome of one user answering one quest.

    Region and question are snapshots taken at answer time so later catalog
    edits never rewrite history.
    """

    user_id: str
    quest_id: int
    city: str
    question: str
    user_answer: str
    correct_answer: str
    score: int
    town: Optional[str] = None
    village: Optional[str] = None
    answered_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def for_answer(
        cls,
        quest: Quest,
        *,
        user_id: str,
        user_answer: str,
        answered_at: Optional[datetime] = None,
    ) -> "ScoreRecord":
        correct = quest.is_correct(user_answer)
        return cls(
            user_id=user_id,
            quest_id=quest.quest_id,
            city=quest.city,
            town=quest.town,
            village=quest.village,
            question=quest.question,
            user_answer=user_answer.strip().upper(),
            correct_answer=quest.correct_answer.strip().upper(),
            score=1 if correct else 0,
            answered_at=answered_at or datetime.now(timezone.utc),
        )

    @classmethod
    def for_photo(
        cls,
        quest: Quest,
        *,
        user_id: str,
        answered_at: Optional[datetime] = None,
    ) -> "ScoreRecord":
        return cls.for_answer(
            quest,
            user_id=user_id,
            user_answer=PHOTO_ANSWER,
            answered_at=answered_at,
        )

    @property
    def region(self) -> Region:
        return Region(self.city, self.town, self.village)

    @property
    def awarded_score(self) -> int:
        return self.score
