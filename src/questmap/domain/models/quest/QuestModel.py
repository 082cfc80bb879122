from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

PHOTO_MISSION = "photo mission"
PHOTO_ANSWER = "A"
OPTION_LABELS = ("A", "B", "C", "D")


class QuestType(Enum):
    PHOTO = "photo"
    QUESTION = "question"

    @property
    def opposite(self) -> "QuestType":
        return QuestType.QUESTION if self is QuestType.PHOTO else QuestType.PHOTO


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


@dataclass(frozen=True)
class Region:
    """Hierarchical location key. Omitted levels match every sub-region."""

    city: str
    town: Optional[str] = None
    village: Optional[str] = None

    def __post_init__(self) -> None:
        city = (self.city or "").strip()
        if not city:
            raise ValueError("city is required")
        object.__setattr__(self, "city", city)
        object.__setattr__(self, "town", _blank_to_none(self.town))
        object.__setattr__(self, "village", _blank_to_none(self.village))

    def as_filter(self) -> Dict[str, str]:
        """Exact-match filter on every supplied level."""
        filt = {"city": self.city}
        if self.town is not None:
            filt["town"] = self.town
        if self.village is not None:
            filt["village"] = self.village
        return filt

    def contains(self, other: "Region") -> bool:
        return all(
            getattr(other, key) == value for key, value in self.as_filter().items()
        )


@dataclass
class Quest:
    quest_id: int
    city: str
    question: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_answer: str
    town: Optional[str] = None
    village: Optional[str] = None
    score: int = 1
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def photo(
        cls,
        *,
        quest_id: int,
        region: Region,
        question: str,
        score: int = 1,
    ) -> "Quest":
        return cls(
            quest_id=quest_id,
            city=region.city,
            town=region.town,
            village=region.village,
            question=question,
            option_a=PHOTO_MISSION,
            option_b=PHOTO_MISSION,
            option_c=PHOTO_MISSION,
            option_d=PHOTO_MISSION,
            correct_answer=PHOTO_ANSWER,
            score=score,
        )

    @property
    def region(self) -> Region:
        return Region(self.city, self.town, self.village)

    @property
    def options(self) -> Dict[str, str]:
        return {
            "A": self.option_a,
            "B": self.option_b,
            "C": self.option_c,
            "D": self.option_d,
        }

    @property
    def is_photo(self) -> bool:
        return all(value == PHOTO_MISSION for value in self.options.values())

    @property
    def quest_type(self) -> QuestType:
        return QuestType.PHOTO if self.is_photo else QuestType.QUESTION

    def is_correct(self, answer: str) -> bool:
        return answer.strip().casefold() == self.correct_answer.strip().casefold()

    def validate(self) -> None:
        if not self.question or not self.question.strip():
            raise ValueError("Quest question is required")
        if self.correct_answer.upper() not in OPTION_LABELS:
            raise ValueError(
                f"correct_answer must be one of {', '.join(OPTION_LABELS)}"
            )
        if self.score <= 0:
            raise ValueError("Quest score must be a positive integer")

        if self.is_photo:
            if self.correct_answer.upper() != PHOTO_ANSWER:
                raise ValueError("Photo quests must use A as the correct answer")
            return

        values = [value.strip().casefold() for value in self.options.values()]
        if any(not value for value in values):
            raise ValueError("Question quests need four non-empty options")
        if PHOTO_MISSION in values:
            raise ValueError("Photo sentinel cannot be mixed with real options")
        if len(set(values)) != len(values):
            raise ValueError("Question quests need four distinct options")
