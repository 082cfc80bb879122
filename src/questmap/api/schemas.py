from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

# --- Shared Types ---


class QuestType(str, Enum):
    PHOTO = "photo"
    QUESTION = "question"


class ImageSource(str, Enum):
    UPLOAD = "upload"
    DEFAULT = "default"


class APIModel(BaseModel):
    """Snake case in Python, camelCase on the wire; both accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestOptions(BaseModel):
    A: str
    B: str
    C: str
    D: str


class RegionOut(APIModel):
    city: str
    town: Optional[str] = None
    village: Optional[str] = None
    region_label: str


# --- Quests ---


class RandomQuest(RegionOut):
    id: int
    type: QuestType
    question: str
    score: int
    options: Optional[QuestOptions] = None
    instruction: Optional[str] = None
    upload_endpoint: Optional[str] = None


class CheckAnswerIn(APIModel):
    answer: Optional[str] = None
    user_id: Optional[str] = None

    @field_validator("answer", "user_id", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        # Answer letters are validated by the use case.
        if value is None or isinstance(value, str):
            return value
        return str(value)


class CheckAnswerOut(RegionOut):
    id: int
    type: QuestType
    question: str
    options: QuestOptions
    correct_answer: str
    score: int
    correct: bool
    user_answer: str
    awarded_score: int
    recorded: Optional[bool] = None


# --- Users ---


class HistoryItem(RegionOut):
    quest_id: int
    question: str
    user_answer: str
    correct_answer: str
    awarded_score: int
    answered_at: datetime
    image_url: Optional[str] = None
    image_source: Optional[ImageSource] = None


class UserHistory(APIModel):
    user_id: str
    total_score: int
    count: int
    quests: List[HistoryItem]


# --- Uploads ---


class UploadOut(APIModel):
    upload_id: str
    user_id: str
    quest_id: Optional[int] = None
    storage_key: str
    public_url: str
    signed_url: Optional[str] = None
    content_type: str
    size_bytes: int
    uploaded_at: datetime
    auto_scored: Optional[bool] = None
