from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from questmap.api.regions import region_label
from questmap.api.schemas import (
    CheckAnswerOut,
    HistoryItem,
    ImageSource,
    QuestOptions,
    QuestType,
    RandomQuest,
    UploadOut,
    UserHistory,
)
from questmap.core.settings import Settings
from questmap.domain.models.quest.QuestModel import Quest as DQuest
from questmap.domain.models.quest.QuestModel import Region
from questmap.domain.usecase.history import QuestHistory
from questmap.domain.usecase.quests import AnswerCheck, SelectedQuest
from questmap.domain.usecase.uploads import UploadOutcome

# ---------- helpers ----------


def _utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _region_fields(region: Region) -> dict[str, Optional[str]]:
    return {
        "city": region.city,
        "town": region.town,
        "village": region.village,
        "region_label": region_label(region),
    }


def _options(quest: DQuest) -> QuestOptions:
    return QuestOptions(**quest.options)


# ---------- quests ----------


def random_quest_to_api(selected: SelectedQuest, settings: Settings) -> RandomQuest:
    quest = selected.quest
    out = RandomQuest(
        id=quest.quest_id,
        type=QuestType(quest.quest_type.value),
        question=quest.question,
        score=quest.score,
        **_region_fields(quest.region),
    )
    if quest.is_photo:
        out.instruction = settings.photo_instruction
        out.upload_endpoint = settings.upload_endpoint
    else:
        out.options = _options(quest)
    return out


def check_to_api(result: AnswerCheck) -> CheckAnswerOut:
    quest = result.quest
    return CheckAnswerOut(
        id=quest.quest_id,
        type=QuestType(quest.quest_type.value),
        question=quest.question,
        options=_options(quest),
        correct_answer=quest.correct_answer.upper(),
        score=quest.score,
        correct=result.correct,
        user_answer=result.user_answer,
        awarded_score=result.awarded_score,
        recorded=result.recorded,
        **_region_fields(quest.region),
    )


# ---------- users ----------


def history_to_api(history: QuestHistory) -> UserHistory:
    items = []
    for entry in history.entries:
        record = entry.record
        items.append(
            HistoryItem(
                quest_id=record.quest_id,
                question=record.question,
                user_answer=record.user_answer,
                correct_answer=record.correct_answer,
                awarded_score=record.awarded_score,
                answered_at=_utc(record.answered_at),
                image_url=entry.image_url,
                image_source=(
                    ImageSource(entry.image_source) if entry.image_source else None
                ),
                **_region_fields(record.region),
            )
        )
    return UserHistory(
        user_id=history.user_id,
        total_score=history.total_score,
        count=len(items),
        quests=items,
    )


# ---------- uploads ----------


def upload_to_api(outcome: UploadOutcome) -> UploadOut:
    record = outcome.record
    return UploadOut(
        upload_id=record.upload_id,
        user_id=record.user_id,
        quest_id=record.quest_id,
        storage_key=record.storage_key,
        public_url=record.public_url,
        signed_url=outcome.signed_url,
        content_type=record.content_type,
        size_bytes=record.size_bytes,
        uploaded_at=_utc(record.uploaded_at),
        auto_scored=outcome.auto_scored,
    )
