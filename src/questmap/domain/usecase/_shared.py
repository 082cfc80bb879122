from __future__ import annotations

from typing import Optional

from questmap.domain.models.quest.QuestModel import OPTION_LABELS, Quest, Region
from questmap.domain.usecase.ports import BadRequestError, NotFoundError, QuestsRepo


def parse_quest_id(raw: int | str) -> int:
    """Return an integer quest id, rejecting anything else as not found."""

    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError as err:
        raise NotFoundError(f"Quest ID does not exist: {raw}") from err


def parse_region(
    city: Optional[str], town: Optional[str] = None, village: Optional[str] = None
) -> Region:
    try:
        return Region(city or "", town, village)
    except ValueError as err:
        raise BadRequestError(str(err)) from err


def parse_answer(raw: Optional[str]) -> str:
    answer = (raw or "").strip()
    if not answer:
        raise BadRequestError("answer is required")
    if answer.upper() not in OPTION_LABELS:
        raise BadRequestError(
            f"answer must be one of {', '.join(OPTION_LABELS)}, got {answer!r}"
        )
    return answer


def clean_user_id(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None


async def ensure_quest(quests_repo: QuestsRepo, quest_id: int | str) -> Quest:
    quest = await quests_repo.get(parse_quest_id(quest_id))
    if quest is None:
        raise NotFoundError(f"Quest ID does not exist: {quest_id}")
    return quest
