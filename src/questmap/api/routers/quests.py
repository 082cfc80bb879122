"""REST endpoints for drawing quests and checking answers."""

from typing import Optional

from fastapi import APIRouter

import questmap.api.deps as deps
from questmap.api.errors import DOMAIN_ERRORS, http_error
from questmap.api.mappers import check_to_api, random_quest_to_api
from questmap.api.schemas import CheckAnswerIn, CheckAnswerOut, RandomQuest
from questmap.domain.usecase import quests as quest_usecases

router = APIRouter(prefix="/quests", tags=["Quests"])

quests_repo = deps.quests_repo
scores_repo = deps.scores_repo
quest_rng = deps.quest_rng
settings = deps.settings


@router.get(
    "/random",
    response_model=RandomQuest,
    response_model_exclude_none=True,
)
async def random_quest(
    city: Optional[str] = None,
    town: Optional[str] = None,
    village: Optional[str] = None,
) -> RandomQuest:
    """Draw one quest from the region, photo or question with equal odds."""
    try:
        usecase = quest_usecases.SelectRandomQuest(
            quests_repo=quests_repo, rng=quest_rng
        )
        selected = await usecase.execute(city=city, town=town, village=village)
    except DOMAIN_ERRORS as err:
        raise http_error(err) from err
    return random_quest_to_api(selected, settings)


@router.post("/{quest_id}/check", response_model=CheckAnswerOut)
async def check_answer(
    quest_id: str, body: CheckAnswerIn | None = None
) -> CheckAnswerOut:
    """Verify an answer; the first result per user and quest is kept."""
    payload = body or CheckAnswerIn()
    try:
        usecase = quest_usecases.CheckAnswer(
            quests_repo=quests_repo, scores_repo=scores_repo
        )
        result = await usecase.execute(
            quest_id, answer=payload.answer, user_id=payload.user_id
        )
    except DOMAIN_ERRORS as err:
        raise http_error(err) from err
    return check_to_api(result)
