"""Per-user quest history."""

from fastapi import APIRouter

import questmap.api.deps as deps
from questmap.api.errors import DOMAIN_ERRORS, http_error
from questmap.api.mappers import history_to_api
from questmap.api.schemas import UserHistory
from questmap.domain.usecase.history import ListQuestHistory

router = APIRouter(prefix="/users", tags=["Users"])

scores_repo = deps.scores_repo
media_resolver = deps.media_resolver


@router.get("/{user_id}/quests", response_model=UserHistory)
async def list_user_quests(user_id: str) -> UserHistory:
    """Answered quests newest first, each with a freshly signed image URL."""
    try:
        usecase = ListQuestHistory(
            scores_repo=scores_repo, media_resolver=media_resolver
        )
        history = await usecase.execute(user_id)
    except DOMAIN_ERRORS as err:
        raise http_error(err) from err
    return history_to_api(history)
