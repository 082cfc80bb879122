from __future__ import annotations

import logging
from typing import Optional

from questmap.domain.models.score.ScoreModel import ScoreRecord
from questmap.domain.usecase.ports import ScoresRepo

log = logging.getLogger(__name__)


async def record_score_best_effort(
    scores_repo: ScoresRepo,
    record: ScoreRecord,
    *,
    source: str,
    logger: Optional[logging.Logger] = None,
) -> Optional[bool]:
    """Insert ``record`` once per (user, quest) without ever raising.

    Returns True when this call created the record, False when one already
    existed, and None when the store could not be written.
    """

    logger = logger or log
    context = {
        "user_id": record.user_id,
        "quest_id": record.quest_id,
        "source": source,
    }
    try:
        inserted = await scores_repo.insert_once(record)
    except Exception as exc:
        logger.warning("Score persistence failed", extra=context, exc_info=exc)
        return None

    if inserted:
        logger.info("Score recorded", extra={**context, "score": record.score})
    else:
        logger.debug("Score already recorded; keeping first result", extra=context)
    return inserted
