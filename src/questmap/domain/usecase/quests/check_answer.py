from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from questmap.domain.models.quest.QuestModel import Quest
from questmap.domain.models.score.ScoreModel import ScoreRecord
from questmap.domain.usecase._shared import clean_user_id, ensure_quest, parse_answer
from questmap.domain.usecase.ports import QuestsRepo, ScoresRepo
from questmap.domain.usecase.scores.record_score import record_score_best_effort


@dataclass(slots=True)
class AnswerCheck:
    quest: Quest
    user_answer: str
    correct: bool
    awarded_score: int
    recorded: Optional[bool] = None


@dataclass(slots=True)
class CheckAnswer:
    """Verify an answer and write the user's first result for the quest.

    ``correct``/``awarded_score`` always reflect this comparison, whether or
    not the write happened.
    """

    quests_repo: QuestsRepo
    scores_repo: ScoresRepo

    async def execute(
        self,
        quest_id: int | str,
        *,
        answer: Optional[str],
        user_id: Optional[str] = None,
    ) -> AnswerCheck:
        quest = await ensure_quest(self.quests_repo, quest_id)
        cleaned = parse_answer(answer)
        correct = quest.is_correct(cleaned)

        result = AnswerCheck(
            quest=quest,
            user_answer=cleaned.upper(),
            correct=correct,
            awarded_score=1 if correct else 0,
        )

        uid = clean_user_id(user_id)
        if uid is not None:
            record = ScoreRecord.for_answer(quest, user_id=uid, user_answer=cleaned)
            result.recorded = await record_score_best_effort(
                self.scores_repo, record, source="check"
            )
        return result
