from questmap.domain.usecase.quests.check_answer import AnswerCheck, CheckAnswer
from questmap.domain.usecase.quests.select_random_quest import (
    SelectedQuest,
    SelectRandomQuest,
)

__all__ = [
    "AnswerCheck",
    "CheckAnswer",
    "SelectedQuest",
    "SelectRandomQuest",
]
