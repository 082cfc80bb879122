from questmap.domain.usecase.history.list_history import (
    HistoryEntry,
    ListQuestHistory,
    QuestHistory,
)

__all__ = ["HistoryEntry", "ListQuestHistory", "QuestHistory"]
