from __future__ import annotations

import json

import pytest

from scripts import seed_quests

pytestmark = pytest.mark.asyncio


class RecordingQuestsRepo:
    def __init__(self, db) -> None:
        self.db = db
        self.indexed = False
        self.store = {}

    async def ensure_indexes(self) -> None:
        self.indexed = True

    async def upsert(self, quest) -> None:
        self.store[quest.quest_id] = quest


def _catalog():
    data = json.loads(seed_quests.DEFAULT_DATA.read_text(encoding="utf-8"))
    return seed_quests.build_catalog(data)


async def test_catalog_ids_follow_file_order():
    quests = _catalog()

    assert [q.quest_id for q in quests] == list(range(1, len(quests) + 1))
    assert sum(q.is_photo for q in quests) == 3
    assert all(q.is_photo for q in quests[-3:])
    assert [q.quest_id for q in _catalog()] == [q.quest_id for q in quests]


async def test_build_catalog_rejects_invalid_entries():
    data = {
        "question_quests": [
            {"city": "Jeju", "question": "Q", "options": ["a", "a", "b", "c"], "correct_answer": "A"}
        ]
    }
    with pytest.raises(ValueError):
        seed_quests.build_catalog(data)


async def test_reseeding_replaces_the_same_ids(monkeypatch):
    repos = []

    def make_repo(db):
        repo = RecordingQuestsRepo(db)
        repos.append(repo)
        return repo

    monkeypatch.setattr(seed_quests, "get_db", lambda: "db")
    monkeypatch.setattr(seed_quests, "QuestsRepoMongo", make_repo)

    quests = _catalog()
    await seed_quests.seed(quests)
    await seed_quests.seed(_catalog())

    first, second = repos
    assert first.indexed and second.indexed
    assert sorted(first.store) == sorted(second.store) == [q.quest_id for q in quests]
    assert second.store[1].question == quests[0].question
