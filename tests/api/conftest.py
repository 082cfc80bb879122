from __future__ import annotations

import random

import pytest
from fastapi.testclient import TestClient

from questmap.api.main import app
from questmap.api.routers import quests as quests_router
from questmap.api.routers import uploads as uploads_router
from questmap.api.routers import users as users_router


@pytest.fixture
def client(
    monkeypatch,
    quests_repo,
    scores_repo,
    uploads_repo,
    media_store,
    media_resolver,
    settings,
) -> TestClient:
    """TestClient whose routers are bound to in-memory stores."""
    monkeypatch.setattr(quests_router, "quests_repo", quests_repo)
    monkeypatch.setattr(quests_router, "scores_repo", scores_repo)
    monkeypatch.setattr(quests_router, "quest_rng", random.Random(5))
    monkeypatch.setattr(quests_router, "settings", settings)

    monkeypatch.setattr(users_router, "scores_repo", scores_repo)
    monkeypatch.setattr(users_router, "media_resolver", media_resolver)

    monkeypatch.setattr(uploads_router, "uploads_repo", uploads_repo)
    monkeypatch.setattr(uploads_router, "quests_repo", quests_repo)
    monkeypatch.setattr(uploads_router, "scores_repo", scores_repo)
    monkeypatch.setattr(uploads_router, "media_store", media_store)
    monkeypatch.setattr(uploads_router, "media_resolver", media_resolver)
    monkeypatch.setattr(uploads_router, "settings", settings)

    return TestClient(app)
