# tests/infra/conftest.py
from __future__ import annotations

import types
from typing import Any, Dict, List, Optional

import pytest


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]], error: Optional[Exception] = None):
        self.docs = list(docs)
        self.error = error
        self.sort_spec: Any = None

    def sort(self, spec, *args, **kwargs):
        self.sort_spec = spec
        return self

    async def to_list(self, length=None):
        if self.error is not None:
            raise self.error
        return self.docs if length is None else self.docs[:length]

    def __aiter__(self):
        return self._iter()

    async def _iter(self):
        if self.error is not None:
            raise self.error
        for doc in self.docs:
            yield doc


class FakeCollection:
    """Records calls and replays canned results; raise ``error`` to simulate outages."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.docs: List[Dict[str, Any]] = []
        self.error: Optional[Exception] = None
        self.upserted_id: Any = "new-id"
        self.deleted_count = 1
        self.last_cursor: Optional[FakeCursor] = None

    def _maybe_raise(self) -> None:
        if self.error is not None:
            raise self.error

    async def create_index(self, keys, **kwargs):
        self.calls.append(("create_index", keys, kwargs))
        return kwargs.get("name")

    async def find_one(self, filt):
        self.calls.append(("find_one", filt))
        self._maybe_raise()
        return self.docs[0] if self.docs else None

    def find(self, filt):
        self.calls.append(("find", filt))
        self.last_cursor = FakeCursor(self.docs, self.error)
        return self.last_cursor

    def aggregate(self, pipeline):
        self.calls.append(("aggregate", pipeline))
        self.last_cursor = FakeCursor(self.docs, self.error)
        return self.last_cursor

    async def update_one(self, filt, update, upsert=False):
        self.calls.append(("update_one", filt, update, upsert))
        self._maybe_raise()
        return types.SimpleNamespace(upserted_id=self.upserted_id)

    async def replace_one(self, filt, doc, upsert=False):
        self.calls.append(("replace_one", filt, doc, upsert))
        self._maybe_raise()
        return types.SimpleNamespace()

    async def insert_one(self, doc):
        self.calls.append(("insert_one", doc))
        self._maybe_raise()
        return types.SimpleNamespace(inserted_id="oid")

    async def delete_one(self, filt):
        self.calls.append(("delete_one", filt))
        self._maybe_raise()
        return types.SimpleNamespace(deleted_count=self.deleted_count)

    async def delete_many(self, filt):
        self.calls.append(("delete_many", filt))
        self._maybe_raise()
        return types.SimpleNamespace(deleted_count=0)

    def last(self, name: str) -> tuple:
        return next(call for call in reversed(self.calls) if call[0] == name)


class FakeDB(dict):
    def __missing__(self, name: str) -> FakeCollection:
        coll = FakeCollection()
        self[name] = coll
        return coll


@pytest.fixture
def fake_db() -> FakeDB:
    return FakeDB()
