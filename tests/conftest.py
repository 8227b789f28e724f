"""
Pytest configuration and fixtures for Folio tests.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import Any, Iterable, Optional

import pytest
from fastapi.testclient import TestClient

from folio.config import Settings
from folio.controllers.crud import PAPER_SPEC, CrudController
from folio.controllers.notifications import ToastQueue
from folio.database.repository import EssayRepository, PaperRepository, PhotoRepository
from folio.models.paper import Paper
from folio.services.query_cache import QueryCache
from folio.services.rpc import RpcError

FIXED_NOW = "2025-03-01T12:00:00+00:00"


# ============================================
# Repositories
# ============================================

@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "folio.db"


@pytest.fixture
def photo_repo(db_path):
    return PhotoRepository(db_path)


@pytest.fixture
def essay_repo(db_path):
    return EssayRepository(db_path)


@pytest.fixture
def paper_repo(db_path):
    return PaperRepository(db_path)


# ============================================
# In-memory collection double
# ============================================

class FakeCollection:
    """Paper collection kept in a dict, with call counters and failure injection."""

    entity = "papers"

    def __init__(self, records: Iterable[Paper] = ()):
        self.records: dict[int, Paper] = {r.id: r for r in records}
        self._next_id = max(self.records, default=0) + 1
        self.calls: Counter = Counter()
        self.fail_on: dict[str, str] = {}

    def _hit(self, op: str) -> None:
        self.calls[op] += 1
        if op in self.fail_on:
            raise RpcError(self.fail_on[op], status=500)

    async def list(self, filters: Optional[dict[str, Any]] = None) -> list[Paper]:
        self._hit("list")
        return [r for r in self.records.values() if r.published]

    async def list_all(self, filters: Optional[dict[str, Any]] = None) -> list[Paper]:
        self._hit("list_all")
        return sorted(self.records.values(), key=lambda r: r.id, reverse=True)

    async def create(self, fields: dict[str, Any]) -> Paper:
        self._hit("create")
        paper = Paper(**fields, id=self._next_id)
        self.records[paper.id] = paper
        self._next_id += 1
        return paper

    async def update(self, record_id: int, fields: dict[str, Any]) -> Paper:
        self._hit("update")
        if record_id not in self.records:
            raise RpcError(f"Paper {record_id} not found", status=404)
        self.records[record_id] = replace(self.records[record_id], **fields)
        return self.records[record_id]

    async def delete(self, record_id: int) -> None:
        self._hit("delete")
        if record_id not in self.records:
            raise RpcError(f"Paper {record_id} not found", status=404)
        del self.records[record_id]


def make_paper(paper_id: int, **overrides: Any) -> Paper:
    values = {
        "title": f"Paper {paper_id}",
        "authors": "A. Author",
        "year": 2024,
    }
    values.update(overrides)
    return Paper(id=paper_id, **values)


@pytest.fixture
def collection():
    return FakeCollection([make_paper(1), make_paper(2, published=True, published_at="2024-05-01T00:00:00+00:00")])


@pytest.fixture
def toasts():
    return ToastQueue()


@pytest.fixture
def controller(collection, toasts):
    return CrudController(collection, QueryCache(), toasts, PAPER_SPEC, clock=lambda: FIXED_NOW)


# ============================================
# Web application
# ============================================

@pytest.fixture
def settings(tmp_path):
    """Fresh singleton rooted in a temporary directory."""
    Settings.reset()
    settings = Settings.load(base_dir=tmp_path)
    yield settings
    Settings.reset()


@pytest.fixture
def client(settings):
    from folio.gui.app import app

    with TestClient(app) as test_client:
        yield test_client
