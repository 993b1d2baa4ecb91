"""
Shared pytest fixtures for EduWallet tests.
"""

import itertools
import os
import sys
from collections import defaultdict
from unittest.mock import AsyncMock, patch

import pytest

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from services.record_store import _iso  # noqa: E402
from core.errors import RecordAccessError, RecordNotFoundError  # noqa: E402

TEST_USER = {"uid": "user-1", "email": "student@example.com"}


class InMemoryStore:
    """Dict-backed stand-in for RecordStore with the same method surface."""

    def __init__(self):
        self.collections = defaultdict(dict)
        self._ids = itertools.count(1)

    def insert(self, collection, data):
        doc_id = f"{collection}-{next(self._ids)}"
        self.collections[collection][doc_id] = {k: _iso(v) for k, v in data.items()}
        return doc_id

    def select_all(self, collection, user_id, date_from=None, date_to=None,
                   date_field="date", order_by="date", descending=True):
        rows = []
        for doc_id, data in self.collections[collection].items():
            if data.get("user_id") != user_id:
                continue
            value = data.get(date_field)
            if date_from is not None and value < date_from.isoformat():
                continue
            if date_to is not None and value > date_to.isoformat():
                continue
            rows.append({**data, "id": doc_id})
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by) or ""), reverse=descending)
        return rows

    def get_owned(self, collection, doc_id, user_id):
        data = self.collections[collection].get(doc_id)
        if data is None:
            raise RecordNotFoundError(doc_id)
        if data.get("user_id") != user_id:
            raise RecordAccessError(doc_id)
        return {**data, "id": doc_id}

    def update(self, collection, doc_id, user_id, patch):
        self.get_owned(collection, doc_id, user_id)
        self.collections[collection][doc_id].update({k: _iso(v) for k, v in patch.items()})
        return self.get_owned(collection, doc_id, user_id)

    def delete(self, collection, doc_id, user_id):
        self.get_owned(collection, doc_id, user_id)
        del self.collections[collection][doc_id]

    def get_user_document(self, collection, user_id):
        data = self.collections[collection].get(user_id)
        return dict(data) if data is not None else None

    def set_user_document(self, collection, user_id, data):
        payload = {k: _iso(v) for k, v in data.items()}
        payload["user_id"] = user_id
        self.collections[collection][user_id] = payload

    def list_documents(self, collection):
        return [{**data, "id": doc_id} for doc_id, data in self.collections[collection].items()]


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def app(store):
    from main import app as application
    from api.deps import get_current_user, get_store

    application.dependency_overrides[get_current_user] = lambda: dict(TEST_USER)
    application.dependency_overrides[get_store] = lambda: store
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Test client without lifespan, so Firebase and the scheduler never start."""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def mock_send_email():
    """Replaces the relay call; every email counts as delivered."""
    with patch("services.email_service.send_email", new_callable=AsyncMock) as send:
        send.return_value = True
        yield send
