from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.dependencies import get_current_user_id
from app.database.supabase_client import get_supabase, get_service_supabase

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)

QUERY_METHODS = (
    "select", "insert", "update", "delete",
    "eq", "neq", "in_", "lte", "gte", "or_", "is_",
    "order", "limit", "offset", "single", "maybe_single",
)


def _make_query(data):
    """A PostgREST-style builder whose chained calls all return itself."""
    query = MagicMock(name="query")
    for method in QUERY_METHODS:
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=data)
    return query


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_supabase():
    """
    Build a mock Supabase client. Each positional argument is the `data`
    returned by the next `supabase.table(...)` query, in call order.
    """
    def factory(*results):
        supabase = MagicMock(name="supabase")
        queries = [_make_query(data) for data in results]
        supabase.table.side_effect = queries
        supabase.queries = queries
        return supabase
    return factory


@pytest.fixture
def current_user() -> dict:
    return {"id": "user-1", "email": "owner@example.com", "user_metadata": {}, "app_metadata": {}}


@pytest.fixture
def client_factory(current_user):
    """TestClient with the given mock wired in as the Supabase client and an authenticated user."""
    def factory(supabase):
        app.dependency_overrides[get_supabase] = lambda: supabase
        app.dependency_overrides[get_service_supabase] = lambda: supabase
        app.dependency_overrides[get_current_user_id] = lambda: current_user
        return TestClient(app)
    yield factory
    app.dependency_overrides.clear()


def link_row(**overrides) -> dict:
    row = {
        "id": "link-1",
        "user_id": "user-1",
        "title": "My site",
        "url": "example.com",
        "is_active": True,
        "order": 0,
        "clicks": 0,
        "scheduled_at": None,
        "expires_at": None,
        "password": None,
        "created_at": "2023-12-01T00:00:00+00:00",
        "updated_at": None,
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_link():
    return link_row
