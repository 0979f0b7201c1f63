import sys
import types

import pytest

import scholar_search
from scholar_search.core.models import SearchQuery, SearchResult


class DummyClient:
    def __init__(self, created):
        created.append(self)
        self.queries = []

    def search(self, query):
        self.queries.append(query)
        return SearchResult(total=len(self.queries))

    def close(self):
        pass


@pytest.fixture(autouse=True)
def reset_default_client(monkeypatch):
    monkeypatch.setattr(scholar_search, "_default_client", None)
    monkeypatch.setattr(scholar_search, "_close_callback_registered", False)
    registered = []
    monkeypatch.setattr("atexit.register", registered.append)
    yield registered


def test_default_client_is_created_lazily_once(monkeypatch, reset_default_client):
    created = []
    dummy_api = types.ModuleType("scholar_search.api")
    dummy_api.SearchClient = lambda: DummyClient(created)
    monkeypatch.setitem(sys.modules, "scholar_search.api", dummy_api)

    first = scholar_search.get_default_client()
    second = scholar_search.get_default_client()

    assert first is second
    assert len(created) == 1
    assert reset_default_client == [first.close]


def test_search_builds_query_and_delegates(monkeypatch):
    created = []
    dummy_api = types.ModuleType("scholar_search.api")
    dummy_api.SearchClient = lambda: DummyClient(created)
    monkeypatch.setitem(sys.modules, "scholar_search.api", dummy_api)

    result = scholar_search.search(" salud ", date_from="2024-01-01", use_registry=False, page=2)

    assert result.total == 1
    query = created[0].queries[0]
    assert query == SearchQuery(
        keyword="salud", date_from="2024-01-01", use_registry=False, page=2
    )
