"""
End-to-end tests for the HTTP API, run against the bundled sample articles.
"""

import pytest
from fastapi.testclient import TestClient

from app.core.config import DEFAULT_DATA_PATH
from app.main import app


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("SEARCH_DATA_PATH", str(DEFAULT_DATA_PATH))
    monkeypatch.delenv("SEARCH_INCLUDE_FUTURE", raising=False)
    # the lifespan builds a fresh service per client
    with TestClient(app) as c:
        yield c


def ids(response):
    return [r["document"]["id"] for r in response.json()["data"]["results"]]


new_article = {
    "id": 6,
    "title": "Zig comptime tricks",
    "content": "Compile-time evaluation in Zig.",
    "category": {"id": 1, "name": "Programming"},
    "created_at": "2024-07-01T10:00:00",
    "view_count": 12,
}


# -------------------------
# /search/
# -------------------------
def test_search_free_text(client):
    response = client.get("/search/", params={"q": "rust"})
    assert response.status_code == 200

    body = response.json()
    assert body["status"] == "ok"
    assert ids(response) == [1]
    result = body["data"]["results"][0]
    assert result["highlighted_title"] == "Intro to <mark>Rust</mark>"
    assert "**" not in result["highlighted_snippet"]
    assert result["document"]["translations"] == {}
    assert body["meta"]["total_hits"] == 1


def test_search_default_sort_and_pagination(client):
    response = client.get("/search/", params={"q": "views:>=0", "limit": 2, "page": 2})
    data = response.json()["data"]

    assert ids(response) == [2, 1]
    assert data["pagination"] == {"page": 2, "limit": 2, "total": 5, "total_pages": 3}
    assert data["sort"] == {"field": "date", "direction": "desc"}


def test_search_sort_directive(client):
    response = client.get("/search/", params={"q": "views:>=0 sort:view_count:asc"})
    assert ids(response) == [1, 5, 2, 4, 3]
    assert response.json()["data"]["sort"] == {"field": "views", "direction": "asc"}


def test_search_or_with_numeric_filter(client):
    response = client.get("/search/", params={"q": '"Kyoto" OR views:>1000'})
    assert ids(response) == [3, 5]


def test_search_exclusion(client):
    response = client.get("/search/", params={"q": "basics -goroutines"})
    assert ids(response) == []


def test_empty_query_returns_nothing(client):
    response = client.get("/search/", params={"q": "   "})
    data = response.json()["data"]
    assert data["results"] == []
    assert data["pagination"]["total"] == 0


def test_snippet_is_escaped(client):
    client.post("/documents/", json=dict(new_article, summary="Use <T> with zig generics"))
    response = client.get("/search/", params={"q": "zig"})
    snippet = response.json()["data"]["results"][0]["highlighted_snippet"]
    assert "&lt;T&gt;" in snippet
    assert "<mark>zig</mark>" in snippet


def test_search_language_overlay(client):
    response = client.get("/search/", params={"q": "rust", "lang": "zh"})
    result = response.json()["data"]["results"][0]
    assert result["document"]["title"] == "Rust 入门"
    assert result["highlighted_title"] == "<mark>Rust</mark> 入门"


def test_search_unknown_language_falls_back(client):
    response = client.get("/search/", params={"q": "rust", "lang": "de"})
    assert response.json()["data"]["results"][0]["document"]["title"] == "Intro to Rust"


# -------------------------
# Errors
# -------------------------
def test_syntax_error_is_400(client):
    response = client.get("/search/", params={"q": '"unclosed'})
    assert response.status_code == 400

    error = response.json()["error"]
    assert error["code"] == "INVALID_SEARCH_SYNTAX"
    assert error["message"].startswith("Invalid search syntax: ")
    assert error["details"][0]["code"] == "UNBALANCED_QUOTES"
    assert "data" not in response.json()


def test_parameter_errors_are_400_and_all_reported(client):
    response = client.get("/search/", params={"q": "bogus:x views:>y"})
    assert response.status_code == 400

    error = response.json()["error"]
    assert error["code"] == "INVALID_SEARCH_PARAMETERS"
    assert error["message"].startswith("Invalid search parameters: ")
    assert [d["code"] for d in error["details"]] == ["UNKNOWN_FIELD", "INVALID_NUMBER"]


def test_limit_out_of_range_is_rejected(client):
    response = client.get("/search/", params={"q": "rust", "limit": 1000})
    assert response.status_code == 422


# -------------------------
# /search/validate and /search/health
# -------------------------
def test_validate_reports_errors(client):
    response = client.get("/search/validate", params={"q": "titel:rust"})
    data = response.json()["data"]

    assert data["valid"] is False
    assert data["errors"][0]["code"] == "UNKNOWN_FIELD"
    assert "did you mean 'title'" in data["errors"][0]["message"]


def test_validate_accepts_good_query(client):
    response = client.get("/search/validate", params={"q": 'title:"Rust" sort:date:asc'})
    assert response.json()["data"] == {"query": 'title:"Rust" sort:date:asc', "valid": True, "errors": []}


def test_health(client):
    response = client.get("/search/health")
    assert response.json()["data"] == {"total_documents": 5, "status": "ok"}


# -------------------------
# /documents/
# -------------------------
def test_add_document_is_searchable(client):
    response = client.post("/documents/", json=new_article)
    assert response.json() == {"status": "added", "id": 6}

    assert ids(client.get("/search/", params={"q": "comptime"})) == [6]
    assert client.get("/search/health").json()["data"]["total_documents"] == 6


def test_add_duplicate_document(client):
    response = client.post("/documents/", json=dict(new_article, id=1))
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_DOCUMENT"


def test_add_invalid_document(client):
    response = client.post("/documents/", json=dict(new_article, view_count=-1))
    assert response.status_code == 422


def test_future_articles_are_hidden_by_default(client):
    client.post("/documents/", json=dict(new_article, title="Launch notes", created_at="2999-01-01T00:00:00"))

    assert ids(client.get("/search/", params={"q": "launch"})) == []
    assert ids(client.get("/search/", params={"q": "launch", "include_future": "true"})) == [6]
