"""Tests for services/search.py and services/debounce.py."""

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from errors import UpstreamError
from models.search import SearchResult
from services.backend_client import BackendClientError, CircuitOpenError
from services.debounce import Debouncer, Superseded
from services.metrics import get_metrics_collector
from services.search import (
    build_corpus,
    debounced_search,
    local_search,
    rank,
    search,
    upstream_unavailable,
)


def _result(title, subtitle=""):
    return SearchResult(id=title, type="topic", title=title, subtitle=subtitle)


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------

def test_rank_exact_prefix_substring():
    assert rank(_result("Civics"), "civics") == 0
    assert rank(_result("Civics & Debate"), "civ") == 1
    assert rank(_result("Advanced Civics"), "civ") == 2
    assert rank(_result("Biology", subtitle="civic science"), "civ") == 2
    assert rank(_result("Biology"), "civ") is None


def test_local_search_orders_by_rank_then_title():
    corpus = [_result("Zeta art"), _result("art"), _result("Artistry"), _result("Art club"), _result("Chemistry")]
    titles = [r.title for r in local_search(corpus, "art", limit=10)]
    assert titles == ["art", "Art club", "Artistry", "Zeta art"]


def test_local_search_respects_limit():
    corpus = [_result(f"Topic {i}") for i in range(5)]
    assert len(local_search(corpus, "topic", limit=2)) == 2


@pytest.mark.parametrize("exc,expected", [
    (httpx.ConnectError("refused"), True),
    (CircuitOpenError(), True),
    (BackendClientError(503, "down"), True),
    (BackendClientError(404, "no search"), True),
    (BackendClientError(400, "bad query"), False),
    (ValueError("null data"), False),
])
def test_upstream_unavailable(exc, expected):
    assert upstream_unavailable(exc) is expected


# ---------------------------------------------------------------------------
# Corpus & search
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_corpus_respects_scope(teacher):
    corpus = await build_corpus(teacher, "students")
    assert {r.type for r in corpus} == {"student"}
    assert "Sarah Johnson" in [r.title for r in corpus]


@pytest.mark.asyncio
async def test_corpus_all_scopes(teacher):
    types = {r.type for r in await build_corpus(teacher, "all")}
    assert types == {"class", "student", "session", "reflection", "topic"}


@pytest.mark.asyncio
async def test_short_query(teacher):
    resp = await search(" a ", "all", teacher)
    assert resp.status == "too_short"
    assert resp.results == []


@pytest.mark.asyncio
async def test_mock_mode_searches_locally(teacher):
    resp = await search("civics", "classes", teacher)
    assert resp.source == "fallback"
    assert [r.title for r in resp.results] == ["Civics & Debate"]


@pytest.mark.asyncio
async def test_backend_results_used_when_available(teacher):
    hits = [_result("From backend")]
    with patch("services.search.should_use_mock", return_value=False), \
         patch("services.search.search_adapter.search", new_callable=AsyncMock, return_value=hits):
        resp = await search("backend", "all", teacher, client=AsyncMock())
    assert resp.source == "backend"
    assert resp.results == hits


@pytest.mark.asyncio
async def test_unavailable_backend_falls_back(teacher):
    get_metrics_collector().reset()
    with patch("services.search.should_use_mock", return_value=False), \
         patch("services.search.search_adapter.search", new_callable=AsyncMock,
               side_effect=BackendClientError(502, "bad gateway")):
        resp = await search("plastics", "topics", teacher, client=AsyncMock())
    assert resp.source == "fallback"
    assert resp.results[0].title == "Should schools ban single-use plastics?"
    assert get_metrics_collector().snapshot()["fallbacks"]["search"] == 1


@pytest.mark.asyncio
async def test_client_error_is_not_masked(teacher):
    with patch("services.search.should_use_mock", return_value=False), \
         patch("services.search.search_adapter.search", new_callable=AsyncMock,
               side_effect=BackendClientError(400, "bad query")):
        with pytest.raises(UpstreamError):
            await search("plastics", "all", teacher, client=AsyncMock())


# ---------------------------------------------------------------------------
# Debounce
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_debouncer_newer_call_supersedes():
    debouncer = Debouncer(0.05)
    calls = []

    async def run(value):
        calls.append(value)
        return value

    first = asyncio.create_task(debouncer.submit("client-1", lambda: run("first")))
    await asyncio.sleep(0)
    second = asyncio.create_task(debouncer.submit("client-1", lambda: run("second")))

    with pytest.raises(Superseded):
        await first
    assert await second == "second"
    assert calls == ["second"]
    assert debouncer.pending("client-1") is False


@pytest.mark.asyncio
async def test_debouncer_keys_are_independent():
    debouncer = Debouncer(0)

    async def run(value):
        return value

    results = await asyncio.gather(
        debouncer.submit("a", lambda: run(1)),
        debouncer.submit("b", lambda: run(2)),
    )
    assert results == [1, 2]


@pytest.mark.asyncio
async def test_debounced_search_reports_superseded(teacher):
    debouncer = Debouncer(0.05)
    first = asyncio.create_task(debounced_search("c", "plas", "topics", teacher, debouncer))
    await asyncio.sleep(0)
    second = asyncio.create_task(debounced_search("c", "plastics", "topics", teacher, debouncer))

    assert (await first).status == "superseded"
    latest = await second
    assert latest.status == "ok"
    assert latest.query == "plastics"
