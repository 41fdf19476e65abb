"""Dashboard search box — upstream search with a scoped local fallback.

When the platform search endpoint is unreachable the service searches the
teacher's own classes, students, sessions, reflections and topics instead,
ranking exact title matches first, then prefix matches, then substrings.
"""

from __future__ import annotations

import logging

import httpx

from adapters import search_adapter
from adapters.class_adapter import parse_class
from config.settings import get_settings
from errors import UpstreamError
from models.search import SearchResponse, SearchResult
from models.user import CurrentUser
from services import mock_data
from services.backend_client import (
    BackendClient,
    BackendClientError,
    CircuitOpenError,
    get_backend_client,
)
from services.debounce import Debouncer, Superseded
from services.fallback import should_use_mock
from services.metrics import get_metrics_collector
from services.reflection_review import get_reflection_review_service

logger = logging.getLogger(__name__)


def upstream_unavailable(exc: BaseException) -> bool:
    """Transport errors, 5xx, 404 and an open circuit trigger the local fallback."""
    if isinstance(exc, (httpx.HTTPError, CircuitOpenError)):
        return True
    if isinstance(exc, BackendClientError):
        return exc.status_code >= 500 or exc.status_code == 404
    return False


def rank(result: SearchResult, query: str) -> int | None:
    """0 exact, 1 prefix, 2 substring, None for no match."""
    q = query.lower()
    title = result.title.lower()
    if title == q:
        return 0
    if title.startswith(q):
        return 1
    if q in title or q in result.subtitle.lower():
        return 2
    return None


async def build_corpus(user: CurrentUser, scope: str = "all") -> list[SearchResult]:
    """Everything the teacher can see locally, restricted to *scope*."""
    corpus: list[SearchResult] = []

    def wanted(kind: str) -> bool:
        return scope in ("all", kind)

    if wanted("classes"):
        for c in (parse_class(raw) for raw in mock_data.CLASSES):
            corpus.append(SearchResult(
                id=c.class_id, type="class", title=c.class_name,
                subtitle=f"{c.total_students} students", url=f"/teacher/classes/{c.class_id}",
            ))
    if wanted("students"):
        for s in mock_data.get_students():
            corpus.append(SearchResult(
                id=s.id, type="student", title=s.full_name,
                subtitle=f"Grade {s.grade}" if s.grade else "", url=f"/teacher/students/{s.id}",
            ))
    if wanted("sessions"):
        for s in mock_data.get_sessions(user.user_id, user.name):
            corpus.append(SearchResult(
                id=s.id, type="session", title=s.title,
                subtitle=s.topic.title, url=f"/teacher/sessions/{s.id}",
            ))
    if wanted("reflections"):
        try:
            reflections = await get_reflection_review_service().reflections(user)
        except Exception as exc:
            logger.warning("Reflections unavailable for local search: %s", exc)
            reflections = []
        for r in reflections:
            corpus.append(SearchResult(
                id=r.id, type="reflection", title=f"{r.student_name}: {r.debate_title}",
                subtitle=r.review_status, url=f"/teacher/reflections/{r.id}",
            ))
    if wanted("topics"):
        for t in mock_data.get_topics():
            corpus.append(SearchResult(
                id=t.id, type="topic", title=t.title,
                subtitle=t.category, url=f"/teacher/topics/{t.id}",
            ))
    return corpus


def local_search(corpus: list[SearchResult], query: str, limit: int) -> list[SearchResult]:
    scored = [(r, rank(r, query)) for r in corpus]
    hits = [(score, r.title.lower(), r) for r, score in scored if score is not None]
    hits.sort(key=lambda h: (h[0], h[1]))
    return [r for _, _, r in hits[:limit]]


async def search(
    query: str,
    scope: str,
    user: CurrentUser,
    client: BackendClient | None = None,
) -> SearchResponse:
    settings = get_settings()
    query = query.strip()
    if len(query) < settings.search_min_query_length:
        return SearchResponse(query=query, scope=scope, status="too_short", source="none")

    limit = settings.search_result_limit
    if not should_use_mock():
        client = client or get_backend_client()
        try:
            results = await search_adapter.search(
                client, query, scope=scope, limit=limit, token=user.token or None,
            )
            return SearchResponse(query=query, scope=scope, source="backend", results=results)
        except Exception as exc:
            if not upstream_unavailable(exc):
                raise UpstreamError(f"Search failed: {exc}") from exc
            logger.warning("Search endpoint unavailable (%s), searching locally", exc)
            get_metrics_collector().record_fallback("search")

    corpus = await build_corpus(user, scope)
    return SearchResponse(
        query=query, scope=scope, source="fallback", results=local_search(corpus, query, limit),
    )


_debouncer: Debouncer | None = None


def get_debouncer() -> Debouncer:
    global _debouncer
    if _debouncer is None:
        _debouncer = Debouncer(get_settings().search_debounce_ms / 1000)
    return _debouncer


async def debounced_search(
    client_key: str,
    query: str,
    scope: str,
    user: CurrentUser,
    debouncer: Debouncer | None = None,
) -> SearchResponse:
    """Search after the debounce delay; a newer query from *client_key* wins."""
    debouncer = debouncer or get_debouncer()
    try:
        return await debouncer.submit(client_key, lambda: search(query, scope, user))
    except Superseded:
        return SearchResponse(query=query.strip(), scope=scope, status="superseded", source="none")
