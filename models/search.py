"""Search box models."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from models.base import CamelModel

SearchScope = Literal["all", "classes", "students", "sessions", "reflections", "topics"]
SearchSource = Literal["backend", "fallback", "none"]
SearchStatus = Literal["ok", "superseded", "too_short"]


class SearchResult(CamelModel):
    id: str
    type: str
    title: str
    subtitle: str = ""
    url: str = ""


class SearchResponse(CamelModel):
    query: str
    scope: SearchScope = "all"
    status: SearchStatus = "ok"
    source: SearchSource = "none"
    results: list[SearchResult] = Field(default_factory=list)
