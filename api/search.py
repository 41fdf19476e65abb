"""Search box endpoint.

Typing-as-you-search clients send every keystroke; by default each request
is debounced per client (``X-Client-Id`` header, else the user id) and a
request overtaken by a newer one answers ``status: superseded``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query

from api.deps import get_current_user
from models.search import SearchResponse, SearchScope
from models.user import CurrentUser
from services import search as search_service

router = APIRouter(prefix="/api", tags=["search"])


@router.get("/search", response_model=SearchResponse)
async def search(
    q: str = "",
    scope: SearchScope = "all",
    debounce: bool = Query(default=True),
    x_client_id: str | None = Header(default=None),
    user: CurrentUser = Depends(get_current_user),
):
    if not debounce:
        return await search_service.search(q, scope, user)
    client_key = x_client_id or user.user_id
    return await search_service.debounced_search(client_key, q, scope, user)
