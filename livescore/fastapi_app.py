"""FastAPI application serving the live score board.

Routes:
    GET    /                 plain-text banner
    GET    /health           match and subscriber counts
    GET    /matches          full snapshot
    GET    /matches/{id}     single match
    POST   /matches          create (admin)
    PUT    /matches/{id}     partial update (admin)
    DELETE /matches/{id}     delete (admin)
    GET    /events           Server-Sent Events stream of snapshots

The store and broadcaster live on ``app.state`` and reach the handlers
through dependencies, so tests can build an app around their own objects.

Run with: `uvicorn livescore.fastapi_app:app --reload`
"""
from __future__ import annotations

import hmac
import logging
import re
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse

from livescore.broadcaster import Broadcaster
from livescore.config import Settings
from livescore.store import MatchNotFound, MatchStore, ValidationError

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def get_store(request: Request) -> MatchStore:
    return request.app.state.store


def get_broadcaster(request: Request) -> Broadcaster:
    return request.app.state.broadcaster


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _is_admin(settings: Settings, token: Optional[str]) -> bool:
    """Return True if `token` matches the configured ADMIN_API_KEY.

    With no key configured every caller is treated as admin.
    """
    expected = settings.admin_api_key
    if not expected:
        return True
    if not token:
        return False
    return hmac.compare_digest(token.encode(), expected.encode())


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _unauthorized() -> JSONResponse:
    return _error(401, "admin token missing or invalid")


ID_RE = re.compile(r"^[0-9]+$")
# decimal literals such as 1.5, -3 or 1e3 are numeric ids that can never match
NUMERIC_RE = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")
# ids start at 1
NO_SUCH_ID = 0


def _parse_id(raw: str) -> Optional[int]:
    """Return the integer id in `raw`, or None when it isn't numeric at all.

    Numeric text that doesn't name a whole number maps to NO_SUCH_ID so the
    lookup answers 404 rather than 400.
    """
    raw = raw.strip()
    if ID_RE.match(raw):
        try:
            return int(raw)
        except ValueError:
            # past the interpreter's int conversion limit
            return NO_SUCH_ID
    if NUMERIC_RE.match(raw):
        value = float(raw)
        if value.is_integer():
            return int(value)
        return NO_SUCH_ID
    return None


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("rejected request to %s: %s", request.url.path, exc.errors())
    return _error(400, "Request body must be a JSON object")


async def index() -> PlainTextResponse:
    return PlainTextResponse("Football Live Score Server (SSE)")


async def health(
    store: MatchStore = Depends(get_store),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> Dict[str, Any]:
    return {"ok": True, "matches": len(store), "subscribers": broadcaster.subscriber_count}


async def list_matches(store: MatchStore = Depends(get_store)) -> Any:
    return store.list()


async def get_match(match_id: str, store: MatchStore = Depends(get_store)) -> Any:
    mid = _parse_id(match_id)
    if mid is None:
        return _error(400, "Invalid id")
    try:
        return store.get(mid).to_dict()
    except MatchNotFound as exc:
        return _error(404, str(exc))


async def create_match(
    payload: Optional[dict] = Body(None),
    x_admin_token: Optional[str] = Header(None, alias="X-Admin-Token"),
    store: MatchStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Any:
    if not _is_admin(settings, x_admin_token):
        return _unauthorized()
    payload = payload or {}
    try:
        match = store.create(payload.get("team1"), payload.get("team2"))
    except ValidationError as exc:
        return _error(400, str(exc))
    return JSONResponse(status_code=201, content=match.to_dict())


async def update_match(
    match_id: str,
    payload: Optional[dict] = Body(None),
    x_admin_token: Optional[str] = Header(None, alias="X-Admin-Token"),
    store: MatchStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Any:
    if not _is_admin(settings, x_admin_token):
        return _unauthorized()
    mid = _parse_id(match_id)
    if mid is None:
        return _error(400, "Invalid id")
    try:
        match = store.update(mid, payload or {})
    except MatchNotFound as exc:
        return _error(404, str(exc))
    except ValidationError as exc:
        return _error(400, str(exc))
    return match.to_dict()


async def delete_match(
    match_id: str,
    x_admin_token: Optional[str] = Header(None, alias="X-Admin-Token"),
    store: MatchStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    if not _is_admin(settings, x_admin_token):
        return _unauthorized()
    mid = _parse_id(match_id)
    if mid is None:
        return _error(400, "Invalid id")
    try:
        store.delete(mid)
    except MatchNotFound as exc:
        return _error(404, str(exc))
    return Response(status_code=204)


async def events(
    store: MatchStore = Depends(get_store),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> StreamingResponse:
    """Subscribe to snapshots: the current list first, then one per mutation."""
    return StreamingResponse(
        broadcaster.stream(store.list),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[MatchStore] = None,
    broadcaster: Optional[Broadcaster] = None,
) -> FastAPI:
    """Build the application around a store and broadcaster.

    Anything not passed in is created from `settings` (or the environment).
    The store's change hook is pointed at the broadcaster so every
    successful mutation is fanned out.
    """
    settings = settings or Settings.from_env()
    if store is None:
        store = MatchStore()
    if broadcaster is None:
        broadcaster = Broadcaster(
            queue_size=settings.subscriber_queue_size,
            keepalive=settings.keepalive_seconds,
        )
    store.on_change = broadcaster.publish

    app = FastAPI(title="Football Live Score API")
    app.state.settings = settings
    app.state.store = store
    app.state.broadcaster = broadcaster

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _invalid_request)

    app.get("/")(index)
    app.get("/health")(health)
    app.get("/matches")(list_matches)
    app.get("/matches/{match_id}")(get_match)
    app.post("/matches")(create_match)
    app.put("/matches/{match_id}")(update_match)
    app.delete("/matches/{match_id}", status_code=204)(delete_match)
    app.get("/events")(events)

    if not settings.admin_api_key:
        logger.warning("ADMIN_API_KEY not set; admin endpoints are open")
    return app


app = create_app()
