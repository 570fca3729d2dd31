"""HTTP client for the score board server.

`ScoreboardClient` wraps the REST endpoints and the `/events` stream using
HTTPX (sync client). `LiveMirror` is the client's disposable copy of the
server state: it is replaced wholesale by every snapshot and tracks whether
the stream is currently connected.

The client never retries. A failed mutation raises `ScoreboardError` with
the server's message and leaves the mirror as it was.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

import httpx

logger = logging.getLogger(__name__)


class ScoreboardError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def parse_sse(lines: Iterable[str]) -> Iterator[List[Dict[str, Any]]]:
    """Turn raw SSE lines into decoded snapshots.

    Comment lines (keep-alives) are skipped, and so is any event whose data
    isn't valid JSON.
    """
    data: List[str] = []
    for line in lines:
        line = line.rstrip("\r")
        if not line:
            if data:
                payload = "\n".join(data)
                data = []
                try:
                    yield json.loads(payload)
                except ValueError:
                    logger.debug("ignoring undecodable event: %r", payload[:80])
            continue
        if line.startswith(":"):
            continue
        if line.startswith("data:"):
            value = line[5:]
            if value.startswith(" "):
                value = value[1:]
            data.append(value)


class LiveMirror:
    """Local read-only copy of the match list."""

    def __init__(self) -> None:
        self.matches: List[Dict[str, Any]] = []
        self.live = False
        self.selected_id: Optional[int] = None

    def apply(self, snapshot: List[Dict[str, Any]]) -> None:
        self.matches = list(snapshot)
        if self.selected_id is not None and self.find(self.selected_id) is None:
            self.selected_id = None

    def find(self, match_id: int) -> Optional[Dict[str, Any]]:
        for m in self.matches:
            if m.get("id") == match_id:
                return m
        return None

    def select(self, match_id: Optional[int]) -> None:
        self.selected_id = match_id

    @property
    def selected(self) -> Optional[Dict[str, Any]]:
        if self.selected_id is None:
            return None
        return self.find(self.selected_id)


class ScoreboardClient:
    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        admin_token: Optional[str] = None,
        timeout: float = 10.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.admin_token = admin_token
        self.timeout = timeout
        # created lazily so constructing a client never touches the network
        self._client = http_client

    def _client_instance(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    def _headers(self) -> Dict[str, str]:
        return {"X-Admin-Token": self.admin_token or ""}

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, action: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = self._client_instance().request(method, self._url(path), **kwargs)
        except httpx.HTTPError as exc:
            raise ScoreboardError(f"{action} failed ({exc})") from exc
        if resp.status_code >= 400:
            message = None
            try:
                message = (resp.json() or {}).get("error")
            except (ValueError, AttributeError):
                message = None
            raise ScoreboardError(message or f"{action} failed ({resp.status_code})", resp.status_code)
        return resp

    def list_matches(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/matches", "List").json()

    def get_match(self, match_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/matches/{match_id}", "Lookup").json()

    def create_match(self, team1: str, team2: str) -> Dict[str, Any]:
        resp = self._request(
            "POST", "/matches", "Create",
            json={"team1": team1, "team2": team2},
            headers=self._headers(),
        )
        return resp.json()

    def update_match(
        self,
        match_id: int,
        team1: Optional[str] = None,
        team2: Optional[str] = None,
        score: Optional[str] = None,
    ) -> Dict[str, Any]:
        patch = {k: v for k, v in (("team1", team1), ("team2", team2), ("score", score)) if v is not None}
        resp = self._request(
            "PUT", f"/matches/{match_id}", "Update",
            json=patch,
            headers=self._headers(),
        )
        return resp.json()

    def delete_match(self, match_id: int) -> None:
        self._request("DELETE", f"/matches/{match_id}", "Delete", headers=self._headers())

    def iter_snapshots(self) -> Iterator[List[Dict[str, Any]]]:
        """Open `/events` and yield each snapshot as it arrives.

        Reads without a timeout; keep-alive comments keep idle proxies from
        closing the connection.
        """
        timeout = httpx.Timeout(self.timeout, read=None)
        with self._client_instance().stream("GET", self._url("/events"), timeout=timeout) as resp:
            resp.raise_for_status()
            yield from parse_sse(resp.iter_lines())

    def follow(
        self,
        mirror: LiveMirror,
        on_update: Optional[Callable[[LiveMirror], None]] = None,
        max_events: Optional[int] = None,
    ) -> LiveMirror:
        """Fill `mirror` from a fresh list, then keep it in sync from the stream.

        Returns when the stream ends, drops, or after `max_events` snapshots.
        A failed initial fetch is ignored since the stream opens with a
        snapshot anyway.
        """
        try:
            mirror.apply(self.list_matches())
            if on_update is not None:
                on_update(mirror)
        except ScoreboardError as exc:
            logger.debug("initial fetch failed: %s", exc)

        seen = 0
        snapshots = self.iter_snapshots()
        try:
            for snapshot in snapshots:
                mirror.live = True
                mirror.apply(snapshot)
                seen += 1
                if on_update is not None:
                    on_update(mirror)
                if max_events is not None and seen >= max_events:
                    break
        except httpx.HTTPError as exc:
            logger.info("event stream closed: %s", exc)
        finally:
            snapshots.close()
            mirror.live = False
        return mirror

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
