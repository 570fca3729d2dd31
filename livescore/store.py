"""In-memory match store.

The store is the single owner of match records. It is a plain object so the
web app can hold one instance on ``app.state`` and tests can build their own.
Every mutation is synchronous; callers that need to notify subscribers pass
an ``on_change`` callback which receives the fresh snapshot.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from livescore.score import DEFAULT_SCORE, ScoreFormatError, normalize_score

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for errors raised by MatchStore."""


class ValidationError(StoreError):
    pass


class MatchNotFound(StoreError):
    def __init__(self, match_id: int) -> None:
        super().__init__("Match not found")
        self.match_id = match_id


@dataclass
class Match:
    id: int
    team1: str
    team2: str
    score: str = DEFAULT_SCORE

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _clean_name(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class MatchStore:
    """Ordered list of matches plus a monotonic id counter.

    Ids start at 1 and are never reused, even after a delete.
    """

    def __init__(self, on_change: Optional[Callable[[List[Dict[str, Any]]], Any]] = None) -> None:
        self._matches: List[Match] = []
        self._next_id = 1
        self.on_change = on_change

    def __len__(self) -> int:
        return len(self._matches)

    def list(self) -> List[Dict[str, Any]]:
        """Return a snapshot of every match as plain dicts."""
        return [m.to_dict() for m in self._matches]

    def get(self, match_id: int) -> Match:
        for m in self._matches:
            if m.id == match_id:
                return m
        raise MatchNotFound(match_id)

    def create(self, team1: Any, team2: Any) -> Match:
        t1, t2 = _clean_name(team1), _clean_name(team2)
        if not t1 or not t2:
            raise ValidationError("team1 and team2 are required")
        match = Match(id=self._next_id, team1=t1, team2=t2)
        self._next_id += 1
        self._matches.append(match)
        logger.info("created match %d: %s vs %s", match.id, t1, t2)
        self._changed()
        return match

    def update(self, match_id: int, patch: Optional[Mapping[str, Any]] = None) -> Match:
        """Apply a partial update of team names and/or score.

        The score is validated before anything is written, so a rejected
        update leaves the record untouched. Blank team names are ignored.
        """
        match = self.get(match_id)
        patch = patch or {}

        score = None
        if patch.get("score"):
            try:
                score = normalize_score(str(patch["score"]).strip())
            except ScoreFormatError as exc:
                raise ValidationError(str(exc)) from exc

        t1 = _clean_name(patch.get("team1"))
        t2 = _clean_name(patch.get("team2"))
        if t1:
            match.team1 = t1
        if t2:
            match.team2 = t2
        if score is not None:
            match.score = score
        logger.info("updated match %d: %s %s %s", match.id, match.team1, match.score, match.team2)
        self._changed()
        return match

    def delete(self, match_id: int) -> None:
        match = self.get(match_id)
        self._matches.remove(match)
        logger.info("deleted match %d", match_id)
        self._changed()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.list())
