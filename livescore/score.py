"""Score grammar.

A score is two non-negative integers separated by a colon, with any amount
of whitespace around either number: ``2:1``, `` 2 : 1 `` and ``2  :1`` are
all the same score. The canonical text form is ``"2 : 1"``; only spacing is
normalized, the digits are kept as written (``02:1`` -> ``"02 : 1"``).
"""
from __future__ import annotations

import re
from typing import NamedTuple, Tuple

# ASCII digits only; `\d` would also accept other Unicode decimal digits.
SCORE_RE = re.compile(r"^\s*([0-9]+)\s*:\s*([0-9]+)\s*$")

DEFAULT_SCORE = "0 : 0"

SIDES = ("home", "away")

FORMAT_MESSAGE = "Score must be: number : number (e.g. 3 : 2)"


class ScoreFormatError(ValueError):
    pass


class Score(NamedTuple):
    home: int
    away: int

    def __str__(self) -> str:
        return f"{self.home} : {self.away}"


def split_score(text: str) -> Tuple[str, str]:
    """Return the two digit groups of `text` exactly as written."""
    m = SCORE_RE.match(str(text))
    if not m:
        raise ScoreFormatError(FORMAT_MESSAGE)
    return m.group(1), m.group(2)


def parse_score(text: str) -> Score:
    """Parse `text` into a Score, raising ScoreFormatError if it doesn't match."""
    home, away = split_score(text)
    try:
        return Score(int(home), int(away))
    except ValueError:
        # int() refuses digit strings past the interpreter's conversion limit
        raise ScoreFormatError(FORMAT_MESSAGE) from None


def normalize_score(text: str) -> str:
    home, away = split_score(text)
    return f"{home} : {away}"


def is_valid_score(text: str) -> bool:
    return SCORE_RE.match(str(text)) is not None


def step_score(text: str, side: str, delta: int = 1) -> str:
    """Move one side of a score by `delta`, never going below zero.

    Unparsable input counts as ``0 : 0`` so an editor can always recover.
    """
    if side not in SIDES:
        raise ValueError(f"side must be one of {SIDES}, got {side!r}")
    try:
        score = parse_score(text)
    except ScoreFormatError:
        score = Score(0, 0)
    if side == "home":
        score = score._replace(home=max(0, score.home + delta))
    else:
        score = score._replace(away=max(0, score.away + delta))
    return str(score)
