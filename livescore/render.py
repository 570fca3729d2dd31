"""Plain-text rendering of the board for terminals."""
from __future__ import annotations

from typing import Any, Dict, List

from livescore.client import LiveMirror

WIDTH = 60


def connection_label(live: bool) -> str:
    return "SERVER CONNECTED" if live else "OFFLINE"


def match_line(match: Dict[str, Any], show_id: bool = False, marker: str = " ") -> str:
    left = str(match.get("team1", "")).rjust(22)
    right = str(match.get("team2", "")).ljust(22)
    score = str(match.get("score", "")).center(11)
    line = f"{marker} {left} {score} {right}"
    if show_id:
        line = f"[{match.get('id')}] {line}"
    return line.rstrip()


def header(mirror: LiveMirror, server_url: str) -> List[str]:
    return [
        "FOOTBALL LIVE".ljust(WIDTH - 20) + connection_label(mirror.live).rjust(20),
        "OFFICIAL MATCH DATA FEED".ljust(WIDTH - 20) + server_url[-20:].rjust(20),
        "=" * WIDTH,
    ]


def render_admin(mirror: LiveMirror, server_url: str) -> str:
    lines = header(mirror, server_url)
    lines.append(f"Live Matches  ({len(mirror.matches)} MATCHES LIVE)")
    if not mirror.matches:
        lines.append("No matches yet")
    for m in mirror.matches:
        lines.append(match_line(m, show_id=True))
    return "\n".join(lines)


def render_match_center(match: Dict[str, Any]) -> List[str]:
    return [
        "-" * WIDTH,
        "MATCH CENTER".center(WIDTH),
        "LIVE COVERAGE".center(WIDTH),
        str(match.get("team1", "")).center(WIDTH),
        "VS".center(WIDTH),
        str(match.get("team2", "")).center(WIDTH),
        str(match.get("score", "")).center(WIDTH),
    ]


def render_viewer(mirror: LiveMirror, server_url: str) -> str:
    lines = header(mirror, server_url)
    lines.append("Matchday Feed")
    if not mirror.matches:
        lines.append("Waiting for match data...")
    for m in mirror.matches:
        marker = ">" if m.get("id") == mirror.selected_id else " "
        lines.append(match_line(m, marker=marker))
    selected = mirror.selected
    if selected is not None:
        lines.extend(render_match_center(selected))
    else:
        lines.append("-" * WIDTH)
        lines.append("Pick a match with --select ID to follow it live.")
    return "\n".join(lines)


def render_board(mirror: LiveMirror, server_url: str, admin: bool = False) -> str:
    if admin:
        return render_admin(mirror, server_url)
    return render_viewer(mirror, server_url)
