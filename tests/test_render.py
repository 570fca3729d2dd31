from livescore.client import LiveMirror
from livescore.render import connection_label, render_board

M1 = {"id": 1, "team1": "Arsenal", "team2": "Chelsea", "score": "2 : 1"}
M2 = {"id": 2, "team1": "Inter", "team2": "Milan", "score": "0 : 0"}


def _mirror(*matches, live=False):
    m = LiveMirror()
    m.apply(list(matches))
    m.live = live
    return m


def test_connection_label():
    assert connection_label(True) == "SERVER CONNECTED"
    assert connection_label(False) == "OFFLINE"


def test_admin_board_lists_ids_and_count():
    out = render_board(_mirror(M1, M2, live=True), "http://localhost:5000", admin=True)
    assert "SERVER CONNECTED" in out
    assert "2 MATCHES LIVE" in out
    assert "[1]" in out and "[2]" in out
    assert "2 : 1" in out


def test_admin_board_empty():
    assert "No matches yet" in render_board(_mirror(), "http://x", admin=True)


def test_viewer_board_empty_and_without_selection():
    out = render_board(_mirror(), "http://x")
    assert "Waiting for match data..." in out
    assert "OFFLINE" in out
    assert "MATCH CENTER" not in out


def test_viewer_board_shows_match_center_for_selection():
    mirror = _mirror(M1, M2, live=True)
    mirror.select(1)
    out = render_board(mirror, "http://x")
    assert "MATCH CENTER" in out
    assert "LIVE COVERAGE" in out
    lines = out.splitlines()
    assert any(line.startswith(">") and "Arsenal" in line for line in lines)
    assert "[1]" not in out
