import importlib.util
import json
import random
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import livescore.cli as cli_mod
from livescore.client import ScoreboardClient
from livescore.config import Settings
from livescore.fastapi_app import create_app


@pytest.fixture
def app(monkeypatch):
    for name in ("ROLE", "ADMIN_TOKEN", "ADMIN_API_KEY", "SERVER_URL", "PORT"):
        monkeypatch.delenv(name, raising=False)
    app = create_app(Settings(admin_api_key="cli-key"))

    def fake_client(settings):
        return ScoreboardClient("http://testserver", admin_token=settings.admin_token, http_client=TestClient(app))

    monkeypatch.setattr(cli_mod, "_client", fake_client)
    return app


def test_add_update_bump_delete(app, capsys):
    base = ["--role", "admin", "--admin-token", "cli-key"]

    assert cli_mod.main(base + ["add", "Arsenal", "Chelsea"]) == 0
    assert json.loads(capsys.readouterr().out)["score"] == "0 : 0"

    assert cli_mod.main(base + ["update", "1", "--score", "2:1", "--team2", "Spurs"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {"id": 1, "team1": "Arsenal", "team2": "Spurs", "score": "2 : 1"}

    assert cli_mod.main(base + ["bump", "1", "away"]) == 0
    assert json.loads(capsys.readouterr().out)["score"] == "2 : 2"
    assert cli_mod.main(base + ["bump", "1", "home", "--delta", "-5"]) == 0
    assert json.loads(capsys.readouterr().out)["score"] == "0 : 2"

    assert cli_mod.main(base + ["delete", "1"]) == 0
    assert json.loads(capsys.readouterr().out) == {"ok": True, "deleted": 1}
    assert app.state.store.list() == []


def test_admin_commands_need_admin_role(app, capsys):
    rc = cli_mod.main(["--role", "user", "add", "A", "B"])
    out = json.loads(capsys.readouterr().out)
    assert rc == 2
    assert "admin role required" in out["error"]
    assert app.state.store.list() == []


def test_server_errors_exit_with_code_2(app, capsys):
    rc = cli_mod.main(["--role", "admin", "--admin-token", "cli-key", "update", "3", "--score", "1:1"])
    assert rc == 2
    assert json.loads(capsys.readouterr().out)["error"] == "Match not found"


def test_list_prints_board(app, capsys):
    app.state.store.create("Inter", "Milan")
    assert cli_mod.main(["list"]) == 0
    out = capsys.readouterr().out
    assert "Matchday Feed" in out
    assert "Inter" in out


def test_bad_environment_is_reported(monkeypatch, capsys):
    monkeypatch.setenv("PORT", "nope")
    assert cli_mod.main(["list"]) == 2
    assert "PORT" in json.loads(capsys.readouterr().out)["error"]


def test_seeder_script_plays_goals(app):
    path = Path(__file__).resolve().parent.parent / "scripts" / "run_seeder.py"
    spec = importlib.util.spec_from_file_location("run_seeder", path)
    seeder = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(seeder)

    client = ScoreboardClient("http://testserver", admin_token="cli-key", http_client=TestClient(app))
    seeder.run_seeder(client, interval=0, count=6, rng=random.Random(7))

    matches = app.state.store.list()
    assert len(matches) == len(seeder.FIXTURES)
    goals = sum(sum(int(x) for x in m["score"].split(" : ")) for m in matches)
    assert goals == 6
