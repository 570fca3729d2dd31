"""Command line entrypoint for running and driving the score board.

Usage:
    livescore serve --port 5000
    livescore watch --select 1
    ROLE=admin ADMIN_TOKEN=... livescore add Arsenal Chelsea
    ROLE=admin livescore update 1 --score "3:1"
    ROLE=admin livescore bump 1 home
    ROLE=admin livescore delete 1

Client commands read SERVER_URL, ROLE and ADMIN_TOKEN from the environment
(or `.env`); the flags below override them.
"""
from __future__ import annotations

import argparse
import json
import logging
from typing import Optional

from livescore.client import LiveMirror, ScoreboardClient, ScoreboardError
from livescore.config import ROLES, Settings
from livescore.render import render_board
from livescore.score import SIDES, step_score

ADMIN_COMMANDS = ("add", "update", "bump", "delete")


def _client(settings: Settings) -> ScoreboardClient:
    return ScoreboardClient(settings.server_url, admin_token=settings.admin_token)


def _serve(settings: Settings, args: argparse.Namespace) -> int:
    import uvicorn

    from livescore.fastapi_app import create_app

    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level)
    return 0


def _watch(settings: Settings, args: argparse.Namespace) -> int:
    client = _client(settings)
    mirror = LiveMirror()
    mirror.select(args.select)

    def redraw(m: LiveMirror) -> None:
        print(render_board(m, settings.server_url, admin=settings.is_admin))
        print()

    try:
        client.follow(mirror, on_update=redraw, max_events=args.max_events)
    except KeyboardInterrupt:
        pass
    finally:
        client.close()
    return 0


def run_command(settings: Settings, args: argparse.Namespace) -> object:
    """Run a client command and return what should be printed."""
    if args.command in ADMIN_COMMANDS and not settings.is_admin:
        raise ScoreboardError("admin role required (set ROLE=admin)")

    client = _client(settings)
    try:
        if args.command == "list":
            mirror = LiveMirror()
            mirror.apply(client.list_matches())
            return render_board(mirror, settings.server_url, admin=settings.is_admin)
        if args.command == "add":
            return client.create_match(args.team1, args.team2)
        if args.command == "update":
            return client.update_match(args.id, team1=args.team1, team2=args.team2, score=args.score)
        if args.command == "bump":
            current = client.get_match(args.id)
            score = step_score(current.get("score", ""), args.side, args.delta)
            return client.update_match(args.id, score=score)
        if args.command == "delete":
            client.delete_match(args.id)
            return {"ok": True, "deleted": args.id}
    finally:
        client.close()
    raise ValueError(f"unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="livescore", description="Football live score board")
    p.add_argument("--server-url", required=False, help="Server base URL (overrides SERVER_URL)")
    p.add_argument("--role", required=False, choices=ROLES, help="Display role (overrides ROLE)")
    p.add_argument("--admin-token", required=False, help="Admin token (overrides ADMIN_TOKEN)")
    sub = p.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP/SSE server")
    serve.add_argument("--host", required=False)
    serve.add_argument("--port", type=int, required=False)

    watch = sub.add_parser("watch", help="Follow the live board")
    watch.add_argument("--select", type=int, required=False, help="Match id to show in the match center")
    watch.add_argument("--max-events", type=int, required=False, help="Stop after this many snapshots")

    sub.add_parser("list", help="Print the current board once")

    add = sub.add_parser("add", help="Create a match")
    add.add_argument("team1")
    add.add_argument("team2")

    update = sub.add_parser("update", help="Change team names and/or score")
    update.add_argument("id", type=int)
    update.add_argument("--team1", required=False)
    update.add_argument("--team2", required=False)
    update.add_argument("--score", required=False, help='e.g. "2 : 1"')

    bump = sub.add_parser("bump", help="Add to (or take from) one side's goals")
    bump.add_argument("id", type=int)
    bump.add_argument("side", choices=SIDES)
    bump.add_argument("--delta", type=int, default=1)

    delete = sub.add_parser("delete", help="Delete a match")
    delete.add_argument("id", type=int)
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(json.dumps({"ok": False, "error": str(exc)}))
        return 2
    if args.server_url:
        settings.server_url = args.server_url.rstrip("/")
    if args.role:
        settings.role = args.role
    if args.admin_token:
        settings.admin_token = args.admin_token

    if args.command == "serve":
        return _serve(settings, args)
    if args.command == "watch":
        return _watch(settings, args)

    try:
        res = run_command(settings, args)
    except Exception as exc:
        print(json.dumps({"ok": False, "error": str(exc)}))
        return 2

    print(res if isinstance(res, str) else json.dumps(res))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())  # pragma: no cover
