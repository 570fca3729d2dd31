"""Seeder that creates demo fixtures and plays out random goals.

Run this against a running server during development so viewers following
`/events` have something to watch.

Usage:
  ADMIN_TOKEN=... python scripts/run_seeder.py --interval 2 --count 20

The script is intentionally small and synchronous to be easy to run in dev.
"""
from __future__ import annotations

import argparse
import json
import random
import time
from typing import List, Optional

from livescore.client import ScoreboardClient
from livescore.config import Settings
from livescore.score import SIDES, step_score

FIXTURES = [
    ("Arsenal", "Chelsea"),
    ("Liverpool", "Everton"),
    ("Barcelona", "Real Madrid"),
    ("Inter", "Milan"),
]


def run_seeder(client: ScoreboardClient, interval: float = 2.0, count: int = 20, rng: Optional[random.Random] = None) -> List[dict]:
    """Create the demo fixtures, then score `count` random goals `interval` seconds apart."""
    rng = rng or random.Random()
    matches = [client.create_match(t1, t2) for t1, t2 in FIXTURES]
    for m in matches:
        print(f"Created match {m['id']}: {m['team1']} vs {m['team2']}")

    for i in range(1, count + 1):
        target = rng.choice(matches)
        side = rng.choice(SIDES)
        target.update(client.update_match(target["id"], score=step_score(target["score"], side)))
        print(f"Goal #{i}: {json.dumps(target)}")
        if interval:
            time.sleep(interval)
    return matches


if __name__ == "__main__":
    p = argparse.ArgumentParser()
    p.add_argument("--server-url", default=None)
    p.add_argument("--interval", type=float, default=2.0)
    p.add_argument("--count", type=int, default=20)
    args = p.parse_args()

    settings = Settings.from_env()
    client = ScoreboardClient(args.server_url or settings.server_url, admin_token=settings.admin_token)
    try:
        run_seeder(client, args.interval, args.count)
    finally:
        client.close()
