#!/usr/bin/env python3
"""
tools/smoke_ctf.py

Minimal harness to sanity-check the CTF event pipeline offline.

    - Uses FakePacketClient (no real network) and a WorldTracker
    - Replays a scripted match: flag spawn, pickup, drop, capture
    - Prints every canonical event that fired, then the flag queries

Usage:
    python tools/smoke_ctf.py [--profile match] [--debug] [--log PATH]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, List, Tuple

# ---------------------------------------------------------------------------
# Ensure src/ is on sys.path when running as a script
# ---------------------------------------------------------------------------

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from rich.console import Console  # noqa: E402
from rich.table import Table  # noqa: E402

from bot_core import WorldTracker  # type: ignore[import]  # noqa: E402
from bot_core.testing.fakes import FakePacketClient  # type: ignore[import]  # noqa: E402
from ctf import CTF_EVENTS, CtfUtils  # type: ignore[import]  # noqa: E402
from ctf.logging_config import configure_logging  # type: ignore[import]  # noqa: E402
from env.loader import load_environment  # type: ignore[import]  # noqa: E402
from monitoring import EventBus, JsonFileLogger  # type: ignore[import]  # noqa: E402


BANNER_ID = 1
STONE_ID = 2


def _entity(eid: int, pos: Tuple[float, float, float], item_id: int | None = None,
            username: str | None = None) -> dict:
    data: dict = {
        "entity_id": eid,
        "kind": "player" if username else "item",
        "position": {"x": pos[0], "y": pos[1], "z": pos[2]},
    }
    if username:
        data["username"] = username
    if item_id is not None:
        data["metadata"] = {"8": {"itemId": item_id}}
    return data


def _scoreboard(red_caps: int, bob_pickups: int) -> dict:
    return {
        "teams": [
            {"name": "BLUE", "metadata": {"flagCaptures": 0}},
            {"name": "RED", "metadata": {"flagCaptures": red_caps}},
        ],
        "players": [
            {"username": "alice", "metadata": {"flagPickups": 0}},
            {"username": "bob", "metadata": {"flagPickups": bob_pickups}},
        ],
    }


def replay_match(client: FakePacketClient, spawn: Any) -> None:
    """Scripted packet sequence for one flag cycle."""
    client.emit("item_registry", {"items": [
        {"id": BANNER_ID, "name": "white_banner"},
        {"id": STONE_ID, "name": "stone"},
    ]})
    client.emit("position_update", {"x": 90.0, "y": 63.0, "z": -380.0})
    client.emit("score_update", _scoreboard(0, 0))

    flag_block = {"name": "white_banner", "position": spawn.to_dict()}
    client.emit("block_update", {"old": None, "new": flag_block})
    client.emit("entity_spawn", {"entity": _entity(10, (92.0, 63.0, -381.0), STONE_ID)})

    # bob grabs the flag; the scoreboard catches up afterwards
    client.emit("block_update", {"old": flag_block, "new": {"name": "air", "position": spawn.to_dict()}})
    client.emit("score_update", _scoreboard(0, 1))

    # bob is killed and the flag drops
    client.emit("item_drop", {"entity": _entity(11, (120.0, 63.0, -386.0), BANNER_ID)})
    client.emit("player_collect", {
        "collector": _entity(3, (120.0, 63.0, -386.0), username="bob"),
        "collected": _entity(11, (120.0, 63.0, -386.0), BANNER_ID),
    })
    client.emit("set_slot", {"slot": 0, "item": {"id": BANNER_ID, "count": 1}})
    client.emit("score_update", _scoreboard(1, 2))


def _profile_log_path(raw: str | None) -> Path | None:
    """Profile log paths are relative to the project root, not the cwd."""
    if not raw:
        return None
    path = Path(raw)
    return path if path.is_absolute() else ROOT / path


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Replay a scripted CTF match offline.")
    parser.add_argument("--profile", default=None, help="env.yaml profile to load")
    parser.add_argument("--debug", action="store_true", help="verbose ctf logging")
    parser.add_argument("--log", type=Path, default=None, help="JSONL monitoring log path")
    args = parser.parse_args(argv)

    env = load_environment(profile=args.profile)
    configure_logging(logging.INFO, debug_ctf=args.debug or env.debug)

    client = FakePacketClient()
    tracker = WorldTracker(client, item_metadata_slot=env.ctf.item_metadata_slot)
    monitor = EventBus()

    log_path = args.log or _profile_log_path(env.monitoring_log)
    sink = JsonFileLogger(log_path, monitor) if log_path else None

    fired: List[Tuple[str, str]] = []
    try:
        utils = CtfUtils.from_env(env, client, tracker, monitor=monitor)
        if args.debug:
            utils.set_debug(True)

        for name in CTF_EVENTS:
            utils.on(name, lambda *payload, _name=name: fired.append(
                (_name, ", ".join(repr(p) for p in payload))
            ))

        client.connect()
        replay_match(client, env.ctf.flag_spawn)
        client.disconnect()
    finally:
        if sink is not None:
            sink.close()

    console = Console()
    table = Table(title=f"CTF events ({env.name} / {env.arena_name})")
    table.add_column("#", justify="right")
    table.add_column("event")
    table.add_column("payload")
    for idx, (name, payload) in enumerate(fired, start=1):
        table.add_row(str(idx), name, payload)
    console.print(table)

    console.print(f"flag location: {utils.get_flag_location()}")
    console.print(f"has flag: {utils.has_flag()}")
    console.print(f"RED score zone: {utils.get_score_location('RED')}")

    if sink is not None:
        console.print(f"monitoring log: {sink.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
