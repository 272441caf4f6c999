# MatchSnapshot + parsing from score_update packets
# src/bot_core/snapshot.py
"""
Match snapshot structures for bot_core.

A MatchSnapshot is the scoreboard view the server pushes periodically
(`score_update` packets): one TeamState per team and one PlayerState per
player, each carrying a free-form metadata mapping. The CTF layer only reads
two counters out of that metadata:

    team.metadata["flagCaptures"]
    player.metadata["flagPickups"]

Design goals:
- Keep these types close to what arrives on the wire.
- Never mutate a snapshot after construction; newer data means a new snapshot.
- Parsing is tolerant: garbage entries are skipped, not raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple


log = logging.getLogger(__name__)

FLAG_CAPTURES_KEY = "flagCaptures"
FLAG_PICKUPS_KEY = "flagPickups"


def _counter(metadata: Mapping[str, Any], key: str) -> int:
    """Read an integer counter, treating missing / null / garbage as 0."""
    value = metadata.get(key)
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


# ---------------------------------------------------------------------------
# Snapshot types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TeamState:
    """Per-team scoreboard entry. `name` is unique within a snapshot."""

    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def flag_captures(self) -> int:
        return _counter(self.metadata, FLAG_CAPTURES_KEY)


@dataclass(frozen=True)
class PlayerState:
    """Per-player scoreboard entry. `username` is unique within a snapshot."""

    username: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def flag_pickups(self) -> int:
        return _counter(self.metadata, FLAG_PICKUPS_KEY)


@dataclass(frozen=True)
class MatchSnapshot:
    """
    Point-in-time match state.

    Teams and players keep the order the server sent them in; the snapshot
    differ relies on that order for deterministic event emission.
    """

    teams: Tuple[TeamState, ...] = ()
    players: Tuple[PlayerState, ...] = ()

    def find_team(self, name: str) -> Optional[TeamState]:
        for team in self.teams:
            if team.name == name:
                return team
        return None

    def find_player(self, username: str) -> Optional[PlayerState]:
        for player in self.players:
            if player.username == username:
                return player
        return None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe view, used by monitoring."""
        return {
            "teams": [
                {"name": t.name, "metadata": dict(t.metadata)} for t in self.teams
            ],
            "players": [
                {"username": p.username, "metadata": dict(p.metadata)}
                for p in self.players
            ],
        }


# ---------------------------------------------------------------------------
# Packet adapter (score_update payload -> MatchSnapshot)
# ---------------------------------------------------------------------------


def _metadata(entry: Mapping[str, Any]) -> Dict[str, Any]:
    raw = entry.get("metadata")
    return dict(raw) if isinstance(raw, Mapping) else {}


def _entries(pkt: Mapping[str, Any], key: str) -> Sequence[Any]:
    raw = pkt.get(key)
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        log.debug("Ignoring non-list %r in score_update: %r", key, raw)
        return ()
    return raw


def parse_match_snapshot(pkt: Optional[Mapping[str, Any]]) -> Optional[MatchSnapshot]:
    """
    Convert a `score_update` payload into a MatchSnapshot.

    Expected fields:
        - "teams": list of {"name": str, "metadata": {...}}
        - "players": list of {"username": str, "metadata": {...}}

    Returns None when the payload itself is missing or not a mapping. Entries
    without a name/username are dropped, and a "teams" or "players" value
    that is not a list counts as empty.
    """
    if not isinstance(pkt, Mapping):
        return None

    teams = []
    for entry in _entries(pkt, "teams"):
        if not isinstance(entry, Mapping) or entry.get("name") is None:
            log.debug("Skipping malformed team entry: %r", entry)
            continue
        teams.append(TeamState(name=str(entry["name"]), metadata=_metadata(entry)))

    players = []
    for entry in _entries(pkt, "players"):
        if not isinstance(entry, Mapping) or entry.get("username") is None:
            log.debug("Skipping malformed player entry: %r", entry)
            continue
        players.append(
            PlayerState(username=str(entry["username"]), metadata=_metadata(entry))
        )

    return MatchSnapshot(teams=tuple(teams), players=tuple(players))


__all__ = [
    "FLAG_CAPTURES_KEY",
    "FLAG_PICKUPS_KEY",
    "MatchSnapshot",
    "PlayerState",
    "TeamState",
    "parse_match_snapshot",
]
