# path: src/ctf/differ.py
"""
Snapshot differ.

Infers flag captures and flag pickups by comparing two consecutive match
snapshots. The server never sends "team X scored" directly; it only bumps
per-team `flagCaptures` and per-player `flagPickups` counters, so the only
way to see those moments is to watch the counters move.

Rules:
- No previous snapshot: nothing to compare, no events.
- A team / player missing from `previous` starts from 0.
- Any change fires, including a decrease (server corrections and resets
  are reported like increases).
- Entities present only in `previous` are ignored.
- Captures come first in `current` team order, then pickups in `current`
  player order.
"""

from __future__ import annotations

from typing import List, Optional

from bot_core.snapshot import MatchSnapshot
from .events import CanonicalEvent, FlagObtained, FlagScored


def diff_snapshots(
    previous: Optional[MatchSnapshot],
    current: MatchSnapshot,
) -> List[CanonicalEvent]:
    """Return the FlagScored / FlagObtained events implied by `previous` -> `current`."""
    if previous is None:
        return []

    events: List[CanonicalEvent] = []

    for team in current.teams:
        old = previous.find_team(team.name)
        old_captures = old.flag_captures if old is not None else 0
        if team.flag_captures != old_captures:
            events.append(FlagScored(team_name=team.name))

    for player in current.players:
        old = previous.find_player(player.username)
        old_pickups = old.flag_pickups if old is not None else 0
        if player.flag_pickups != old_pickups:
            events.append(FlagObtained(player_username=player.username))

    return events
