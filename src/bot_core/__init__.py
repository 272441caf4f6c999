# bot_core package
# src/bot_core/__init__.py
"""
bot_core package.

Exports:
    - WorldTracker: packet-fed world view implementing BotWorld
    - MatchSnapshot / TeamState / PlayerState: scoreboard snapshots
    - parse_match_snapshot: score_update payload -> MatchSnapshot
"""

from __future__ import annotations

from .snapshot import MatchSnapshot, PlayerState, TeamState, parse_match_snapshot
from .world_tracker import WorldTracker

__all__ = [
    "MatchSnapshot",
    "PlayerState",
    "TeamState",
    "WorldTracker",
    "parse_match_snapshot",
]
