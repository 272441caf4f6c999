# bot_core.net package
# src/bot_core/net/__init__.py
"""
Network layer for bot_core.

This package provides the PacketClient protocol (common interface) and the
names of the normalized packet types every client delivers.
"""

from __future__ import annotations

from .client import (
    BLOCK_UPDATE,
    ENTITY_GONE,
    ENTITY_SPAWN,
    ITEM_DROP,
    ITEM_REGISTRY,
    PLAYER_COLLECT,
    POSITION_UPDATE,
    SCORE_UPDATE,
    SET_SLOT,
    WINDOW_ITEMS,
    PacketClient,
    PacketHandler,
)

__all__ = [
    "BLOCK_UPDATE",
    "ENTITY_GONE",
    "ENTITY_SPAWN",
    "ITEM_DROP",
    "ITEM_REGISTRY",
    "PLAYER_COLLECT",
    "POSITION_UPDATE",
    "SCORE_UPDATE",
    "SET_SLOT",
    "WINDOW_ITEMS",
    "PacketClient",
    "PacketHandler",
]
