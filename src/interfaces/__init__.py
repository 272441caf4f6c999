# src/interfaces/__init__.py
"""
Shared world primitives and the bot-body query interface.

Re-exports the data types every other package passes around (Vec3, Block,
Entity, Item) and the BotWorld protocol the CTF query helpers depend on.
"""

from __future__ import annotations

from .types import Block, Entity, Item, Vec3
from .world import BotWorld

__all__ = [
    "Block",
    "BotWorld",
    "Entity",
    "Item",
    "Vec3",
]
