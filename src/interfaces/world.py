# BotWorld interface definition
# src/interfaces/world.py

from __future__ import annotations

from typing import Optional, Protocol

from .types import Block, Entity, Item


class BotWorld(Protocol):
    """Read-only world and inventory queries offered by the bot body.

    This is the Mineflayer-adjacent layer the CTF helpers lean on:
    - block lookup around the bot
    - dropped-item lookup around the bot
    - inventory containment
    - item registry (id -> definition)
    """

    def find_block(
        self,
        name: str,
        *,
        max_distance: float,
        partial_match: bool = False,
    ) -> Optional[Block]:
        """Return the nearest block named `name` within `max_distance`, if any."""
        ...

    def find_item_on_ground(
        self,
        name: str,
        *,
        max_distance: float,
        partial_match: bool = False,
    ) -> Optional[Entity]:
        """Return the nearest dropped item entity matching `name`, if any."""
        ...

    def inventory_contains_item(
        self,
        name: str,
        *,
        partial_match: bool = False,
    ) -> bool:
        """True if any inventory stack matches `name`."""
        ...

    def get_item_definition_by_id(self, item_id: int) -> Optional[Item]:
        """Resolve a numeric item id; None if the registry does not know it."""
        ...
