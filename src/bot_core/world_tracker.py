# track blocks/entities/inventory and answer world queries
# src/bot_core/world_tracker.py
"""
World tracker for bot_core.

Consumes normalized packets from a PacketClient and maintains a raw,
incrementally updated view of the world around the bot. It implements the
BotWorld protocol, so the CTF query helpers can run against it directly.

Rules:
- Never embed CTF rules here (flag names, spawn cells, scoring). The ctf
  package owns those.
- Keep storage minimal and "raw"; avoid bloated derived structures.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from interfaces.types import Block, Entity, Item, Vec3
from .net import (
    BLOCK_UPDATE,
    ENTITY_GONE,
    ENTITY_SPAWN,
    ITEM_DROP,
    ITEM_REGISTRY,
    PLAYER_COLLECT,
    POSITION_UPDATE,
    SET_SLOT,
    WINDOW_ITEMS,
    PacketClient,
)
from .raw_events import decode_block, decode_entity, item_id_from_metadata


log = logging.getLogger(__name__)

AIR_BLOCKS = frozenset({"air", "cave_air", "void_air"})

# Largest window the server opens (double chest + player inventory) is 90
# slots; anything past this is a corrupt packet.
MAX_WINDOW_SLOTS = 128


def _name_matches(candidate: str, wanted: str, partial_match: bool) -> bool:
    if partial_match:
        return wanted in candidate
    return candidate == wanted


class WorldTracker:
    """
    Maintains an incrementally updated view of blocks, entities and the
    bot's inventory, and answers BotWorld queries from it.

    Packet types consumed (see bot_core.net.client):

        - "position_update"  → bot position
        - "block_update"     → block placed / changed / removed
        - "entity_spawn"     → entity created
        - "item_drop"        → item entity dropped
        - "player_collect"   → item entity picked up (and thus gone)
        - "entity_gone"      → entity destroyed / out of range
        - "window_items"     → full inventory snapshot
        - "set_slot"         → single inventory slot changed
        - "item_registry"    → item id → name table
    """

    def __init__(self, client: PacketClient, *, item_metadata_slot: int = 8) -> None:
        self._client = client
        self._item_slot = item_metadata_slot

        self._position: Vec3 = Vec3(0.0, 64.0, 0.0)

        # Non-air blocks keyed by integer cell coordinate
        self._blocks: Dict[Vec3, Block] = {}

        # Entities keyed by numeric ID
        self._entities: Dict[int, Entity] = {}

        # Inventory slots; None is an empty slot
        self._inventory: List[Optional[Item]] = []

        # Item registry: numeric id -> definition
        self._items: Dict[int, Item] = {}

        self._register_handlers()

    # ------------------------------------------------------------------
    # Packet wiring
    # ------------------------------------------------------------------

    def _register_handlers(self) -> None:
        self._client.on_packet(POSITION_UPDATE, self._handle_position_update)
        self._client.on_packet(BLOCK_UPDATE, self._handle_block_update)
        self._client.on_packet(ENTITY_SPAWN, self._handle_entity_added)
        self._client.on_packet(ITEM_DROP, self._handle_entity_added)
        self._client.on_packet(PLAYER_COLLECT, self._handle_player_collect)
        self._client.on_packet(ENTITY_GONE, self._handle_entity_gone)
        self._client.on_packet(WINDOW_ITEMS, self._handle_window_items)
        self._client.on_packet(SET_SLOT, self._handle_set_slot)
        self._client.on_packet(ITEM_REGISTRY, self._handle_item_registry)

    # ------------------------------------------------------------------
    # Packet handlers
    # ------------------------------------------------------------------

    def _handle_position_update(self, pkt: Mapping[str, Any]) -> None:
        try:
            self._position = Vec3.from_mapping(pkt)
        except (KeyError, TypeError, ValueError, OverflowError):
            # Ignore malformed position updates.
            return

    def _handle_block_update(self, pkt: Mapping[str, Any]) -> None:
        block = decode_block(pkt.get("new"))
        if block is None:
            return
        cell = block.position.floored()
        if block.name in AIR_BLOCKS:
            self._blocks.pop(cell, None)
        else:
            self._blocks[cell] = block

    def _handle_entity_added(self, pkt: Mapping[str, Any]) -> None:
        entity = decode_entity(pkt.get("entity"))
        if entity is None:
            return
        self._entities[entity.entity_id] = entity

    def _handle_player_collect(self, pkt: Mapping[str, Any]) -> None:
        collected = decode_entity(pkt.get("collected"))
        if collected is None:
            return
        self._entities.pop(collected.entity_id, None)

    def _handle_entity_gone(self, pkt: Mapping[str, Any]) -> None:
        raw_ids = pkt.get("entity_ids")
        if raw_ids is None:
            raw_ids = [pkt.get("entity_id")]
        elif not isinstance(raw_ids, (list, tuple)):
            log.debug("Ignoring entity_gone with non-list ids: %r", raw_ids)
            return
        for raw_id in raw_ids:
            try:
                eid = int(raw_id)
            except (TypeError, ValueError, OverflowError):
                continue
            self._entities.pop(eid, None)

    def _stack_to_item(self, stack: Any) -> Optional[Item]:
        """Inventory stack {"id": int, "name"?: str, "count"?: int} -> Item."""
        if not isinstance(stack, Mapping):
            return None
        try:
            item_id = int(stack["id"])
        except (KeyError, TypeError, ValueError, OverflowError):
            return None
        name = stack.get("name")
        if name is None:
            known = self._items.get(item_id)
            if known is None:
                return None
            name = known.name
        try:
            count = int(stack.get("count", 1))
        except (TypeError, ValueError, OverflowError):
            count = 1
        return Item(item_id=item_id, name=str(name), count=count)

    def _handle_window_items(self, pkt: Mapping[str, Any]) -> None:
        items = pkt.get("items")
        if not isinstance(items, list):
            return
        if len(items) > MAX_WINDOW_SLOTS:
            log.debug("Ignoring window_items with %d slots", len(items))
            return
        self._inventory = [self._stack_to_item(entry) for entry in items]

    def _handle_set_slot(self, pkt: Mapping[str, Any]) -> None:
        try:
            idx = int(pkt.get("slot"))
        except (TypeError, ValueError, OverflowError):
            return
        if idx < 0 or idx >= MAX_WINDOW_SLOTS:
            log.debug("Ignoring set_slot for out-of-range slot %d", idx)
            return

        # Ensure list is large enough.
        while len(self._inventory) <= idx:
            self._inventory.append(None)
        self._inventory[idx] = self._stack_to_item(pkt.get("item"))

    def _handle_item_registry(self, pkt: Mapping[str, Any]) -> None:
        entries = pkt.get("items")
        if not isinstance(entries, list):
            return
        self.register_items(entries)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def position(self) -> Vec3:
        return self._position

    def register_items(self, entries: Iterable[Mapping[str, Any]]) -> None:
        """Add {"id": int, "name": str} entries to the item registry."""
        for entry in entries:
            try:
                item_id = int(entry["id"])
                name = str(entry["name"])
            except (KeyError, TypeError, ValueError, OverflowError):
                log.debug("Skipping malformed item registry entry: %r", entry)
                continue
            self._items[item_id] = Item(item_id=item_id, name=name)

    def entities(self) -> List[Entity]:
        return list(self._entities.values())

    def inventory(self) -> List[Item]:
        return [item for item in self._inventory if item is not None]

    # BotWorld --------------------------------------------------------

    def get_item_definition_by_id(self, item_id: int) -> Optional[Item]:
        return self._items.get(item_id)

    def find_block(
        self,
        name: str,
        *,
        max_distance: float,
        partial_match: bool = False,
    ) -> Optional[Block]:
        best: Optional[Block] = None
        best_dist = max_distance
        for block in self._blocks.values():
            if not _name_matches(block.name, name, partial_match):
                continue
            dist = block.position.distance_to(self._position)
            if dist <= best_dist:
                best, best_dist = block, dist
        return best

    def find_item_on_ground(
        self,
        name: str,
        *,
        max_distance: float,
        partial_match: bool = False,
    ) -> Optional[Entity]:
        best: Optional[Entity] = None
        best_dist = max_distance
        for entity in self._entities.values():
            item_id = item_id_from_metadata(entity, self._item_slot)
            if item_id is None:
                continue
            item = self._items.get(item_id)
            if item is None or not _name_matches(item.name, name, partial_match):
                continue
            dist = entity.position.distance_to(self._position)
            if dist <= best_dist:
                best, best_dist = entity, dist
        return best

    def inventory_contains_item(self, name: str, *, partial_match: bool = False) -> bool:
        return any(
            _name_matches(item.name, name, partial_match) for item in self.inventory()
        )


__all__ = ["MAX_WINDOW_SLOTS", "WorldTracker"]
