# typed raw world events + decoding from normalized packets
# src/bot_core/raw_events.py
"""
Raw world events for bot_core.

The PacketClient hands out loose mappings. This module turns the four
packet types the CTF layer reacts to into a closed set of typed events:

    BlockUpdate(old, new)
    EntitySpawn(entity)
    ItemDrop(entity)
    PlayerCollect(collector, collected)

Decoders never raise on bad input; they return None and the packet is
dropped.

Packet shapes (normalized by the client layer):

    block:  {"name": str, "position": {"x", "y", "z"}}   (or flat x/y/z)
    entity: {"entity_id": int, "kind": str, "position": {...} (or flat x/y/z),
             "username": str | None, "metadata": {slot: value}}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from interfaces.types import Block, Entity, Vec3


log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BlockUpdate:
    """A block changed state. `old` is None when the cell was not loaded."""

    old: Optional[Block]
    new: Block


@dataclass(frozen=True)
class EntitySpawn:
    entity: Entity


@dataclass(frozen=True)
class ItemDrop:
    entity: Entity


@dataclass(frozen=True)
class PlayerCollect:
    """`collector` picked up the item entity `collected`."""

    collector: Entity
    collected: Entity


RawWorldEvent = Union[BlockUpdate, EntitySpawn, ItemDrop, PlayerCollect]


# ---------------------------------------------------------------------------
# Field decoding helpers
# ---------------------------------------------------------------------------


def _position(data: Mapping[str, Any]) -> Optional[Vec3]:
    raw = data.get("position")
    source = raw if isinstance(raw, Mapping) else data
    try:
        return Vec3.from_mapping(source)
    except (KeyError, TypeError, ValueError, OverflowError):
        return None


def _metadata(raw: Any) -> Dict[int, Any]:
    """
    Normalize entity metadata to {int slot: value}.

    Accepts a mapping (JSON transports turn slot keys into strings) or a
    list indexed by slot, which is how the server sends it.
    """
    if isinstance(raw, Mapping):
        out: Dict[int, Any] = {}
        for key, value in raw.items():
            try:
                out[int(key)] = value
            except (TypeError, ValueError, OverflowError):
                continue
        return out
    if isinstance(raw, (list, tuple)):
        return {idx: value for idx, value in enumerate(raw) if value is not None}
    return {}


def decode_block(data: Any) -> Optional[Block]:
    if not isinstance(data, Mapping):
        return None
    name = data.get("name")
    pos = _position(data)
    if name is None or pos is None:
        return None
    return Block(name=str(name), position=pos)


def decode_entity(data: Any) -> Optional[Entity]:
    if not isinstance(data, Mapping):
        return None
    try:
        entity_id = int(data.get("entity_id", data.get("id")))
    except (TypeError, ValueError, OverflowError):
        return None

    pos = _position(data)
    if pos is None:
        pos = Vec3(0.0, 0.0, 0.0)

    username = data.get("username")
    return Entity(
        entity_id=entity_id,
        kind=str(data.get("kind", data.get("type", "unknown"))),
        position=pos,
        username=str(username) if username is not None else None,
        metadata=_metadata(data.get("metadata")),
    )


def item_id_from_metadata(entity: Entity, slot: int) -> Optional[int]:
    """
    Extract the carried item id from an item entity's metadata slot.

    The slot value is {"itemId": int, ...}. Anything else yields None.
    """
    value = entity.metadata.get(slot)
    if not isinstance(value, Mapping):
        return None
    item_id = value.get("itemId")
    if item_id is None:
        return None
    try:
        return int(item_id)
    except (TypeError, ValueError, OverflowError):
        return None


# ---------------------------------------------------------------------------
# Packet decoders
# ---------------------------------------------------------------------------


def decode_block_update(pkt: Mapping[str, Any]) -> Optional[BlockUpdate]:
    new = decode_block(pkt.get("new"))
    if new is None:
        log.debug("Dropping block_update without a usable new block: %r", pkt)
        return None
    return BlockUpdate(old=decode_block(pkt.get("old")), new=new)


def decode_entity_spawn(pkt: Mapping[str, Any]) -> Optional[EntitySpawn]:
    entity = decode_entity(pkt.get("entity"))
    if entity is None:
        log.debug("Dropping entity_spawn without a usable entity: %r", pkt)
        return None
    return EntitySpawn(entity=entity)


def decode_item_drop(pkt: Mapping[str, Any]) -> Optional[ItemDrop]:
    entity = decode_entity(pkt.get("entity"))
    if entity is None:
        log.debug("Dropping item_drop without a usable entity: %r", pkt)
        return None
    return ItemDrop(entity=entity)


def decode_player_collect(pkt: Mapping[str, Any]) -> Optional[PlayerCollect]:
    collector = decode_entity(pkt.get("collector"))
    collected = decode_entity(pkt.get("collected"))
    if collector is None or collected is None:
        log.debug("Dropping player_collect with missing entities: %r", pkt)
        return None
    return PlayerCollect(collector=collector, collected=collected)


__all__ = [
    "BlockUpdate",
    "EntitySpawn",
    "ItemDrop",
    "PlayerCollect",
    "RawWorldEvent",
    "decode_block",
    "decode_block_update",
    "decode_entity",
    "decode_entity_spawn",
    "decode_item_drop",
    "decode_player_collect",
    "item_id_from_metadata",
]
