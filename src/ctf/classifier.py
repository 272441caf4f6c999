# path: src/ctf/classifier.py
"""
World-event classifier.

Maps one raw world event to the canonical events it implies. Every function
here is pure: the only inputs are the event, the arena constants and an
item-id lookup.

    BlockUpdate   → FlagAvailable(flag_spawn) when a banner appears on the
                    spawn cell; nothing otherwise
    EntitySpawn   → ItemDetected, plus FlagAvailable(entity.position) for banners
    ItemDrop      → ItemDetected, plus FlagAvailable(item) for banners
    PlayerCollect → ItemCollected only

PlayerCollect deliberately never yields FlagObtained: a collect packet cannot
tell the flag apart from any other banner picked up in a scramble, so flag
pickups are only inferred from scoreboard snapshots (see ctf.differ).

Item entities without a readable item id, or with an id the registry does
not know, produce no events.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from bot_core.raw_events import (
    BlockUpdate,
    EntitySpawn,
    ItemDrop,
    PlayerCollect,
    RawWorldEvent,
    item_id_from_metadata,
)
from env.schema import CtfConstants
from interfaces.types import Entity, Item
from .events import CanonicalEvent, FlagAvailable, ItemCollected, ItemDetected


log = logging.getLogger(__name__)

ItemLookup = Callable[[int], Optional[Item]]


def _resolve_item(
    entity: Entity,
    lookup: ItemLookup,
    constants: CtfConstants,
) -> Optional[Item]:
    item_id = item_id_from_metadata(entity, constants.item_metadata_slot)
    if item_id is None:
        return None
    item = lookup(item_id)
    if item is None:
        log.debug("Unknown item id %s on entity %s", item_id, entity.entity_id)
    return item


def classify_block_update(
    event: BlockUpdate,
    constants: CtfConstants,
) -> List[CanonicalEvent]:
    new = event.new
    if new.position == constants.flag_spawn and constants.flag_drop_name in new.name:
        return [FlagAvailable(location=constants.flag_spawn)]
    return []


def _classify_item_entity(
    entity: Entity,
    lookup: ItemLookup,
    constants: CtfConstants,
) -> Tuple[Optional[Item], List[CanonicalEvent]]:
    item = _resolve_item(entity, lookup, constants)
    if item is None:
        return None, []
    return item, [ItemDetected(item=item, entity=entity)]


def classify_entity_spawn(
    event: EntitySpawn,
    lookup: ItemLookup,
    constants: CtfConstants,
) -> List[CanonicalEvent]:
    item, events = _classify_item_entity(event.entity, lookup, constants)
    if item is not None and constants.flag_drop_name in item.name:
        events.append(FlagAvailable(location=event.entity.position))
    return events


def classify_item_drop(
    event: ItemDrop,
    lookup: ItemLookup,
    constants: CtfConstants,
) -> List[CanonicalEvent]:
    item, events = _classify_item_entity(event.entity, lookup, constants)
    if item is not None and constants.flag_drop_name in item.name:
        # Drops report the item itself, not where it landed.
        events.append(FlagAvailable(location=item))
    return events


def classify_player_collect(
    event: PlayerCollect,
    lookup: ItemLookup,
    constants: CtfConstants,
) -> List[CanonicalEvent]:
    item = _resolve_item(event.collected, lookup, constants)
    if item is None:
        return []
    return [ItemCollected(collector=event.collector, item=item)]


def classify(
    event: RawWorldEvent,
    lookup: ItemLookup,
    constants: CtfConstants,
) -> List[CanonicalEvent]:
    """Dispatch a raw world event to its classifier."""
    if isinstance(event, BlockUpdate):
        return classify_block_update(event, constants)
    if isinstance(event, EntitySpawn):
        return classify_entity_spawn(event, lookup, constants)
    if isinstance(event, ItemDrop):
        return classify_item_drop(event, lookup, constants)
    if isinstance(event, PlayerCollect):
        return classify_player_collect(event, lookup, constants)
    raise TypeError(f"Unsupported raw world event: {type(event).__name__}")
