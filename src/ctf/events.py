# path: src/ctf/events.py
"""
Canonical CTF events.

These are the only things the CTF layer publishes:

    FlagObtained(player_username)     a player's flagPickups counter moved
    FlagAvailable(location)           the flag can be picked up; location is a
                                      Vec3 (spawn / entity spawn) or the Item
                                      itself (item drop)
    FlagScored(team_name)             a team's flagCaptures counter moved
    ItemDetected(item, entity)        an item entity spawned or was dropped
    ItemCollected(collector, item)    an entity picked up an item

Handlers receive the positional payload from `args()`, so a "flagScored"
handler is called as `fn(team_name)`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Tuple, Union

from interfaces.types import Entity, Item, Vec3


# ============================================================
# Errors
# ============================================================

class CtfError(ValueError):
    """Base class for CTF layer errors."""


class UnknownEventKind(CtfError):
    """Raised at registration time for an event name outside CtfEventKind."""

    def __init__(self, kind: Any) -> None:
        valid = ", ".join(k.value for k in CtfEventKind)
        super().__init__(
            f'Tried to register an event of "{kind}", which is not included '
            f"in the valid list of {valid}"
        )
        self.kind = kind


# ============================================================
# Event kinds
# ============================================================

class CtfEventKind(str, Enum):
    """Closed set of canonical event kinds. Values are the public event names."""

    FLAG_OBTAINED = "flagObtained"
    FLAG_AVAILABLE = "flagAvailable"
    FLAG_SCORED = "flagScored"
    ITEM_DETECTED = "itemDetected"
    ITEM_COLLECTED = "itemCollected"

    @classmethod
    def parse(cls, kind: Union["CtfEventKind", str]) -> "CtfEventKind":
        """Accept a member or its string value; raise UnknownEventKind otherwise."""
        if isinstance(kind, cls):
            return kind
        try:
            return cls(kind)
        except ValueError:
            raise UnknownEventKind(kind) from None


CTF_EVENTS: Tuple[str, ...] = tuple(k.value for k in CtfEventKind)


# ============================================================
# Event payloads
# ============================================================

FlagLocation = Union[Vec3, Item]


def _json_safe(value: Any) -> Any:
    if isinstance(value, Vec3):
        return value.to_dict()
    if isinstance(value, Item):
        return {"item_id": value.item_id, "name": value.name, "count": value.count}
    if isinstance(value, Entity):
        return {
            "entity_id": value.entity_id,
            "kind": value.kind,
            "username": value.username,
            "position": value.position.to_dict(),
        }
    return value


@dataclass(frozen=True)
class FlagObtained:
    kind: ClassVar[CtfEventKind] = CtfEventKind.FLAG_OBTAINED
    player_username: str

    def args(self) -> Tuple[Any, ...]:
        return (self.player_username,)


@dataclass(frozen=True)
class FlagAvailable:
    kind: ClassVar[CtfEventKind] = CtfEventKind.FLAG_AVAILABLE
    location: FlagLocation

    def args(self) -> Tuple[Any, ...]:
        return (self.location,)


@dataclass(frozen=True)
class FlagScored:
    kind: ClassVar[CtfEventKind] = CtfEventKind.FLAG_SCORED
    team_name: str

    def args(self) -> Tuple[Any, ...]:
        return (self.team_name,)


@dataclass(frozen=True)
class ItemDetected:
    kind: ClassVar[CtfEventKind] = CtfEventKind.ITEM_DETECTED
    item: Item
    entity: Entity

    def args(self) -> Tuple[Any, ...]:
        return (self.item, self.entity)


@dataclass(frozen=True)
class ItemCollected:
    kind: ClassVar[CtfEventKind] = CtfEventKind.ITEM_COLLECTED
    collector: Entity
    item: Item

    def args(self) -> Tuple[Any, ...]:
        return (self.collector, self.item)


CanonicalEvent = Union[FlagObtained, FlagAvailable, FlagScored, ItemDetected, ItemCollected]


def event_to_dict(event: CanonicalEvent) -> Dict[str, Any]:
    """JSON-safe view of a canonical event, for monitoring sinks."""
    return {
        "kind": event.kind.value,
        "args": [_json_safe(a) for a in event.args()],
    }
