# world primitives shared by bot_core and ctf: Vec3, Block, Entity, Item
# src/interfaces/types.py

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Vec3:
    """Immutable world coordinate. Equality is exact component equality."""
    x: float
    y: float
    z: float

    def distance_to(self, other: "Vec3") -> float:
        return math.sqrt(
            (self.x - other.x) ** 2
            + (self.y - other.y) ** 2
            + (self.z - other.z) ** 2
        )

    def floored(self) -> "Vec3":
        """Block-cell coordinate containing this point."""
        return Vec3(math.floor(self.x), math.floor(self.y), math.floor(self.z))

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Vec3":
        """
        Build a Vec3 from {"x", "y", "z"}.

        Raises KeyError / TypeError / ValueError on malformed input (including
        NaN or infinite components); callers on the packet path catch these and
        drop the packet.
        """
        x, y, z = float(data["x"]), float(data["y"]), float(data["z"])
        if not all(math.isfinite(c) for c in (x, y, z)):
            raise ValueError(f"Non-finite coordinate: {(x, y, z)!r}")
        return cls(x, y, z)


# ---------------------------------------------------------------------------
# Blocks, entities, items
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Block:
    """A block state at a world position, e.g. Block("white_banner", Vec3(...))."""
    name: str
    position: Vec3


@dataclass(frozen=True)
class Entity:
    """Entity as seen by the bot.

    `metadata` is the raw entity metadata keyed by slot index, stored as a
    read-only view. Item entities carry their stack in one slot (8 on the CTF
    server) as {"itemId": int}. Metadata takes part in equality but not in the
    hash, so entities (and the events that carry them) are hashable.
    """
    entity_id: int
    kind: str                               # "player", "item", "mob", ...
    position: Vec3
    username: Optional[str] = None          # set for players only
    metadata: Mapping[int, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))


@dataclass(frozen=True)
class Item:
    """Resolved item definition (id -> name) with an optional stack count."""
    item_id: int
    name: str
    count: int = 1
