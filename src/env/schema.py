# EnvProfile, CtfConstants dataclasses
# src/env/schema.py

from dataclasses import dataclass, field
from typing import Optional

from interfaces.types import Vec3


@dataclass(frozen=True)
class CtfConstants:
    """Arena constants for the capture-the-flag mode."""
    flag_spawn: Vec3 = Vec3(96, 63, -386)
    blue_score_location: Vec3 = Vec3(160, 63, -386)
    red_score_location: Vec3 = Vec3(160, 63, -386)
    neutral_flag_name: str = "white_banner"   # block/item name of the neutral flag
    flag_drop_name: str = "banner"            # token shared by every team-colored flag
    search_radius: float = 100.0              # max distance for flag lookups
    item_metadata_slot: int = 8               # entity metadata slot holding {"itemId": ...}


@dataclass
class EnvProfile:
    """Resolved environment for one active profile."""
    name: str
    arena_name: str
    ctf: CtfConstants = field(default_factory=CtfConstants)
    debug: bool = False
    monitoring_log: Optional[str] = None   # JSONL path, None disables the file logger
