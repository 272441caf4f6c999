# path: src/ctf/queries.py
"""
On-demand CTF queries against the bot's world view.

These are not part of the event pipeline; behaviours call them when they
need to know where the flag is right now.
"""

from __future__ import annotations

from typing import Optional

from env.schema import CtfConstants
from interfaces.types import Vec3
from interfaces.world import BotWorld


def get_flag_location(world: BotWorld, constants: CtfConstants) -> Optional[Vec3]:
    """
    Position of the neutral flag block, or failing that of any banner lying
    on the ground, within `constants.search_radius`. None if neither is found.
    """
    block = world.find_block(
        constants.neutral_flag_name,
        max_distance=constants.search_radius,
        partial_match=False,
    )
    if block is not None:
        return block.position

    dropped = world.find_item_on_ground(
        constants.flag_drop_name,
        max_distance=constants.search_radius,
        partial_match=True,
    )
    if dropped is not None:
        return dropped.position
    return None


def has_flag(world: BotWorld, constants: CtfConstants) -> bool:
    """True if any banner is in the bot's inventory."""
    return world.inventory_contains_item(constants.flag_drop_name, partial_match=True)


def get_score_location(team: Optional[str], constants: CtfConstants) -> Vec3:
    # BLUE carries to the red zone; every other team to the blue zone.
    if team == "BLUE":
        return constants.red_score_location
    return constants.blue_score_location
