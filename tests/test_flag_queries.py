# tests/test_flag_queries.py
"""
Tests for ctf.queries.

Covers:
- get_flag_location: block lookup first, ground-item fallback, None
- the exact lookup arguments (names, radius, partial matching)
- has_flag via inventory containment
- get_score_location team mapping
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from ctf.queries import get_flag_location, get_score_location, has_flag
from env.schema import CtfConstants
from interfaces.types import Block, Entity, Item, Vec3


class StubWorld:
    """BotWorld stand-in that records calls and returns canned answers."""

    def __init__(
        self,
        block: Optional[Block] = None,
        ground: Optional[Entity] = None,
        holding: bool = False,
    ) -> None:
        self._block = block
        self._ground = ground
        self._holding = holding
        self.calls: List[Tuple[str, Any, Any, Any]] = []

    def find_block(self, name: str, *, max_distance: float, partial_match: bool = False) -> Optional[Block]:
        self.calls.append(("find_block", name, max_distance, partial_match))
        return self._block

    def find_item_on_ground(self, name: str, *, max_distance: float, partial_match: bool = False) -> Optional[Entity]:
        self.calls.append(("find_item_on_ground", name, max_distance, partial_match))
        return self._ground

    def inventory_contains_item(self, name: str, *, partial_match: bool = False) -> bool:
        self.calls.append(("inventory_contains_item", name, None, partial_match))
        return self._holding

    def get_item_definition_by_id(self, item_id: int) -> Optional[Item]:
        return None


CONSTANTS = CtfConstants()


def test_flag_block_wins_without_ground_lookup() -> None:
    world = StubWorld(block=Block("white_banner", Vec3(96, 63, -386)))

    assert get_flag_location(world, CONSTANTS) == Vec3(96, 63, -386)
    assert world.calls == [("find_block", "white_banner", 100.0, False)]


def test_falls_back_to_dropped_banner() -> None:
    dropped = Entity(4, "item", Vec3(120.5, 63, -380))
    world = StubWorld(ground=dropped)

    assert get_flag_location(world, CONSTANTS) == Vec3(120.5, 63, -380)
    assert world.calls == [
        ("find_block", "white_banner", 100.0, False),
        ("find_item_on_ground", "banner", 100.0, True),
    ]


def test_no_flag_anywhere_is_none() -> None:
    assert get_flag_location(StubWorld(), CONSTANTS) is None


def test_search_radius_comes_from_constants() -> None:
    world = StubWorld()
    get_flag_location(world, CtfConstants(search_radius=25))

    assert all(call[2] == 25 for call in world.calls)


def test_has_flag_checks_inventory_by_token() -> None:
    world = StubWorld(holding=True)

    assert has_flag(world, CONSTANTS) is True
    assert world.calls == [("inventory_contains_item", "banner", None, True)]
    assert has_flag(StubWorld(holding=False), CONSTANTS) is False


def test_score_location_by_team() -> None:
    constants = CtfConstants(
        blue_score_location=Vec3(1, 0, 0),
        red_score_location=Vec3(2, 0, 0),
    )

    assert get_score_location("BLUE", constants) == Vec3(2, 0, 0)
    assert get_score_location("RED", constants) == Vec3(1, 0, 0)
    assert get_score_location(None, constants) == Vec3(1, 0, 0)
