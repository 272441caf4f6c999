# tests/test_ctf_correlator.py
"""
Integration tests for CtfEventCorrelator using FakePacketClient.

Covers:
- Wiring: one handler per raw packet type registered at construction
- score_update sequence (baseline, duplicate, capture + pickup)
- baseline advances even when a handler raises
- raw packets flowing through decoding + classification
- malformed packets are dropped silently
- independent baselines per correlator
- mirroring into a monitoring EventBus
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from bot_core.snapshot import MatchSnapshot, PlayerState, TeamState
from bot_core.testing.fakes import FakePacketClient
from ctf.correlator import CtfEventCorrelator
from ctf.events import FlagObtained, FlagScored, UnknownEventKind
from env.schema import CtfConstants
from interfaces.types import Item, Vec3
from monitoring.bus import EventBus
from monitoring.events import EventType, MonitoringEvent


ITEMS: Dict[int, Item] = {1: Item(1, "white_banner"), 2: Item(2, "stone")}


def lookup(item_id: int) -> Optional[Item]:
    return ITEMS.get(item_id)


def scoreboard(red_caps: int, bob_pickups: int) -> Dict[str, Any]:
    return {
        "teams": [{"name": "RED", "metadata": {"flagCaptures": red_caps}}],
        "players": [{"username": "bob", "metadata": {"flagPickups": bob_pickups}}],
    }


def item_entity_pkt(eid: int, item_id: int, x: float = 5.0) -> Dict[str, Any]:
    return {
        "entity_id": eid,
        "kind": "item",
        "position": {"x": x, "y": 63.0, "z": 0.0},
        "metadata": {"8": {"itemId": item_id}},
    }


def make_correlator(**kwargs: Any) -> Tuple[FakePacketClient, CtfEventCorrelator, List[Tuple]]:
    client = FakePacketClient()
    correlator = CtfEventCorrelator(client, lookup, CtfConstants(), **kwargs)
    seen: List[Tuple] = []
    for name in ("flagObtained", "flagAvailable", "flagScored", "itemDetected", "itemCollected"):
        correlator.subscribe(name, lambda *args, _n=name: seen.append((_n,) + args))
    return client, correlator, seen


def test_registers_once_per_packet_type() -> None:
    client, _, _ = make_correlator()

    for packet_type in ("block_update", "entity_spawn", "item_drop", "player_collect", "score_update"):
        assert client.handler_count(packet_type) == 1


def test_score_update_sequence() -> None:
    client, correlator, seen = make_correlator()
    assert correlator.last_snapshot is None

    client.emit("score_update", scoreboard(0, 0))
    assert seen == []

    client.emit("score_update", scoreboard(0, 0))
    assert seen == []

    client.emit("score_update", scoreboard(1, 1))
    assert seen == [("flagScored", "RED"), ("flagObtained", "bob")]

    baseline = correlator.last_snapshot
    assert baseline is not None
    assert baseline.find_team("RED").flag_captures == 1
    assert baseline.find_player("bob").flag_pickups == 1


def test_flag_scored_handler_called_once_with_team_name() -> None:
    client = FakePacketClient()
    correlator = CtfEventCorrelator(client, lookup)
    calls: List[str] = []
    correlator.on("flagScored", calls.append)

    client.emit("score_update", scoreboard(0, 0))
    client.emit("score_update", scoreboard(1, 0))
    client.emit("score_update", scoreboard(1, 0))

    assert calls == ["RED"]


def test_on_snapshot_returns_and_stores() -> None:
    _, correlator, _ = make_correlator()
    s1 = MatchSnapshot(teams=(TeamState("RED", {"flagCaptures": 0}),))
    s2 = MatchSnapshot(
        teams=(TeamState("RED", {"flagCaptures": 0}),),
        players=(PlayerState("alice", {"flagPickups": 1}),),
    )

    assert correlator.on_snapshot(s1) == []
    assert correlator.on_snapshot(s2) == [FlagObtained("alice")]
    assert correlator.last_snapshot is s2


def test_baseline_advances_even_if_handler_raises() -> None:
    client = FakePacketClient()
    correlator = CtfEventCorrelator(client, lookup)
    calls: List[str] = []

    def flaky(team: str) -> None:
        calls.append(team)
        raise RuntimeError("handler fault")

    correlator.on("flagScored", flaky)
    client.emit("score_update", scoreboard(0, 0))

    with pytest.raises(RuntimeError):
        client.emit("score_update", scoreboard(1, 0))

    # Same snapshot again: no re-fire, the transition was already consumed.
    client.emit("score_update", scoreboard(1, 0))
    assert calls == ["RED"]
    assert correlator.last_snapshot.find_team("RED").flag_captures == 1


def test_unknown_kind_rejected_before_any_publish() -> None:
    client, correlator, seen = make_correlator()

    with pytest.raises(UnknownEventKind):
        correlator.subscribe("not_a_real_event", lambda *a: None)

    assert seen == []


def test_raw_packets_are_classified() -> None:
    client, _, seen = make_correlator()
    spawn = CtfConstants().flag_spawn

    client.emit("block_update", {"old": None, "new": {"name": "red_banner", "position": spawn.to_dict()}})
    client.emit("entity_spawn", {"entity": item_entity_pkt(10, 2)})
    client.emit("item_drop", {"entity": item_entity_pkt(11, 1)})
    client.emit("player_collect", {
        "collector": {"entity_id": 3, "kind": "player", "username": "bob", "x": 0, "y": 63, "z": 0},
        "collected": item_entity_pkt(11, 1),
    })

    kinds = [entry[0] for entry in seen]
    assert kinds == [
        "flagAvailable",
        "itemDetected",
        "itemDetected",
        "flagAvailable",
        "itemCollected",
    ]
    assert seen[0][1] == spawn
    assert seen[3][1] == ITEMS[1]
    assert seen[4][1].username == "bob"
    assert seen[4][2] == ITEMS[1]


def test_raw_events_do_not_touch_baseline() -> None:
    client, correlator, _ = make_correlator()
    client.emit("entity_spawn", {"entity": item_entity_pkt(10, 1)})

    assert correlator.last_snapshot is None


@pytest.mark.parametrize(
    "packet_type,payload",
    [
        ("block_update", {}),
        ("block_update", {"new": {"name": "red_banner"}}),
        ("entity_spawn", {"entity": None}),
        ("entity_spawn", {"entity": {"kind": "item"}}),
        ("entity_spawn", {"entity": {"entity_id": 4, "kind": "mob", "x": 0, "y": 0, "z": 0}}),
        ("item_drop", {"entity": "garbage"}),
        ("player_collect", {"collector": None, "collected": None}),
        ("entity_spawn", {"entity": item_entity_pkt(4, 1) | {"entity_id": float("inf")}}),
        ("entity_spawn", {"entity": item_entity_pkt(4, 1) | {"metadata": {"8": {"itemId": float("inf")}}}}),
        ("item_drop", {"entity": item_entity_pkt(5, 1) | {"metadata": {"8": {"itemId": float("inf")}}}}),
        ("score_update", {"teams": 5}),
        ("score_update", {"players": 3.0}),
        ("score_update", {"teams": True, "players": "bob"}),
    ],
)
def test_malformed_packets_are_dropped(packet_type: str, payload: Dict[str, Any]) -> None:
    client, _, seen = make_correlator()

    client.emit(packet_type, payload)

    assert seen == []


def test_correlators_keep_independent_baselines() -> None:
    client_a, corr_a, seen_a = make_correlator()
    client_b, corr_b, seen_b = make_correlator()

    client_a.emit("score_update", scoreboard(0, 0))
    client_a.emit("score_update", scoreboard(1, 0))
    client_b.emit("score_update", scoreboard(1, 0))

    assert seen_a == [("flagScored", "RED")]
    assert seen_b == []
    assert corr_a.last_snapshot is not corr_b.last_snapshot


def test_events_mirrored_to_monitoring_bus() -> None:
    monitor = EventBus()
    records: List[MonitoringEvent] = []
    monitor.subscribe(records.append)

    client, _, _ = make_correlator(monitor=monitor, correlation_id="match-1")
    client.emit("score_update", scoreboard(0, 0))
    client.emit("score_update", scoreboard(1, 0))
    client.emit("item_drop", {"entity": item_entity_pkt(11, 1)})

    types = [r.event_type for r in records]
    assert types == [
        EventType.SNAPSHOT,
        EventType.SNAPSHOT,
        EventType.CTF_EVENT,
        EventType.CTF_EVENT,
        EventType.CTF_EVENT,
    ]
    assert records[2].payload == {"kind": "flagScored", "args": ["RED"]}
    assert records[4].payload["args"][0] == {"item_id": 1, "name": "white_banner", "count": 1}
    assert all(r.correlation_id == "match-1" for r in records)
    assert all(r.module == "ctf.correlator" for r in records)


def test_set_debug_toggles_ctf_logger_level() -> None:
    import logging

    _, correlator, _ = make_correlator()
    correlator.set_debug(True)
    assert logging.getLogger("ctf").level == logging.DEBUG
    correlator.set_debug(False)
    assert logging.getLogger("ctf").level == logging.INFO


def test_block_update_position_compares_by_value() -> None:
    client, _, seen = make_correlator()

    client.emit("block_update", {"new": {"name": "blue_banner", "x": 96, "y": 63, "z": -386}})

    assert seen == [("flagAvailable", Vec3(96, 63, -386))]


def test_scalar_scoreboard_lists_do_not_disturb_later_diffs() -> None:
    client, correlator, seen = make_correlator()

    client.emit("score_update", scoreboard(0, 0))
    client.emit("score_update", {"teams": 5, "players": 3.0})
    assert seen == []
    assert correlator.last_snapshot == MatchSnapshot()

    client.emit("score_update", scoreboard(0, 0))
    client.emit("score_update", scoreboard(1, 0))
    assert seen == [("flagScored", "RED")]
