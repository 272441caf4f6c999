# path: src/ctf/correlator.py
"""
CTF event correlator.

Owns the per-instance engine state (the last match snapshot), listens to a
PacketClient, and turns raw packets into canonical CTF events:

    block_update / entity_spawn / item_drop / player_collect
        -> bot_core.raw_events decoding -> ctf.classifier -> bus
    score_update
        -> bot_core.snapshot parsing -> ctf.differ (vs. baseline) -> bus

Each correlator has its own baseline; nothing here is module-global, so
several bots (or tests) can run side by side.

Everything runs synchronously inside the packet callback. Handlers that need
to do slow work (movement, chat) must hand it off themselves.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional

from bot_core.net import (
    BLOCK_UPDATE,
    ENTITY_SPAWN,
    ITEM_DROP,
    PLAYER_COLLECT,
    SCORE_UPDATE,
    PacketClient,
)
from bot_core.raw_events import (
    RawWorldEvent,
    decode_block_update,
    decode_entity_spawn,
    decode_item_drop,
    decode_player_collect,
)
from bot_core.snapshot import MatchSnapshot, parse_match_snapshot
from env.schema import CtfConstants
from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import log_event
from .bus import CtfEventBus, HandlerFn, KindLike
from .classifier import ItemLookup, classify
from .differ import diff_snapshots
from .events import CanonicalEvent, event_to_dict
from .logging_config import set_ctf_debug


log = logging.getLogger(__name__)

MONITOR_MODULE = "ctf.correlator"


class CtfEventCorrelator:
    """
    Single authority translating raw packets into canonical CTF events.

    Construction subscribes to the source exactly once. Consumers register
    with `subscribe()` / `on()`.
    """

    def __init__(
        self,
        source: PacketClient,
        item_lookup: ItemLookup,
        constants: Optional[CtfConstants] = None,
        *,
        bus: Optional[CtfEventBus] = None,
        monitor: Optional[EventBus] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self._source = source
        self._item_lookup = item_lookup
        self._constants = constants or CtfConstants()
        self._bus = bus or CtfEventBus()
        self._monitor = monitor
        self._correlation_id = correlation_id

        # Engine state: replaced wholesale on every snapshot.
        self._last_snapshot: Optional[MatchSnapshot] = None

        self._register_handlers()

    # ------------------------------------------------------------------
    # Packet wiring
    # ------------------------------------------------------------------

    def _register_handlers(self) -> None:
        self._source.on_packet(BLOCK_UPDATE, self._raw_handler(decode_block_update))
        self._source.on_packet(ENTITY_SPAWN, self._raw_handler(decode_entity_spawn))
        self._source.on_packet(ITEM_DROP, self._raw_handler(decode_item_drop))
        self._source.on_packet(PLAYER_COLLECT, self._raw_handler(decode_player_collect))
        self._source.on_packet(SCORE_UPDATE, self._handle_score_update)

    def _raw_handler(
        self,
        decode: Callable[[Mapping[str, Any]], Optional[RawWorldEvent]],
    ) -> Callable[[Mapping[str, Any]], None]:
        def handler(pkt: Mapping[str, Any]) -> None:
            event = decode(pkt)
            if event is not None:
                self.on_raw_event(event)

        return handler

    def _handle_score_update(self, pkt: Mapping[str, Any]) -> None:
        log.debug("Score update triggered")
        snapshot = parse_match_snapshot(pkt)
        if snapshot is None:
            log.debug("Dropping score_update that is not a mapping: %r", pkt)
            return
        self.on_snapshot(snapshot)

    # ------------------------------------------------------------------
    # Engine
    # ------------------------------------------------------------------

    @property
    def constants(self) -> CtfConstants:
        return self._constants

    @property
    def bus(self) -> CtfEventBus:
        return self._bus

    @property
    def last_snapshot(self) -> Optional[MatchSnapshot]:
        """Current baseline (read-only)."""
        return self._last_snapshot

    def on_snapshot(self, snapshot: MatchSnapshot) -> List[CanonicalEvent]:
        """
        Diff `snapshot` against the baseline, make it the new baseline and
        publish whatever changed.

        The baseline is swapped before any handler runs, so a handler that
        raises cannot cause the same transition to fire again.
        """
        events = diff_snapshots(self._last_snapshot, snapshot)
        self._last_snapshot = snapshot

        if self._monitor is not None:
            log_event(
                bus=self._monitor,
                module=MONITOR_MODULE,
                event_type=EventType.SNAPSHOT,
                message="baseline updated",
                payload=snapshot.to_dict(),
                correlation_id=self._correlation_id,
            )

        self._publish_all(events)
        return events

    def on_raw_event(self, event: RawWorldEvent) -> List[CanonicalEvent]:
        """Classify one raw world event and publish the result."""
        log.debug("Detected %s", type(event).__name__)
        events = classify(event, self._item_lookup, self._constants)
        self._publish_all(events)
        return events

    def _publish_all(self, events: List[CanonicalEvent]) -> None:
        for event in events:
            log.debug("Fired off %s", event.kind.value)
            if self._monitor is not None:
                log_event(
                    bus=self._monitor,
                    module=MONITOR_MODULE,
                    event_type=EventType.CTF_EVENT,
                    message=event.kind.value,
                    payload=event_to_dict(event),
                    correlation_id=self._correlation_id,
                )
            self._bus.publish(event)

    # ------------------------------------------------------------------
    # Consumer API
    # ------------------------------------------------------------------

    def subscribe(self, kind: KindLike, fn: HandlerFn) -> None:
        """Register `fn` for a canonical event kind. Raises UnknownEventKind."""
        self._bus.subscribe(kind, fn)

    on = subscribe

    def unsubscribe(self, kind: KindLike, fn: HandlerFn) -> None:
        self._bus.unsubscribe(kind, fn)

    def set_debug(self, debug: bool) -> None:
        """Toggle DEBUG output for the whole ctf package logger."""
        set_ctf_debug(debug)
