# path: src/ctf/utils.py
"""
CtfUtils: the one object a CTF bot script talks to.

Wires a PacketClient, a BotWorld and a CtfEventCorrelator together and
exposes:

    on(event, fn)            register for a canonical event
    get_flag_location()      where the flag is right now (or None)
    has_flag()               is the flag in our inventory
    get_score_location(team) where our team has to carry the flag
    set_debug(bool)          verbose logging for the ctf package

Example:

    utils = CtfUtils(client, tracker)

    def on_obtained(username: str) -> None:
        if username == my_name:
            queue_move(utils.get_score_location(my_team))

    utils.on("flagObtained", on_obtained)
"""

from __future__ import annotations

from typing import Optional, Tuple

from bot_core.net import PacketClient
from env.schema import CtfConstants, EnvProfile
from interfaces.types import Vec3
from interfaces.world import BotWorld
from monitoring.bus import EventBus
from .bus import HandlerFn, KindLike
from .correlator import CtfEventCorrelator
from .events import CTF_EVENTS
from .queries import get_flag_location, get_score_location, has_flag


class CtfUtils:
    """Capture-the-flag helpers bound to one bot."""

    CTF_EVENTS: Tuple[str, ...] = CTF_EVENTS

    def __init__(
        self,
        client: PacketClient,
        world: BotWorld,
        constants: Optional[CtfConstants] = None,
        *,
        monitor: Optional[EventBus] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self._world = world
        self._constants = constants or CtfConstants()
        self._correlator = CtfEventCorrelator(
            client,
            world.get_item_definition_by_id,
            self._constants,
            monitor=monitor,
            correlation_id=correlation_id,
        )

    @classmethod
    def from_env(
        cls,
        env: EnvProfile,
        client: PacketClient,
        world: BotWorld,
        *,
        monitor: Optional[EventBus] = None,
    ) -> "CtfUtils":
        """Build from a loaded EnvProfile, honouring its debug flag."""
        utils = cls(client, world, env.ctf, monitor=monitor, correlation_id=env.name)
        utils.set_debug(env.debug)
        return utils

    # ------------------------------------------------------------------
    # Arena constants
    # ------------------------------------------------------------------

    @property
    def constants(self) -> CtfConstants:
        return self._constants

    @property
    def FLAG_SPAWN(self) -> Vec3:
        return self._constants.flag_spawn

    @property
    def FLAG_ITEM_NAME(self) -> str:
        return self._constants.neutral_flag_name

    @property
    def FLAG_DROP_NAME(self) -> str:
        return self._constants.flag_drop_name

    @property
    def correlator(self) -> CtfEventCorrelator:
        return self._correlator

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, event: KindLike, fn: HandlerFn) -> None:
        """Register `fn` for one of CTF_EVENTS. Raises UnknownEventKind otherwise."""
        self._correlator.subscribe(event, fn)

    def set_debug(self, debug: bool) -> None:
        self._correlator.set_debug(debug)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_flag_location(self) -> Optional[Vec3]:
        return get_flag_location(self._world, self._constants)

    def has_flag(self) -> bool:
        return has_flag(self._world, self._constants)

    def get_score_location(self, team: Optional[str]) -> Vec3:
        return get_score_location(team, self._constants)
