# listener registry for canonical CTF events
"""
Event bus for canonical CTF events.

Fan-out registry keyed by CtfEventKind:

- subscribe() validates the kind immediately; an unknown name raises
  UnknownEventKind before anything is published.
- publish() calls every handler for the event's kind, in registration
  order, with the event's positional payload.
- Handler exceptions are NOT caught. They surface in whatever raw packet
  callback triggered the publish, and later handlers for that event do not
  run.
"""

from __future__ import annotations

from threading import Lock
from typing import Any, Callable, Dict, List, Union

from .events import CanonicalEvent, CtfEventKind


# ============================================================
# Type aliases
# ============================================================

HandlerFn = Callable[..., Any]
KindLike = Union[CtfEventKind, str]


# ============================================================
# Event Bus
# ============================================================

class CtfEventBus:
    """
    In-process pub/sub for canonical CTF events.

    Registration is guarded by a Lock; publish iterates over a snapshot of
    the handler list so handlers may subscribe or unsubscribe re-entrantly.
    """

    def __init__(self) -> None:
        self._handlers: Dict[CtfEventKind, List[HandlerFn]] = {
            kind: [] for kind in CtfEventKind
        }
        self._lock = Lock()

    # --------------------------------------------------------
    # Subscription API
    # --------------------------------------------------------

    def subscribe(self, kind: KindLike, fn: HandlerFn) -> None:
        """
        Register `fn` for `kind` ("flagScored", CtfEventKind.FLAG_SCORED, ...).

        Raises UnknownEventKind if `kind` is not a canonical event kind.
        """
        parsed = CtfEventKind.parse(kind)
        with self._lock:
            self._handlers[parsed].append(fn)

    def unsubscribe(self, kind: KindLike, fn: HandlerFn) -> None:
        """
        Remove a previously registered handler.

        Safe to call even if `fn` is not present.
        """
        parsed = CtfEventKind.parse(kind)
        with self._lock:
            if fn in self._handlers[parsed]:
                self._handlers[parsed].remove(fn)

    def handler_count(self, kind: KindLike) -> int:
        parsed = CtfEventKind.parse(kind)
        with self._lock:
            return len(self._handlers[parsed])

    # --------------------------------------------------------
    # Publish API
    # --------------------------------------------------------

    def publish(self, event: CanonicalEvent) -> None:
        """Deliver `event` to every handler registered for its kind."""
        with self._lock:
            handlers = list(self._handlers[event.kind])

        args = event.args()
        for fn in handlers:
            fn(*args)

    # --------------------------------------------------------
    # Utility
    # --------------------------------------------------------

    def clear(self) -> None:
        """Drop every handler. Mostly useful for tests."""
        with self._lock:
            for handlers in self._handlers.values():
                handlers.clear()
