# ctf package
# src/ctf/__init__.py
"""
Capture-the-flag semantic events.

Exports:
    - CtfUtils: per-bot facade (events + flag queries)
    - CtfEventCorrelator: packet source -> canonical events
    - CtfEventBus: listener registry
    - diff_snapshots / classify: the pure inference functions
    - canonical event types, CtfEventKind, UnknownEventKind
"""

from __future__ import annotations

from .bus import CtfEventBus
from .classifier import classify
from .correlator import CtfEventCorrelator
from .differ import diff_snapshots
from .events import (
    CTF_EVENTS,
    CanonicalEvent,
    CtfError,
    CtfEventKind,
    FlagAvailable,
    FlagObtained,
    FlagScored,
    ItemCollected,
    ItemDetected,
    UnknownEventKind,
)
from .queries import get_flag_location, get_score_location, has_flag
from .utils import CtfUtils

__all__ = [
    "CTF_EVENTS",
    "CanonicalEvent",
    "CtfError",
    "CtfEventBus",
    "CtfEventCorrelator",
    "CtfEventKind",
    "CtfUtils",
    "FlagAvailable",
    "FlagObtained",
    "FlagScored",
    "ItemCollected",
    "ItemDetected",
    "UnknownEventKind",
    "classify",
    "diff_snapshots",
    "get_flag_location",
    "get_score_location",
    "has_flag",
]
