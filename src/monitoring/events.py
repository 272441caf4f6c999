# path: src/monitoring/events.py
"""
Event schemas for monitoring.

This module defines:
- EventType enum
- MonitoringEvent (structured records of what the CTF layer saw and did)

All events are JSON-serializable via `.to_dict()` and are intended
for use with monitoring.bus.EventBus and monitoring.logger.JsonFileLogger.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum, auto
from typing import Any, Dict, Optional


# ============================================================
# Event Types
# ============================================================

class EventType(Enum):
    """Typed monitoring events emitted by the CTF layer."""

    # A canonical CTF event was published (payload: kind + args)
    CTF_EVENT = auto()

    # A new match snapshot became the baseline
    SNAPSHOT = auto()

    # Generic log messages
    LOG = auto()


# ============================================================
# Monitoring Event Structure
# ============================================================

@dataclass
class MonitoringEvent:
    """
    Runtime record emitted by the correlator or by tooling.

    All fields must be JSON-safe.
    """

    ts: float                   # UNIX timestamp (seconds)
    module: str                 # Source module string ("ctf.correlator", ...)
    event_type: EventType       # Enum describing the event class
    message: str                # Short human-readable description
    payload: Dict[str, Any]     # Structured data (event args, snapshot)
    correlation_id: Optional[str] = None  # Groups events per match / bot

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dict for loggers."""
        data = asdict(self)
        data["event_type"] = self.event_type.name  # store name, not enum
        return data
