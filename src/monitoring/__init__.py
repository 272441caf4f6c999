"""
Monitoring for the CTF layer: an observational event bus, the JSONL file
logger, and the MonitoringEvent schema.
"""

from .bus import EventBus
from .events import EventType, MonitoringEvent
from .logger import JsonFileLogger, log_event

__all__ = [
    "EventBus",
    "EventType",
    "JsonFileLogger",
    "MonitoringEvent",
    "log_event",
]
