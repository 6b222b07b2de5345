#!/usr/bin/env python3
"""ZWave Bridge - forward events from a Z-Wave controller to a downstream service.

Works with a Z-Wave USB controller (e.g. Aeotec Z-Stick) via its serial port.
"""

from __future__ import annotations

from .dedup import DedupFilter
from .event import ApplicationEvent
from .exceptions import EventPayloadInvalid, NotifierError
from .gateway import Gateway
from .notifier import Notifier

__all__ = [
    "ApplicationEvent",
    "DedupFilter",
    "EventPayloadInvalid",
    "Gateway",
    "Notifier",
    "NotifierError",
]
