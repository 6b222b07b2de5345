#!/usr/bin/env python3
"""ZWave Bridge - serial API frame transport.

Operates at the frame layer of: app - frame - bytes - h/w

"""

from __future__ import annotations

from .base import TransportConfig as TransportConfig
from .callback import CallbackTransport as CallbackTransport
from .factory import (
    ZwaveTransportT as ZwaveTransportT,
    transport_factory as transport_factory,
)
from .port import PortTransport as PortTransport

__all__ = [
    "CallbackTransport",
    "PortTransport",
    "TransportConfig",
    "ZwaveTransportT",
    "transport_factory",
]
