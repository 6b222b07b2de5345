#!/usr/bin/env python3
"""ZWave Bridge - serial API frame protocol package."""

from __future__ import annotations

from .core import ACK_FRAME, PortProtocol, ReadProtocol, ZwaveProtocolT
from .factory import protocol_factory

__all__ = [
    "ACK_FRAME",
    "PortProtocol",
    "ReadProtocol",
    "ZwaveProtocolT",
    "protocol_factory",
]
