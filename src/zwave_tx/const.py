#!/usr/bin/env python3
"""ZWave Bridge - constants for the serial API framing layer."""

from __future__ import annotations

from enum import IntEnum
from typing import Final

# Control bytes (a single-byte frame, or the start of a data frame)
SOF: Final[int] = 0x01  # start-of-frame marker
ACK: Final[int] = 0x06
NAK: Final[int] = 0x15
CAN: Final[int] = 0x18  # cancel

CHECKSUM_SEED: Final[int] = 0xFF

# a data frame's length field counts: direction + func_id + payload + checksum
FRAME_OVERHEAD: Final[int] = 3
# bytes preceding the counted bytes: marker + length field
FRAME_HEADER_SIZE: Final[int] = 2

DEFAULT_BAUDRATE: Final[int] = 115200
DEFAULT_RECONNECT_DELAY: Final[float] = 10.0  # seconds
DEFAULT_LIVENESS_INTERVAL: Final[float] = 1.0  # seconds
DEFAULT_CONNECT_TIMEOUT: Final[float] = 3.0  # seconds

SZ_PORT_NAME: Final = "port_name"
SZ_PORT_CONFIG: Final = "port_config"
SZ_SERIAL: Final = "serial"


class Direction(IntEnum):
    """The direction of a data frame (0 is a request, anything else a response)."""

    REQUEST = 0x00
    RESPONSE = 0x01

    @classmethod
    def from_byte(cls, value: int) -> Direction:
        return cls.REQUEST if value == cls.REQUEST else cls.RESPONSE
