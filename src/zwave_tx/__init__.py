#!/usr/bin/env python3
"""ZWave Bridge - a framing/protocol/transport stack for a Z-Wave serial controller.

Operates at the frame layer of: app - frame - bytes - h/w
"""

from __future__ import annotations

from .command import FUNC_ID_NAMES, SZ_APPLICATION_COMMAND_HANDLER, FuncId, func_name
from .const import ACK, CAN, NAK, SOF, Direction
from .discovery import port_exists
from .exceptions import (
    FrameChecksumInvalid,
    FrameInvalid,
    TransportError,
    TransportSerialError,
    TransportSourceInvalid,
    ZwaveException,
)
from .frame import (
    Ack,
    Cancel,
    ControlFrame,
    DataFrame,
    Frame,
    Nak,
    build_frame,
    checksum,
    decode_control,
    decode_data_frame,
    encode_outbound,
)
from .gateway import ConnectionState, ConnectionSupervisor
from .protocol import PortProtocol, ReadProtocol, protocol_factory
from .reader import FrameReader
from .transport import CallbackTransport, PortTransport, TransportConfig

__all__ = [
    "ACK",
    "CAN",
    "FUNC_ID_NAMES",
    "NAK",
    "SOF",
    "SZ_APPLICATION_COMMAND_HANDLER",
    #
    "Ack",
    "CallbackTransport",
    "Cancel",
    "ConnectionState",
    "ConnectionSupervisor",
    "ControlFrame",
    "DataFrame",
    "Direction",
    "Frame",
    "FrameReader",
    "FuncId",
    "Nak",
    "PortProtocol",
    "PortTransport",
    "ReadProtocol",
    "TransportConfig",
    #
    "build_frame",
    "checksum",
    "decode_control",
    "decode_data_frame",
    "encode_outbound",
    "func_name",
    "port_exists",
    "protocol_factory",
    #
    "FrameChecksumInvalid",
    "FrameInvalid",
    "TransportError",
    "TransportSerialError",
    "TransportSourceInvalid",
    "ZwaveException",
]
