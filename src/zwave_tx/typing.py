#!/usr/bin/env python3
"""ZWave Bridge - Typing for ZwaveProtocol & ZwaveTransport."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NewType, TypedDict

if TYPE_CHECKING:
    from .frame import DataFrame


SerPortNameT = NewType("SerPortNameT", str)

if TYPE_CHECKING:
    FrameHandlerT = Callable[[DataFrame], None]
else:
    FrameHandlerT = Callable[[Any], None]


class PortConfigT(TypedDict, total=False):
    baudrate: int
    bytesize: int
    parity: str
    stopbits: float
    dsrdtr: bool
    rtscts: bool
    timeout: float | None
    xonxoff: bool
