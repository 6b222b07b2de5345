#!/usr/bin/env python3
"""ZWave Bridge - serial API frame protocol factory."""

from __future__ import annotations

import logging

from ..typing import FrameHandlerT
from .core import PortProtocol, ReadProtocol, ZwaveProtocolT

_LOGGER = logging.getLogger(__name__)


def protocol_factory(
    handlers: dict[str, FrameHandlerT] | None = None,
    /,
    *,
    disable_sending: bool | None = False,
    ack_per_frame: bool = False,
) -> ZwaveProtocolT:
    """Create and return a serial API Protocol (it must be in a running loop)."""
    if disable_sending:
        _LOGGER.debug("ReadProtocol: Sending has been disabled (no ACKs)")
        return ReadProtocol(handlers=handlers)

    if ack_per_frame:
        _LOGGER.debug("PortProtocol: will ACK each data frame, not each batch")

    return PortProtocol(handlers=handlers, ack_per_frame=ack_per_frame)
