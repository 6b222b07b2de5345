#!/usr/bin/env python3
"""ZWave Bridge - exceptions above the frame/protocol/transport layer."""

from __future__ import annotations

from zwave_tx.exceptions import (
    FrameInvalid as FrameInvalid,
    TransportError as TransportError,
    ZwaveException as ZwaveException,
)


class _ZwaveUpperError(ZwaveException):
    """A failure in the upper layer (event decoding, notification)."""


########################################################################################
# Errors above the protocol/transport layer, incl. event decoding & notification


class EventPayloadInvalid(_ZwaveUpperError):
    """The frame's payload is too short to hold an application event."""

    HINT = "the controller may be sending a command class that isn't supported"


class NotifierError(_ZwaveUpperError):
    """The downstream service could not be notified."""

    HINT = "check the broker URL, and that the broker is reachable"
