#!/usr/bin/env python3
"""ZWave Bridge - exceptions within the frame/protocol/transport layer."""

from __future__ import annotations


class _ZwaveBaseException(Exception):
    """Base class for all zwave_bridge exceptions."""

    pass


class ZwaveException(_ZwaveBaseException):
    """Base class for all zwave_bridge exceptions."""

    HINT: str | None = None

    def __init__(self, *args: object) -> None:
        super().__init__(*args)
        self.message: str | None = args[0] if args else None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.message and self.HINT:
            return f"{self.message} (hint: {self.HINT})"
        if self.message:
            return self.message
        if self.HINT:
            return f"Hint: {self.HINT}"
        return ""


class _ZwaveLowerError(ZwaveException):
    """A failure in the lower layer (frame, protocol, transport)."""


########################################################################################
# Errors at/below the protocol/transport layer, incl. frame decoding


class FrameInvalid(_ZwaveLowerError):
    """The frame is malformed (it is consumed, but not processed)."""

    def __init__(self, *args: object, consumed: int = 0) -> None:
        super().__init__(*args)
        self.consumed = consumed


class FrameChecksumInvalid(FrameInvalid):
    """The frame's checksum byte doesn't match its contents."""


class TransportError(_ZwaveLowerError):
    """An error when sending or receiving frames (bytes) via the device."""


class TransportSerialError(TransportError):
    """The serial port is unavailable, or has been lost."""


class TransportSourceInvalid(TransportError):
    """The source of the frames (the serial port) is not valid."""

    HINT = "check the port name, and that the controller is plugged in"
