#!/usr/bin/env python3
"""ZWave Bridge - incremental framing of the byte stream from the controller.

Bytes arrive in arbitrarily small chunks (as little as one byte), so they are
appended to a buffer, and only complete frames are consumed from it. Any
trailing partial frame is left in place until the next chunk arrives.

There is no resync path: a byte that is not a control code is taken to be a
start-of-frame marker, and a (corrupt) length that is never satisfied will stall
the reader until the connection is restarted.
"""

from __future__ import annotations

import logging
from typing import Final

from .const import FRAME_HEADER_SIZE
from .exceptions import FrameInvalid
from .frame import Frame, decode_control, decode_data_frame

_DBG_FORCE_FRAME_LOGGING: Final[bool] = False

_LOGGER = logging.getLogger(__name__)

__all__ = ["FrameReader", "ReceiveBuffer", "drain_frames", "has_complete_frame"]


class ReceiveBuffer:
    """An append-only byte sequence, with a cursor at the first unconsumed byte."""

    def __init__(self) -> None:
        self.data = bytearray()
        self.cursor = 0

    def __len__(self) -> int:
        """Return the number of unconsumed bytes."""
        return len(self.data) - self.cursor

    def __repr__(self) -> str:
        return f"ReceiveBuffer(cursor={self.cursor}, data={self.data.hex(' ')})"

    def append(self, data: bytes) -> None:
        self.data += data

    def advance(self, cursor: int) -> None:
        if not self.cursor <= cursor <= len(self.data):
            raise ValueError(f"Cursor out of range: {cursor}")
        self.cursor = cursor

    def compact(self) -> None:
        """Discard the bytes before the cursor."""
        del self.data[: self.cursor]
        self.cursor = 0

    def clear(self) -> None:
        self.data.clear()
        self.cursor = 0


def has_complete_frame(buffer: bytes | bytearray, cursor: int) -> bool:
    """Return True if a complete frame starts at the cursor (does not consume it)."""
    if cursor >= len(buffer):
        return False

    if decode_control(buffer[cursor]) is not None:
        return True

    if cursor + 1 >= len(buffer):  # only the marker has arrived
        return False

    return len(buffer) - cursor - FRAME_HEADER_SIZE >= buffer[cursor + 1]


def drain_frames(
    buffer: bytes | bytearray, cursor: int, /, *, verify_checksum: bool = False
) -> tuple[list[Frame], int]:
    """Decode all the complete frames from the cursor onwards, in arrival order.

    Returns the frames, and the new cursor (the start of any incomplete frame).
    Malformed frames are logged and skipped over.
    """
    frames: list[Frame] = []

    while has_complete_frame(buffer, cursor):
        if (ctl_frame := decode_control(buffer[cursor])) is not None:
            frames.append(ctl_frame)
            cursor += 1
            continue

        try:
            frame, consumed = decode_data_frame(
                buffer, cursor, verify_checksum=verify_checksum
            )
        except FrameInvalid as err:
            _LOGGER.warning(
                "%s < FrameInvalid(%s)",
                bytes(buffer[cursor : cursor + err.consumed]).hex(" "),
                err,
            )
            cursor += err.consumed
            continue

        frames.append(frame)
        cursor += consumed

    return frames, cursor


class FrameReader:
    """Make Frames from a stream of bytes, as they arrive."""

    def __init__(self, *, verify_checksum: bool = False) -> None:
        self._buffer = ReceiveBuffer()
        self._verify_checksum = verify_checksum

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._buffer!r})"

    @property
    def pending(self) -> bytes:
        """Return the bytes of any incomplete frame, still awaiting more bytes."""
        return bytes(self._buffer.data[self._buffer.cursor :])

    def feed(self, data: bytes) -> list[Frame]:
        """Append a chunk of bytes, and return any frames that are now complete."""
        self._buffer.append(data)

        frames, cursor = drain_frames(
            self._buffer.data,
            self._buffer.cursor,
            verify_checksum=self._verify_checksum,
        )
        self._buffer.advance(cursor)
        self._buffer.compact()

        if _DBG_FORCE_FRAME_LOGGING:
            for frame in frames:
                _LOGGER.warning("Rx: %r", frame)

        return frames

    def reset(self) -> None:
        """Discard all buffered bytes (e.g. after the connection was restarted)."""
        self._buffer.clear()
