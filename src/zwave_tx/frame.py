#!/usr/bin/env python3
"""ZWave Bridge - encode/decode of the serial API framing (no I/O).

A frame is either a single control byte, or a length-prefixed data frame::

    +-----+--------+-----------+---------+------------------+----------+
    | SOF | Length | Direction | FuncId  |     Payload      | Checksum |
    | 0x01| 1 byte |  1 byte   | 1 byte  | (Length - 3) B   |  1 byte  |
    +-----+--------+-----------+---------+------------------+----------+

- Length: counts Direction through Checksum, inclusive
- Checksum: 0xFF XOR every byte from Length through the end of the Payload

Control bytes are ACK (0x06), NAK (0x15) and CAN (0x18).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar, Final, TypeAlias

from .command import func_name
from .const import (
    ACK,
    CAN,
    CHECKSUM_SEED,
    FRAME_HEADER_SIZE,
    FRAME_OVERHEAD,
    NAK,
    SOF,
    Direction,
)
from .exceptions import FrameChecksumInvalid, FrameInvalid

__all__ = [
    "Ack",
    "Cancel",
    "ControlFrame",
    "DataFrame",
    "Frame",
    "Nak",
    "build_frame",
    "checksum",
    "decode_control",
    "decode_data_frame",
    "encode_outbound",
]


@dataclass(frozen=True)
class ControlFrame:
    """A single-byte control frame, it has no payload."""

    code: ClassVar[int]

    def __bytes__(self) -> bytes:
        return bytes([self.code])

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


@dataclass(frozen=True, repr=False)
class Ack(ControlFrame):
    code: ClassVar[int] = ACK


@dataclass(frozen=True, repr=False)
class Nak(ControlFrame):
    code: ClassVar[int] = NAK


@dataclass(frozen=True, repr=False)
class Cancel(ControlFrame):
    code: ClassVar[int] = CAN


_CONTROL_FRAMES: Final[dict[int, ControlFrame]] = {
    f.code: f for f in (Ack(), Nak(), Cancel())
}


@dataclass(frozen=True)
class DataFrame:
    """A decoded (multi-byte) data frame.

    The direction byte is kept as received, so that the frame is reproduced
    byte-for-byte (any non-zero value is a response).
    """

    type_byte: int
    func_id: int
    payload: bytes
    checksum: int

    @property
    def direction(self) -> Direction:
        return Direction.from_byte(self.type_byte)

    @property
    def name(self) -> str | None:
        """Return the semantic name of the func_id (None if it is not known)."""
        return func_name(self.func_id)

    @property
    def length(self) -> int:
        """Return the value of the frame's length field."""
        return len(self.payload) + FRAME_OVERHEAD

    @property
    def is_checksum_valid(self) -> bool:
        return checksum(self._body) == self.checksum

    @property
    def _body(self) -> bytes:
        return bytes([self.length, self.type_byte, self.func_id]) + self.payload

    def __bytes__(self) -> bytes:
        """Return the frame as wire bytes (incl. the received checksum)."""
        return bytes([SOF]) + self._body + bytes([self.checksum])

    def __repr__(self) -> str:
        return (
            f"DataFrame({self.direction.name}, "
            f"func_id=0x{self.func_id:02X} ({self.name}), "
            f"payload={self.payload.hex(' ') if self.payload else '(empty)'}, "
            f"checksum=0x{self.checksum:02X})"
        )


Frame: TypeAlias = ControlFrame | DataFrame


def checksum(data: Iterable[int]) -> int:
    """Return the XOR checksum of the bytes, seeded with 0xFF."""
    result = CHECKSUM_SEED
    for byte in data:
        result ^= byte
    return result


def decode_control(byte: int) -> ControlFrame | None:
    """Return the control frame for a lookahead byte.

    Returns None if it is not a control code, i.e. the byte is to be treated as
    the start-of-frame marker of a data frame.
    """
    return _CONTROL_FRAMES.get(byte)


def decode_data_frame(
    buffer: bytes | bytearray, offset: int, /, *, verify_checksum: bool = False
) -> tuple[DataFrame, int]:
    """Decode the data frame whose marker is at offset.

    Returns the frame and the number of bytes it consumed (from the marker). The
    checksum byte is captured, but only compared against the frame's contents if
    verify_checksum is True.

    The caller must first ensure the frame is complete (see has_complete_frame()).

    :raises FrameInvalid: if the length field is too short to be a data frame
    :raises FrameChecksumInvalid: if verify_checksum and the checksum doesn't match
    """
    length = buffer[offset + 1]
    consumed = length + FRAME_HEADER_SIZE

    if len(buffer) - offset < consumed:
        raise ValueError(f"Incomplete frame at offset {offset}: length={length}")

    if length < FRAME_OVERHEAD:
        raise FrameInvalid(f"Frame length is too short: {length}", consumed=consumed)

    start = offset + FRAME_HEADER_SIZE
    end = offset + consumed - 1  # the checksum byte

    frame = DataFrame(
        type_byte=buffer[start],
        func_id=buffer[start + 1],
        payload=bytes(buffer[start + 2 : end]),
        checksum=buffer[end],
    )

    if verify_checksum and not frame.is_checksum_valid:
        raise FrameChecksumInvalid(
            f"Frame checksum is invalid: 0x{frame.checksum:02X} "
            f"(expected 0x{checksum(buffer[offset + 1 : end]):02X})",
            consumed=consumed,
        )

    return frame, consumed


def encode_outbound(data: bytes | Iterable[int], include_checksum: bool) -> bytes:
    """Encode bytes for the wire, with an (optional) trailing checksum.

    The first byte (the marker) is written verbatim; every subsequent byte is
    written and also XORed into the running checksum.
    """
    result = bytearray()
    running = CHECKSUM_SEED

    for idx, byte in enumerate(data):
        result.append(byte)
        if idx:
            running ^= byte

    if include_checksum:
        result.append(running)
    return bytes(result)


def build_frame(
    func_id: int, payload: bytes = b"", direction: Direction = Direction.REQUEST
) -> bytes:
    """Build a complete data frame (with its checksum), ready to be written."""
    length = len(payload) + FRAME_OVERHEAD
    if length > 0xFF:
        raise ValueError(f"Payload is too long: {len(payload)} bytes")
    return encode_outbound(
        bytes([SOF, length, direction, func_id]) + payload, include_checksum=True
    )
