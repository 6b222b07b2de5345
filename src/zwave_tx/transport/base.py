#!/usr/bin/env python3
"""ZWave Bridge - Base classes for serial API frame transports."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from .. import exceptions as exc
from ..frame import Frame
from ..interfaces import TransportInterface
from ..reader import FrameReader

if TYPE_CHECKING:
    from ..protocol import ZwaveProtocolT

_DBG_FORCE_FRAME_LOGGING: Final[bool] = False

_LOGGER = logging.getLogger(__name__)


@dataclass
class TransportConfig:
    """Configuration parameters for the transports.

    Replaces a kwargs payload passed to the transports and their factory.
    """

    disable_sending: bool = False
    verify_checksum: bool = False
    autostart: bool = False
    timeout: float | None = None


class _ReadTransport(TransportInterface):
    """Interface for read-only transports."""

    _protocol: ZwaveProtocolT = None  # type: ignore[assignment]
    _loop: asyncio.AbstractEventLoop

    def __init__(
        self,
        /,
        *,
        config: TransportConfig,
        extra: dict[str, Any] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Initialize the read-only transport."""
        self._loop = loop or asyncio.get_event_loop()
        self._extra: dict[str, Any] = {} if extra is None else extra

        self._closing: bool = False
        self._reader = FrameReader(verify_checksum=config.verify_checksum)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._protocol})"

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """The asyncio event loop as declared by SerialTransport."""
        return self._loop

    def get_extra_info(self, name: str, default: Any = None) -> Any:
        """Get extra information about the transport."""
        return self._extra.get(name, default)

    def is_closing(self) -> bool:
        """Return True if the transport is closing or has closed."""
        return self._closing

    def _close(self, exc: exc.ZwaveException | None = None) -> None:
        """Inform the protocol that this transport has closed."""
        if self._closing:
            return
        self._closing = True

        self.loop.call_soon(functools.partial(self._protocol.connection_lost, exc))

    def close(self) -> None:
        """Close the transport gracefully."""
        self._close()

    def _make_connection(self) -> None:
        """Register the connection with the protocol."""
        self._protocol.connection_made(self)

    def _bytes_read(self, data: bytes) -> None:
        """Make Frames from the read data and process them."""
        if _DBG_FORCE_FRAME_LOGGING:
            _LOGGER.warning("Rx: %s", data.hex(" "))
        else:
            _LOGGER.debug("Rx: %s", data.hex(" "))

        if frames := self._reader.feed(data):
            self._frames_read(frames)

    def _frames_read(self, frames: Sequence[Frame]) -> None:
        """Pass the batch of Frames to the protocol's callback."""
        if self._closing is True:
            raise exc.TransportError("Transport is closing or has closed")

        self._protocol.frames_received(frames)

    async def write_frame(self, frame: bytes) -> None:
        """Transmit a frame via the underlying handler."""
        raise exc.TransportSerialError("This transport is read only")


class _FullTransport(_ReadTransport):
    """Interface representing a bidirectional transport."""

    def __init__(
        self,
        /,
        *,
        config: TransportConfig,
        extra: dict[str, Any] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Initialize the full transport."""
        _ReadTransport.__init__(self, config=config, extra=extra, loop=loop)

        self._disable_sending = config.disable_sending

    async def write_frame(self, frame: bytes) -> None:
        """Transmit a frame via the underlying handler."""
        if self._disable_sending is True:
            raise exc.TransportError("Sending has been disabled")
        if self._closing is True:
            raise exc.TransportError("Transport is closing or has closed")

        await self._write_frame(frame)

    async def _write_frame(self, frame: bytes) -> None:
        """Write some data bytes to the underlying transport."""
        raise NotImplementedError("_write_frame() not implemented here")
