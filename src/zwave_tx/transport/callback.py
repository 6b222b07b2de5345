#!/usr/bin/env python3
"""ZWave Bridge - Callback-based frame transport."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from .. import exceptions as exc
from .base import TransportConfig, _FullTransport

if TYPE_CHECKING:
    from ..protocol import ZwaveProtocolT

_LOGGER = logging.getLogger(__name__)


class CallbackTransport(_FullTransport):
    """A virtual transport that delegates I/O to external callbacks."""

    def __init__(
        self,
        protocol: ZwaveProtocolT,
        io_writer: Callable[[bytes], Awaitable[None]],
        /,
        *,
        config: TransportConfig,
        extra: dict[str, Any] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Initialize the callback transport."""
        _FullTransport.__init__(self, config=config, extra=extra, loop=loop)

        self._protocol = protocol
        self._io_writer = io_writer

        self._reading = False

        _LOGGER.info(f"CallbackTransport created with io_writer={io_writer}")

        self._make_connection()

        if config.autostart:
            self.resume_reading()

    def is_reading(self) -> bool:
        """Return True if the transport is receiving."""
        return self._reading

    def pause_reading(self) -> None:
        """Pause the receiving end (no frames to protocol.frames_received())."""
        self._reading = False

    def resume_reading(self) -> None:
        """Resume the receiving end."""
        self._reading = True

    async def _write_frame(self, frame: bytes) -> None:
        """Pass the frame to the external writer."""
        _LOGGER.debug(f"Sending frame via external writer: {frame.hex(' ')}")

        try:
            await self._io_writer(frame)
        except Exception as err:
            _LOGGER.error(f"External writer failed to send frame: {err}")
            raise exc.TransportError(f"External writer failed: {err}") from err

    def receive_bytes(self, data: bytes) -> None:
        """Ingest a chunk of bytes from the external source (Read Path)."""
        if not self._reading:
            _LOGGER.debug(f"Dropping received bytes (transport paused): {data!r}")
            return

        self._bytes_read(data)
