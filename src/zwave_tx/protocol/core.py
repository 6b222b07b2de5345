#!/usr/bin/env python3
"""ZWave Bridge - serial API frame protocol implementations.

This module provides the concrete Protocol classes (ReadProtocol and
PortProtocol) that bind the transport and the frame dispatcher together.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Final, TypeAlias

from ..const import ACK
from ..exceptions import TransportError
from ..frame import DataFrame, Frame, encode_outbound
from ..typing import FrameHandlerT
from .base import _BaseProtocol

_LOGGER = logging.getLogger(__name__)

# a control frame has no checksum
ACK_FRAME: Final[bytes] = encode_outbound(bytes([ACK]), include_checksum=False)


class ReadProtocol(_BaseProtocol):
    """A protocol that can only receive Frames (it never acknowledges them)."""

    def __init__(self, /, *, handlers: dict[str, FrameHandlerT] | None = None) -> None:
        """Initialize the Read-Only protocol."""
        _BaseProtocol.__init__(self, handlers=handlers)


class PortProtocol(_BaseProtocol):
    """A protocol that receives Frames, and acknowledges the data frames.

    By default, a single ACK is sent for each batch of frames (those completed by
    one chunk of bytes), rather than one ACK per data frame.
    """

    def __init__(
        self,
        /,
        *,
        handlers: dict[str, FrameHandlerT] | None = None,
        ack_per_frame: bool = False,
    ) -> None:
        """Initialize the protocol.

        :param handlers: Handlers for data frames, keyed by command name.
        :type handlers: dict[str, FrameHandlerT] | None
        :param ack_per_frame: Send one ACK per data frame, rather than per batch.
        :type ack_per_frame: bool
        """
        _BaseProtocol.__init__(self, handlers=handlers)

        self._ack_per_frame = ack_per_frame
        self._tasks: set[asyncio.Task[None]] = set()

    def frames_received(self, frames: Sequence[Frame]) -> None:
        """Dispatch a batch of Frames, then acknowledge its data frames."""
        num_data_frames = 0

        for frame in frames:
            self.frame_received(frame)

            if isinstance(frame, DataFrame):
                num_data_frames += 1
                if self._ack_per_frame:
                    self._send_ack()

        if num_data_frames and not self._ack_per_frame:
            self._send_ack()

    def _send_ack(self) -> None:
        task = self._loop.create_task(
            self._send_frame(ACK_FRAME), name="PortProtocol._send_frame(ACK)"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _send_frame(self, frame: bytes) -> None:
        """Write to the transport (a failure is logged, not raised)."""
        if self._transport is None:
            _LOGGER.warning("%s < Transport is not connected (not sent)", frame.hex())
            return

        try:
            await self._transport.write_frame(frame)
        except TransportError as err:
            _LOGGER.warning("%s < Failed to send: %s", frame.hex(), err)


ZwaveProtocolT: TypeAlias = PortProtocol | ReadProtocol
