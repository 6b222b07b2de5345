#!/usr/bin/env python3
"""ZWave Bridge - serial API frame protocol base classes.

This module provides the foundational protocol layer, handling transport
binding, and the dispatching of data frames to the handlers registered for
their command (function id) names.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Final

from ..exceptions import TransportError
from ..frame import DataFrame, Frame
from ..interfaces import ProtocolInterface, TransportInterface
from ..typing import FrameHandlerT

_DBG_FORCE_LOG_FRAMES: Final[bool] = False

_LOGGER = logging.getLogger(__name__)


class _BaseProtocol(ProtocolInterface, asyncio.Protocol):
    """Base class for serial API protocols."""

    def __init__(self, /, *, handlers: dict[str, FrameHandlerT] | None = None) -> None:
        """Initialize the base protocol.

        :param handlers: Handlers for data frames, keyed by command name.
        :type handlers: dict[str, FrameHandlerT] | None
        """
        self._handlers: dict[str, FrameHandlerT] = dict(handlers or {})

        self._transport: TransportInterface | None = None
        self._loop = asyncio.get_running_loop()

        self._wait_connection_lost: asyncio.Future[Exception | None] | None = None
        self._wait_connection_made: asyncio.Future[TransportInterface] = (
            self._loop.create_future()
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(handlers={list(self._handlers)})"

    def add_handler(self, name: str, handler: FrameHandlerT, /) -> Callable[[], None]:
        """Register the handler for data frames with the given command name.

        Any existing handler for that name is replaced. Returns a callback that can
        be used to subsequently remove the handler.
        """

        def del_handler() -> None:
            if self._handlers.get(name) is handler:
                del self._handlers[name]

        self._handlers[name] = handler
        return del_handler

    def connection_made(self, transport: TransportInterface) -> None:  # type: ignore[override]
        """Called when the connection to the Transport is established.

        The argument is the transport representing the pipe connection. To receive
        data, wait for frames_received() calls. When the connection is closed,
        connection_lost() is called.
        """
        if self._wait_connection_made.done():
            return

        self._wait_connection_lost = self._loop.create_future()
        self._wait_connection_made.set_result(transport)
        self._transport = transport

    async def wait_for_connection_made(
        self, timeout: float = 1.0
    ) -> TransportInterface:
        """A courtesy function to wait until connection_made() has been invoked.

        Will raise TransportError if isn't connected within timeout seconds.
        """
        try:
            return await asyncio.wait_for(
                asyncio.shield(self._wait_connection_made), timeout
            )
        except TimeoutError as err:
            raise TransportError(
                f"Transport did not bind to Protocol within {timeout} secs"
            ) from err

    def connection_lost(self, err: Exception | None) -> None:  # type: ignore[override]
        """Called when the connection to the Transport is lost or closed.

        The argument is an exception object or None (the latter meaning a regular EOF
        is received or the connection was aborted or closed).
        """
        self._transport = None

        if not self._wait_connection_lost:
            _LOGGER.debug(
                "connection_lost called but no connection was established (ignoring)"
            )
            # Reset the connection made future for next attempt
            if self._wait_connection_made.done():
                self._wait_connection_made = self._loop.create_future()
            return

        if self._wait_connection_lost.done():
            return

        self._wait_connection_made = self._loop.create_future()
        self._wait_connection_lost.set_result(err)

    async def wait_for_connection_lost(
        self, timeout: float | None = 1.0
    ) -> Exception | None:
        """A courtesy function to wait until connection_lost() has been invoked.

        Returns the exception (if any) that caused the connection to be lost, or
        None if there never was a connection.

        Will raise TransportError if isn't disconnected within timeout seconds (the
        wait may be retried).
        """
        if not self._wait_connection_lost:
            return None

        try:
            return await asyncio.wait_for(
                asyncio.shield(self._wait_connection_lost), timeout
            )
        except TimeoutError as err:
            raise TransportError(
                f"Transport did not unbind from Protocol within {timeout} secs"
            ) from err

    @property
    def is_connected(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    def frames_received(self, frames: Sequence[Frame]) -> None:
        """Called by the Transport with each batch of (complete) Frames."""
        for frame in frames:
            self.frame_received(frame)

    def frame_received(self, frame: Frame) -> None:
        """Log the Frame and dispatch it."""
        if _DBG_FORCE_LOG_FRAMES:
            _LOGGER.warning(f"Recv'd: {frame!r}")
        elif _LOGGER.getEffectiveLevel() > logging.DEBUG:
            _LOGGER.info(f"Recv'd: {frame!r}")
        else:
            _LOGGER.debug(f"Recv'd: {frame!r}")

        self.dispatch(frame)

    def dispatch(self, frame: Frame) -> None:
        """Pass a data frame to the handler registered for its command name.

        Control frames, frames with an unknown command, and frames without a
        registered handler are dropped.
        """
        if not isinstance(frame, DataFrame):
            return

        if frame.name is None:
            _LOGGER.debug("%r < Unknown command (ignored)", frame)
            return

        if (handler := self._handlers.get(frame.name)) is None:
            _LOGGER.debug("%r < No handler for %s (ignored)", frame, frame.name)
            return

        handler(frame)
