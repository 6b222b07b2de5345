#!/usr/bin/env python3
"""ZWave Bridge - The connection supervisor for the serial controller."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import TYPE_CHECKING, Never

from . import exceptions as exc
from .const import DEFAULT_LIVENESS_INTERVAL, DEFAULT_RECONNECT_DELAY
from .discovery import port_exists
from .protocol import protocol_factory
from .transport import TransportConfig, transport_factory
from .typing import FrameHandlerT, PortConfigT, SerPortNameT

if TYPE_CHECKING:
    from .protocol import ZwaveProtocolT
    from .transport import ZwaveTransportT


_LOGGER = logging.getLogger(__name__)


class ConnectionState(StrEnum):
    CLOSED = "closed"
    OPEN = "open"
    RECONNECTING = "reconnecting"


class ConnectionSupervisor:
    """Own the serial connection to the controller, and keep it open.

    Once started, the connection is reopened whenever it is lost. Reconnection
    attempts are evenly spaced (every reconnect_delay seconds) and unbounded; there
    is no terminal failure state, only stop() will close the connection for good.
    """

    def __init__(
        self,
        port_name: str,
        port_config: PortConfigT | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
        *,
        disable_sending: bool = False,
        verify_checksum: bool = False,
        ack_per_frame: bool = False,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        liveness_interval: float | None = DEFAULT_LIVENESS_INTERVAL,
        transport_constructor: Callable[..., Awaitable[ZwaveTransportT]] | None = None,
    ) -> None:
        self.ser_name = SerPortNameT(port_name)
        self._port_config: PortConfigT | dict[Never, Never] = port_config or {}
        self._loop = loop or asyncio.get_running_loop()

        self._disable_sending = disable_sending
        self._verify_checksum = verify_checksum
        self._reconnect_delay = reconnect_delay
        self._liveness_interval = liveness_interval
        self._transport_constructor = transport_constructor

        self._protocol: ZwaveProtocolT = protocol_factory(
            disable_sending=disable_sending, ack_per_frame=ack_per_frame
        )
        self._transport: ZwaveTransportT | None = None  # None until self.start()

        self._state = ConnectionState.CLOSED
        self._closing = False

        self._reconnect_task: asyncio.Task[None] | None = None
        self._watcher_task: asyncio.Task[None] | None = None

        self.reconnect_attempts = 0  # since the last successful open

    def __str__(self) -> str:
        return f"{self.ser_name} ({self._state})"

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def reconnect_delay(self) -> float:
        return self._reconnect_delay

    def _set_state(self, state: ConnectionState) -> None:
        if state != self._state:
            _LOGGER.info("%s: connection %s -> %s", self.ser_name, self._state, state)
        self._state = state

    def add_handler(self, name: str, handler: FrameHandlerT) -> Callable[[], None]:
        """Add a handler for data frames (by command name) to the Protocol.

        Returns a callable that can be used to subsequently remove the handler.
        """
        return self._protocol.add_handler(name, handler)

    async def start(self) -> None:
        """Open the serial port, and start receiving frames (and sending ACKs).

        Will not raise if the port can't be opened, instead reconnection attempts are
        scheduled.
        """
        if self._transport and not self._transport.is_closing():
            return

        self._closing = False

        transport_config = TransportConfig(
            disable_sending=self._disable_sending,
            verify_checksum=self._verify_checksum,
        )

        try:
            # incl. await protocol.wait_for_connection_made()
            self._transport = await transport_factory(
                self._protocol,
                config=transport_config,
                port_name=self.ser_name,
                port_config=self._port_config,  # type: ignore[arg-type]
                transport_constructor=self._transport_constructor,
                loop=self._loop,
            )
        except exc.TransportError as err:
            _LOGGER.warning("%s: unable to open the port: %s", self.ser_name, err)
            self._connection_failed()
            return

        # an attempt may still be pending, if reconnect() was invoked directly
        if self._reconnect_task and self._reconnect_task is not asyncio.current_task():
            self._reconnect_task.cancel()
        self._reconnect_task = None

        self.reconnect_attempts = 0
        self._set_state(ConnectionState.OPEN)

        self._watcher_task = self._loop.create_task(
            self._watch_liveness(self._transport),
            name="ConnectionSupervisor._watch_liveness()",
        )

    async def stop(self) -> None:
        """Close the transport for good (any pending reconnection is cancelled)."""
        self._closing = True

        tasks = [
            t for t in (self._reconnect_task, self._watcher_task) if t and not t.done()
        ]
        for t in tasks:
            t.cancel()
        if tasks:
            await asyncio.wait(tasks)

        self._reconnect_task = self._watcher_task = None

        if self._transport:
            self._transport.close()
            await self._protocol.wait_for_connection_lost()
            self._transport = None

        self._set_state(ConnectionState.CLOSED)

    async def reconnect(self) -> None:
        """Reopen the port if it is present, otherwise try again later."""
        self.reconnect_attempts += 1

        if not await port_exists(self.ser_name):
            _LOGGER.debug(
                "%s: port not present (attempt %s), will retry in %s secs",
                self.ser_name,
                self.reconnect_attempts,
                self._reconnect_delay,
            )
            self._schedule_reconnect()
            return

        _LOGGER.info("%s: attempting reconnection...", self.ser_name)
        await self.start()

    def _connection_failed(self) -> None:
        self._set_state(ConnectionState.RECONNECTING)
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        """Schedule a (single) reconnection attempt after a fixed delay."""
        if self._closing or self._reconnect_task:
            return

        self._reconnect_task = self._loop.create_task(
            self._reconnect_after_delay(),
            name="ConnectionSupervisor._reconnect_after_delay()",
        )

    async def _reconnect_after_delay(self) -> None:
        """Wait and then attempt to reconnect."""
        await asyncio.sleep(self._reconnect_delay)

        self._reconnect_task = None
        await self.reconnect()

    async def _watch_liveness(self, transport: ZwaveTransportT) -> None:
        """Wait for the connection to be lost, then schedule its reconnection.

        Whilst waiting, check periodically that the port is still present (a port
        can vanish without a read error, e.g. some USB hubs).
        """
        while True:
            try:
                err = await self._protocol.wait_for_connection_lost(
                    timeout=self._liveness_interval
                )
            except exc.TransportError:  # still connected
                if not transport.is_closing() and not await port_exists(self.ser_name):
                    _LOGGER.warning("%s: port has vanished", self.ser_name)
                    transport.close()
                continue
            break

        self._transport = None
        self._watcher_task = None

        if self._closing:
            return

        _LOGGER.warning("%s: connection lost: %s", self.ser_name, err)
        self._connection_failed()

    # for the convenience of the CLI
    async def run_forever(self) -> None:
        """Start, then wait until cancelled (the connection is then stopped)."""
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()
