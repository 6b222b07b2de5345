#!/usr/bin/env python3
"""ZWave Bridge - the gateway (i.e. the controller, and the downstream service)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from zwave_tx import (
    SZ_APPLICATION_COMMAND_HANDLER,
    ConnectionSupervisor,
    DataFrame,
)

from .dedup import DedupFilter
from .event import ApplicationEvent
from .exceptions import EventPayloadInvalid
from .notifier import Notifier
from .schemas import SCH_GATEWAY_CONFIG, SZ_BROKER_URL, SZ_CONFIG, SZ_NOTIFIER

if TYPE_CHECKING:
    from zwave_tx.transport import ZwaveTransportT
    from zwave_tx.typing import PortConfigT

_LOGGER = logging.getLogger(__name__)

EventHandlerT = Callable[[ApplicationEvent], None]


class Gateway(ConnectionSupervisor):
    """The gateway class.

    Receives frames from the controller (via the ``ConnectionSupervisor``), decodes
    the application events, discards the duplicates, and notifies the downstream
    service of the remainder.
    """

    def __init__(
        self,
        port_name: str,
        port_config: PortConfigT | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
        transport_constructor: Callable[..., Awaitable[ZwaveTransportT]] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the Gateway instance.

        :param port_name: The serial port name (e.g. '/dev/ttyACM0'), or pyserial URL.
        :param port_config: Configuration dictionary for the serial port.
        :param loop: The asyncio event loop to use, defaults to the running loop.
        :param transport_constructor: A factory for creating the transport layer.
        :param kwargs: The engine ``config`` and the ``notifier`` config (see schemas).
        """
        if kwargs.pop("debug_mode", None):
            _LOGGER.setLevel(logging.DEBUG)

        config: dict[str, Any] = SCH_GATEWAY_CONFIG(kwargs)

        super().__init__(
            port_name,
            port_config=port_config,
            loop=loop,
            transport_constructor=transport_constructor,
            **config[SZ_CONFIG],
        )

        notifier_config = dict(config[SZ_NOTIFIER])

        self.dedup = DedupFilter()
        self.notifier = Notifier(
            notifier_config.pop(SZ_BROKER_URL), **notifier_config
        )

        self._event_handlers: list[EventHandlerT] = []

        self.add_handler(
            SZ_APPLICATION_COMMAND_HANDLER, self._handle_application_command
        )

    def __repr__(self) -> str:
        return f"Gateway(port_name={self.ser_name}, port_config={self._port_config})"

    def add_event_handler(self, handler: EventHandlerT) -> Callable[[], None]:
        """Add a handler for (accepted) events, e.g. for display by the CLI.

        Returns a callable that can be used to subsequently remove the handler.
        """

        def del_handler() -> None:
            if handler in self._event_handlers:
                self._event_handlers.remove(handler)

        self._event_handlers.append(handler)
        return del_handler

    async def start(self) -> None:
        """Start the notifier, then open the serial port."""
        self.notifier.start()
        await super().start()

    async def stop(self) -> None:
        """Close the serial port, then stop the notifier."""
        await super().stop()
        # the MQTT client joins its network thread
        await self._loop.run_in_executor(None, self.notifier.stop)

    def _handle_application_command(self, frame: DataFrame) -> None:
        """Decode the event, and notify the downstream service if it is new."""
        try:
            event = ApplicationEvent.from_frame(frame)
        except EventPayloadInvalid as err:
            _LOGGER.warning("%r < %s", frame, err)
            return

        if not self.dedup.accept(event):
            return

        _LOGGER.info("Event: %s", event)

        self.notifier.notify(event)

        for handler in tuple(self._event_handlers):
            handler(event)
