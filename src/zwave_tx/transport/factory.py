#!/usr/bin/env python3
"""ZWave Bridge - Factory for serial API frame transports."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Final, TypeAlias

from serial import (  # type: ignore[import-untyped]
    Serial,
    SerialException,
    serial_for_url,
)

from .. import exceptions as exc
from ..const import DEFAULT_CONNECT_TIMEOUT
from ..interfaces import TransportInterface
from ..schemas import SCH_SERIAL_PORT_CONFIG
from ..typing import PortConfigT, SerPortNameT
from .base import TransportConfig
from .port import PortTransport

if TYPE_CHECKING:
    from ..protocol import ZwaveProtocolT

_LOGGER = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_PORT: Final[float] = DEFAULT_CONNECT_TIMEOUT

ZwaveTransportT: TypeAlias = TransportInterface


def get_serial_instance(  # type: ignore[no-any-unimported]
    ser_name: SerPortNameT, ser_config: PortConfigT | None
) -> Serial:
    """Return an (open) Serial instance for the given port name and config.

    :param ser_name: Name (or pyserial URL) of the serial port.
    :param ser_config: Configuration for the serial port.
    :return: Configured Serial object.
    :raises exc.TransportSourceInvalid: If the serial port cannot be opened.
    """
    # For example:
    # - zwave-bridge listen 'rfc2217://localhost:5001'
    # - zwave-bridge listen 'alt:///dev/ttyACM0?class=PosixPollSerial'

    ser_config = SCH_SERIAL_PORT_CONFIG(ser_config or {})

    try:
        ser_obj = serial_for_url(ser_name, **ser_config)
    except SerialException as err:
        _LOGGER.error("Failed to open %s (config: %s): %s", ser_name, ser_config, err)
        raise exc.TransportSourceInvalid(
            f"Unable to open the serial port: {ser_name}"
        ) from err

    # FTDI on Posix/Linux would be a common environment for this library...
    with contextlib.suppress(AttributeError, NotImplementedError, ValueError):
        ser_obj.set_low_latency_mode(True)

    return ser_obj


def issue_warning() -> None:
    """Warn that only a local serial port (on linux) is well tested."""
    _LOGGER.warning(
        "%s: frames may be delayed or lost over this type of connection, "
        "so consider a local serial port before reporting any transport issues",
        "Windows" if os.name == "nt" else "Network/RFC2217 serial port",
    )


async def transport_factory(
    protocol: ZwaveProtocolT,
    /,
    *,
    config: TransportConfig,
    port_name: SerPortNameT | None = None,
    port_config: PortConfigT | None = None,
    transport_constructor: Callable[..., Awaitable[ZwaveTransportT]] | None = None,
    extra: dict[str, Any] | None = None,
    loop: asyncio.AbstractEventLoop | None = None,
) -> ZwaveTransportT:
    """Create and return a serial API frame Transport, bound to the Protocol.

    :param protocol: The protocol instance that will use this transport.
    :param config: Extracted setup configuration for transports.
    :param port_name: Serial port name (or pyserial URL), defaults to None.
    :param port_config: Configuration dictionary for serial port, defaults to None.
    :param transport_constructor: Custom async callable to create a transport.
    :param extra: Extra configuration options, defaults to None.
    :param loop: Asyncio event loop, defaults to None.
    :return: An instantiated ZwaveTransportT object.
    :raises exc.TransportSourceInvalid: If the serial port is invalid or unavailable.
    :raises exc.TransportError: If the Transport doesn't bind to the Protocol in time.
    """

    # If a constructor is provided, delegate entirely to it.
    if transport_constructor:
        _LOGGER.debug("transport_factory: Delegating to external transport_constructor")
        return await transport_constructor(
            protocol,
            config=config,
            extra=extra,
            loop=loop,
        )

    if port_name is None:
        raise exc.TransportSourceInvalid("A serial port name must be specified")

    ser_instance = get_serial_instance(port_name, port_config)

    if os.name == "nt" or ser_instance.portstr[:7] in ("rfc2217", "socket:"):
        issue_warning()

    transport = PortTransport(
        ser_instance,
        protocol,
        config=config,
        extra=extra,
        loop=loop,
    )

    try:
        await protocol.wait_for_connection_made(
            timeout=config.timeout or _DEFAULT_TIMEOUT_PORT
        )
    except exc.TransportError:
        transport.close()  # prevent "Zombie" callbacks
        raise

    return transport
