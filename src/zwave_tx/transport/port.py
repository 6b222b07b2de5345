#!/usr/bin/env python3
"""ZWave Bridge - Serial port frame transport.

The controller is a USB stick presenting a serial port (e.g. ``/dev/ttyACM0``,
or better ``/dev/serial/by-id/usb-0658_0200-if00``), at 115200 baud, 8N1.

For ser2net, use the following YAML with: ``ser2net -c ser2net.yaml``

.. code-block::

    connection: &con00
    accepter: telnet(rfc2217),tcp,5001
    timeout: 0
    connector: serialdev,/dev/ttyACM0,115200n81,local
    options:
        max-connections: 1

For ``socat``, see:

.. code-block::

    socat -dd pty,raw,echo=0 pty,raw,echo=0
    zwave-bridge listen /dev/pts/0
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Final

import serial_asyncio_fast as serial_asyncio  # type: ignore[import-untyped]
from serial import Serial, SerialException  # type: ignore[import-untyped]

from .. import exceptions as exc
from ..const import SZ_SERIAL
from .base import TransportConfig, _FullTransport

if TYPE_CHECKING:
    from ..protocol import ZwaveProtocolT

_LOGGER = logging.getLogger(__name__)

_DBG_FORCE_FRAME_LOGGING: Final[bool] = False

__all__ = [
    "PortTransport",
    "serial_asyncio",
]


class _PortTransportAbstractor(serial_asyncio.SerialTransport):  # type: ignore[misc]
    """Do the bare minimum to abstract a transport from its underlying class."""

    serial: Serial  # type: ignore[no-any-unimported]

    def __init__(  # type: ignore[no-any-unimported]
        self,
        serial_instance: Serial,
        protocol: ZwaveProtocolT,
        /,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Initialize the port transport abstractor.

        SerialTransport will (soon) invoke the protocol's connection_made().
        """
        super().__init__(loop or asyncio.get_event_loop(), protocol, serial_instance)


class PortTransport(_FullTransport, _PortTransportAbstractor):  # type: ignore[misc]
    """Send/receive frames async to/from a controller via a serial port."""

    def __init__(  # type: ignore[no-any-unimported]
        self,
        serial_instance: Serial,
        protocol: ZwaveProtocolT,
        /,
        *,
        config: TransportConfig,
        extra: dict[str, Any] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Initialize the port transport."""
        _PortTransportAbstractor.__init__(self, serial_instance, protocol, loop=loop)
        _FullTransport.__init__(self, config=config, extra=extra, loop=loop)

    def get_extra_info(self, name: str, default: Any = None) -> Any:
        """Get extra information about the transport (incl. the Serial instance)."""
        if name == SZ_SERIAL:
            return self._serial
        return super().get_extra_info(name, default=default)

    def _read_ready(self) -> None:
        """Make Frames from the read data and process them."""
        try:
            data: bytes = self.serial.read(self._max_read_size)
        except SerialException as err:
            if not self._closing:
                self._close(exc=exc.TransportSerialError(f"Serial port lost: {err}"))
            return

        if not data:
            return

        self._bytes_read(data)

    async def _write_frame(self, frame: bytes) -> None:
        """Write some data bytes to the underlying transport."""
        log_msg = f"Serial transport transmitting frame: {frame.hex(' ')}"
        if _DBG_FORCE_FRAME_LOGGING:
            _LOGGER.warning(log_msg)
        else:
            _LOGGER.debug(log_msg)

        try:
            self._write(frame)
        except SerialException as err:
            self._close(exc=exc.TransportSerialError(f"Serial port lost: {err}"))
            raise exc.TransportSerialError(f"Failed to write frame: {err}") from err

    def _write(self, data: bytes) -> None:
        """Perform the actual write to the serial port."""
        self.serial.write(data)

    def _close(self, exc: exc.ZwaveException | None = None) -> None:  # type: ignore[override]
        """Close the transport (the protocol's connection_lost() is called soon)."""
        serial_asyncio.SerialTransport._close(self, exc)

    def close(self) -> None:
        """Close the transport gracefully."""
        serial_asyncio.SerialTransport.close(self)
