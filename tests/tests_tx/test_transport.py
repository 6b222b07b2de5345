#!/usr/bin/env python3
"""Unittests for the zwave_tx transports, and their factory."""

import asyncio
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest
from serial import SerialException  # type: ignore[import-untyped]

from zwave_tx import exceptions as exc
from zwave_tx.command import FuncId
from zwave_tx.discovery import port_exists
from zwave_tx.frame import build_frame
from zwave_tx.protocol import PortProtocol
from zwave_tx.transport import CallbackTransport, TransportConfig, transport_factory

APP_CMD_FRAME = build_frame(
    FuncId.APPLICATION_COMMAND_HANDLER,
    bytes([0x00, 0x02, 0x05, 0x5B, 0x03, 0x01, 0x00, 0x04]),
)


@pytest.fixture
def mock_protocol() -> Mock:
    return Mock()


@pytest.fixture
def mock_writer() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_serial_for_url() -> Generator[MagicMock, None, None]:
    with patch("zwave_tx.transport.factory.serial_for_url") as mock_fnc:
        mock_fnc.return_value.portstr = "/dev/ttyACM0"
        yield mock_fnc


@pytest.fixture
def mock_port_transport() -> Generator[MagicMock, None, None]:
    with patch("zwave_tx.transport.factory.PortTransport") as mock_cls:
        yield mock_cls


async def test_callback_transport_handshake(
    mock_protocol: Mock, mock_writer: AsyncMock
) -> None:
    """Test that connection_made is called automatically upon initialization."""
    transport = CallbackTransport(mock_protocol, mock_writer, config=TransportConfig())

    mock_protocol.connection_made.assert_called_once_with(transport)


async def test_callback_transport_autostart(
    mock_protocol: Mock, mock_writer: AsyncMock
) -> None:
    transport = CallbackTransport(mock_protocol, mock_writer, config=TransportConfig())
    assert transport.is_reading() is False

    transport = CallbackTransport(
        mock_protocol, mock_writer, config=TransportConfig(autostart=True)
    )
    assert transport.is_reading() is True


async def test_callback_transport_receive_respects_pause(
    mock_protocol: Mock, mock_writer: AsyncMock
) -> None:
    transport = CallbackTransport(mock_protocol, mock_writer, config=TransportConfig())

    transport.receive_bytes(APP_CMD_FRAME)
    mock_protocol.frames_received.assert_not_called()

    transport.resume_reading()
    transport.receive_bytes(APP_CMD_FRAME)
    assert mock_protocol.frames_received.call_count == 1

    (frames,), _ = mock_protocol.frames_received.call_args
    assert [f.name for f in frames] == ["application_command_handler"]


async def test_callback_transport_receive_in_chunks(
    mock_protocol: Mock, mock_writer: AsyncMock
) -> None:
    """Only complete frames are passed to the protocol, one batch per chunk."""
    transport = CallbackTransport(
        mock_protocol, mock_writer, config=TransportConfig(autostart=True)
    )

    transport.receive_bytes(APP_CMD_FRAME[:5])
    mock_protocol.frames_received.assert_not_called()

    transport.receive_bytes(APP_CMD_FRAME[5:] + b"\x06" + APP_CMD_FRAME)
    (frames,), _ = mock_protocol.frames_received.call_args
    assert len(frames) == 3


async def test_callback_transport_write_frame(
    mock_protocol: Mock, mock_writer: AsyncMock
) -> None:
    transport = CallbackTransport(mock_protocol, mock_writer, config=TransportConfig())

    await transport.write_frame(b"\x06")

    mock_writer.assert_awaited_once_with(b"\x06")


async def test_callback_transport_write_error(
    mock_protocol: Mock, mock_writer: AsyncMock
) -> None:
    """Verify writer exceptions are wrapped in TransportError."""
    mock_writer.side_effect = OSError("Connection lost")
    transport = CallbackTransport(mock_protocol, mock_writer, config=TransportConfig())

    with pytest.raises(exc.TransportError):
        await transport.write_frame(b"\x06")


async def test_callback_transport_disable_sending(
    mock_protocol: Mock, mock_writer: AsyncMock
) -> None:
    transport = CallbackTransport(
        mock_protocol, mock_writer, config=TransportConfig(disable_sending=True)
    )

    with pytest.raises(exc.TransportError):
        await transport.write_frame(b"\x06")
    mock_writer.assert_not_awaited()


async def test_callback_transport_close(
    mock_protocol: Mock, mock_writer: AsyncMock
) -> None:
    transport = CallbackTransport(mock_protocol, mock_writer, config=TransportConfig())

    transport.close()
    transport.close()  # is idempotent
    await asyncio.sleep(0)

    assert transport.is_closing()
    mock_protocol.connection_lost.assert_called_once_with(None)

    with pytest.raises(exc.TransportError):
        await transport.write_frame(b"\x06")


async def test_factory_delegates_to_constructor(mock_protocol: Mock) -> None:
    constructed: dict[str, Any] = {}

    async def constructor(protocol: Any, **kwargs: Any) -> CallbackTransport:
        constructed.update(kwargs)
        return CallbackTransport(protocol, AsyncMock(), **kwargs)

    config = TransportConfig(disable_sending=True)
    transport = await transport_factory(
        mock_protocol, config=config, transport_constructor=constructor
    )

    assert isinstance(transport, CallbackTransport)
    assert constructed["config"] is config


async def test_factory_requires_port_name(mock_protocol: Mock) -> None:
    with pytest.raises(exc.TransportSourceInvalid):
        await transport_factory(mock_protocol, config=TransportConfig())


async def test_factory_invalid_port(
    mock_serial_for_url: MagicMock, mock_protocol: Mock
) -> None:
    mock_serial_for_url.side_effect = SerialException("could not open port")

    with pytest.raises(exc.TransportSourceInvalid) as exc_info:
        await transport_factory(
            mock_protocol, config=TransportConfig(), port_name="/dev/ttyACM9"
        )

    assert "hint:" in str(exc_info.value)


async def test_factory_opens_serial_port(
    mock_serial_for_url: MagicMock, mock_port_transport: MagicMock
) -> None:
    protocol = PortProtocol()

    def bind(ser_instance: Any, protocol: Any, **kwargs: Any) -> MagicMock:
        transport = MagicMock()
        transport.is_closing.return_value = False
        protocol.connection_made(transport)
        return transport

    mock_port_transport.side_effect = bind

    transport = await transport_factory(
        protocol, config=TransportConfig(), port_name="/dev/ttyACM0"
    )

    assert protocol.is_connected
    assert await protocol.wait_for_connection_made() is transport
    args, kwargs = mock_serial_for_url.call_args
    assert args == ("/dev/ttyACM0",)
    assert kwargs["baudrate"] == 115200
    assert kwargs["bytesize"] == 8 and kwargs["parity"] == "N"
    assert kwargs["stopbits"] == 1


async def test_factory_closes_unbound_transport(
    mock_serial_for_url: MagicMock, mock_port_transport: MagicMock
) -> None:
    protocol = PortProtocol()

    with pytest.raises(exc.TransportError):
        await transport_factory(
            protocol, config=TransportConfig(timeout=0.01), port_name="/dev/ttyACM0"
        )

    mock_port_transport.return_value.close.assert_called_once()


async def test_port_exists(tmp_path: Path) -> None:
    port = tmp_path / "ttyACM0"

    assert await port_exists(str(port)) is False
    port.touch()
    assert await port_exists(str(port)) is True


async def test_port_exists_url() -> None:
    assert await port_exists("loop://") is True
    assert await port_exists("nonsense://localhost:5001") is False
