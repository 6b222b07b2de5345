#!/usr/bin/env python3
"""Unittests for the serial port transport, using a virtual (pty) controller."""

import asyncio
import contextlib
import os
from collections.abc import AsyncGenerator, Callable, Generator
from unittest.mock import patch

import pytest
from serial import SerialException  # type: ignore[import-untyped]

from zwave_tx.command import SZ_APPLICATION_COMMAND_HANDLER, FuncId
from zwave_tx.frame import DataFrame, build_frame
from zwave_tx.gateway import ConnectionState, ConnectionSupervisor
from zwave_tx.transport import PortTransport

if os.name == "posix":
    import pty
    import tty

pytestmark = pytest.mark.skipif(os.name != "posix", reason="requires termios")

APP_CMD_FRAME = build_frame(
    FuncId.APPLICATION_COMMAND_HANDLER,
    bytes([0x00, 0x02, 0x05, 0x5B, 0x03, 0x01, 0x00, 0x04]),
)


class VirtualController:
    """The device end of a pty pair, its port_name is the other end."""

    def __init__(self) -> None:
        self._master_fd, self._slave_fd = pty.openpty()
        tty.setraw(self._master_fd)
        os.set_blocking(self._master_fd, False)

        self.port_name = os.ttyname(self._slave_fd)

    async def write(self, data: bytes) -> None:
        """Write the bytes one at a time, as a slow device would."""
        for byte in data:
            os.write(self._master_fd, bytes([byte]))
            await asyncio.sleep(0.001)

    async def read(self, size: int, timeout: float = 1.0) -> bytes:
        async def read() -> bytes:
            while True:
                with contextlib.suppress(BlockingIOError):
                    if data := os.read(self._master_fd, size):
                        return data
                await asyncio.sleep(0.001)

        return await asyncio.wait_for(read(), timeout)

    def unplug(self) -> None:
        """Close both ends of the pty (the port is then lost)."""
        if self._master_fd < 0:
            return
        os.close(self._master_fd)
        os.close(self._slave_fd)
        self._master_fd = self._slave_fd = -1


@pytest.fixture
def controller() -> Generator[VirtualController, None, None]:
    device = VirtualController()
    try:
        yield device
    finally:
        device.unplug()


@pytest.fixture
async def supervisor(
    controller: VirtualController,
) -> AsyncGenerator[ConnectionSupervisor, None]:
    sup = ConnectionSupervisor(
        controller.port_name, reconnect_delay=0.05, liveness_interval=0.01
    )
    try:
        yield sup
    finally:
        await sup.stop()


async def _wait_for(condition: Callable[[], object], timeout: float = 1.0) -> None:
    async def wait() -> None:
        while not condition():
            await asyncio.sleep(0.001)

    await asyncio.wait_for(wait(), timeout)


async def test_port_receives_and_acks(
    controller: VirtualController, supervisor: ConnectionSupervisor
) -> None:
    """A frame that arrives a byte at a time is dispatched, and then ACKed."""
    handled: list[DataFrame] = []
    supervisor.add_handler(SZ_APPLICATION_COMMAND_HANDLER, handled.append)

    await supervisor.start()
    assert supervisor.state == ConnectionState.OPEN
    assert isinstance(supervisor._transport, PortTransport)

    await controller.write(APP_CMD_FRAME)
    await _wait_for(lambda: handled)

    assert len(handled) == 1
    assert bytes(handled[0]) == APP_CMD_FRAME
    assert await controller.read(1) == b"\x06"


async def test_port_lost_on_read(
    controller: VirtualController, supervisor: ConnectionSupervisor
) -> None:
    """A read error closes the transport, and reconnection attempts follow."""
    await supervisor.start()
    transport = supervisor._transport
    assert transport is not None

    controller.unplug()

    await _wait_for(lambda: supervisor.state == ConnectionState.RECONNECTING)
    assert transport.is_closing()

    await _wait_for(lambda: supervisor.reconnect_attempts >= 2)
    assert supervisor.state == ConnectionState.RECONNECTING


async def test_port_lost_on_write(
    controller: VirtualController, supervisor: ConnectionSupervisor
) -> None:
    """A write error closes the transport, and the port is then reopened."""
    await supervisor.start()
    transport = supervisor._transport
    assert isinstance(transport, PortTransport)

    with patch.object(
        transport.serial, "write", side_effect=SerialException("write failed")
    ):
        await controller.write(APP_CMD_FRAME)  # the ACK will fail to send
        await _wait_for(lambda: supervisor.state == ConnectionState.RECONNECTING)

    assert transport.is_closing()

    await _wait_for(lambda: supervisor.state == ConnectionState.OPEN)
    assert supervisor._transport is not transport
