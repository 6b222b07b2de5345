#!/usr/bin/env python3
"""ZWave Bridge - Hardware discovery (is the serial port present?)."""

from __future__ import annotations

import asyncio
import logging
import os

from serial import SerialException, serial_for_url  # type: ignore[import-untyped]

from .typing import SerPortNameT

_LOGGER = logging.getLogger(__name__)

__all__ = ["port_exists"]


async def port_exists(serial_port: SerPortNameT | str) -> bool:
    """Return True if the serial port is (currently) available to be opened.

    Local ports are checked for on the filesystem, without blocking the event loop.
    URL-based ports (e.g. ``rfc2217://localhost:5001``) cannot be checked for
    presence, and so are deemed to exist if the URL is valid.
    """
    if "://" in serial_port:
        try:
            serial_for_url(serial_port, do_not_open=True)
        except (SerialException, ValueError) as err:
            _LOGGER.debug("Unable to find %s: %s", serial_port, err)
            return False
        return True

    loop = asyncio.get_running_loop()
    return bool(await loop.run_in_executor(None, os.path.exists, serial_port))
