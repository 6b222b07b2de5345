#!/usr/bin/env python3
"""ZWave Bridge - Schemas for the configuration of the protocol stack."""

from __future__ import annotations

from typing import Final

import voluptuous as vol

from .const import (
    DEFAULT_BAUDRATE,
    DEFAULT_LIVENESS_INTERVAL,
    DEFAULT_RECONNECT_DELAY,
)

SZ_ACK_PER_FRAME: Final = "ack_per_frame"
SZ_BAUDRATE: Final = "baudrate"
SZ_DISABLE_SENDING: Final = "disable_sending"
SZ_LIVENESS_INTERVAL: Final = "liveness_interval"
SZ_RECONNECT_DELAY: Final = "reconnect_delay"
SZ_VERIFY_CHECKSUM: Final = "verify_checksum"

#
# 1/2: Schemas for the serial port (the controller is 115200, 8N1, raw bytes)
SCH_SERIAL_PORT_CONFIG = vol.Schema(
    {
        vol.Optional(SZ_BAUDRATE, default=DEFAULT_BAUDRATE): vol.All(
            vol.Coerce(int), vol.Any(57600, 115200)
        ),  # NB: the controller defaults to 115200
        vol.Optional("bytesize", default=8): vol.In((5, 6, 7, 8)),
        vol.Optional("parity", default="N"): vol.In(("N", "E", "O", "M", "S")),
        vol.Optional("stopbits", default=1): vol.In((1, 1.5, 2)),
        vol.Optional("dsrdtr", default=False): bool,
        vol.Optional("rtscts", default=False): bool,
        vol.Optional("timeout", default=0): vol.Any(None, int),
        vol.Optional("xonxoff", default=False): bool,
    },
    extra=vol.PREVENT_EXTRA,
)

#
# 2/2: Schemas for the engine (protocol, transport & supervisor)
SCH_ENGINE_DICT = {
    vol.Optional(SZ_DISABLE_SENDING, default=False): bool,
    vol.Optional(SZ_VERIFY_CHECKSUM, default=False): bool,
    vol.Optional(SZ_ACK_PER_FRAME, default=False): bool,
    vol.Optional(SZ_RECONNECT_DELAY, default=DEFAULT_RECONNECT_DELAY): vol.All(
        vol.Coerce(float), vol.Range(min=0)
    ),
    vol.Optional(SZ_LIVENESS_INTERVAL, default=DEFAULT_LIVENESS_INTERVAL): vol.Any(
        None, vol.All(vol.Coerce(float), vol.Range(min=0, min_included=False))
    ),
}
SCH_ENGINE_CONFIG = vol.Schema(SCH_ENGINE_DICT, extra=vol.PREVENT_EXTRA)
