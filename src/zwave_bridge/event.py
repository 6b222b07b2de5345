#!/usr/bin/env python3
"""ZWave Bridge - the application event, as reported by a node.

An event is decoded from the payload of an APPLICATION_COMMAND_HANDLER frame::

    +--------+------+---------+-------+---------+---------+-----------+-------+
    | status | node | cmd_len | class | command | seq_num | key_attrs | scene |
    +--------+------+---------+-------+---------+---------+-----------+-------+
    |   0    |  1   |    2    |   3   |    4    |    5    |     6     |   7   |
    +--------+------+---------+-------+---------+---------+-----------+-------+

For a central scene notification, the sequence number is a per-node counter
(0-255, wrapping), and the scene number identifies the button (the sub-node).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from zwave_tx.frame import DataFrame

from .exceptions import EventPayloadInvalid

_IDX_STATUS: Final = 0
_IDX_NODE: Final = 1
_IDX_CLASS_ID: Final = 3
_IDX_UNKNOWN1: Final = 4
_IDX_COUNTER: Final = 5
_IDX_SUB_NODE: Final = 7

MIN_PAYLOAD_LEN: Final = _IDX_SUB_NODE + 1


@dataclass(frozen=True)
class ApplicationEvent:
    """A semantic event from a node, e.g. a button press."""

    node: int
    status: int
    class_id: int
    unknown1: int  # the command byte of the command class
    counter: int
    sub_node: int

    @classmethod
    def from_frame(cls, frame: DataFrame) -> ApplicationEvent:
        """Create an event from an (application_command_handler) data frame.

        :raises EventPayloadInvalid: if the payload is too short to hold an event
        """
        payload = frame.payload

        if len(payload) < MIN_PAYLOAD_LEN:
            raise EventPayloadInvalid(
                f"Payload is too short for an event: {payload.hex(' ') or '(empty)'} "
                f"({len(payload)} bytes, expected at least {MIN_PAYLOAD_LEN})"
            )

        return cls(
            node=payload[_IDX_NODE],
            status=payload[_IDX_STATUS],
            class_id=payload[_IDX_CLASS_ID],
            unknown1=payload[_IDX_UNKNOWN1],
            counter=payload[_IDX_COUNTER],
            sub_node=payload[_IDX_SUB_NODE],
        )

    def __str__(self) -> str:
        return (
            f"node={self.node:03d}, sub_node={self.sub_node:03d}, "
            f"counter={self.counter}, class_id=0x{self.class_id:02X}"
        )
