#!/usr/bin/env python3
"""Unittests for the zwave_bridge application event."""

import pytest

from zwave_bridge.event import ApplicationEvent
from zwave_bridge.exceptions import EventPayloadInvalid
from zwave_tx.command import FuncId
from zwave_tx.frame import build_frame, decode_data_frame


def _frame(payload: bytes):  # type: ignore[no-untyped-def]
    frame, _ = decode_data_frame(
        build_frame(FuncId.APPLICATION_COMMAND_HANDLER, payload), 0
    )
    return frame


def test_from_frame() -> None:
    # status, node, cmd_len, class_id, command, counter, key_attrs, scene
    event = ApplicationEvent.from_frame(
        _frame(bytes([0x00, 0x02, 0x05, 0x5B, 0x03, 0x2A, 0x00, 0x04]))
    )

    assert event == ApplicationEvent(
        node=2, status=0, class_id=0x5B, unknown1=0x03, counter=42, sub_node=4
    )


def test_from_frame_ignores_trailing_bytes() -> None:
    event = ApplicationEvent.from_frame(
        _frame(bytes([0x00, 0x07, 0x05, 0x5B, 0x03, 0xFF, 0x00, 0x01, 0xAA, 0xBB]))
    )

    assert (event.node, event.counter, event.sub_node) == (7, 255, 1)


@pytest.mark.parametrize("length", [0, 1, 5, 7])
def test_from_frame_payload_too_short(length: int) -> None:
    with pytest.raises(EventPayloadInvalid) as exc_info:
        ApplicationEvent.from_frame(_frame(bytes(length)))

    assert "hint:" in str(exc_info.value)


def test_str() -> None:
    event = ApplicationEvent(
        node=2, status=0, class_id=0x5B, unknown1=0x03, counter=42, sub_node=4
    )

    assert str(event) == "node=002, sub_node=004, counter=42, class_id=0x5B"
