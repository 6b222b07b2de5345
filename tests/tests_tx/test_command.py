#!/usr/bin/env python3
"""Unittests for the zwave_tx command table."""

from zwave_tx.command import (
    FUNC_ID_NAMES,
    SZ_APPLICATION_COMMAND_HANDLER,
    FuncId,
    func_name,
)


def test_func_name_known() -> None:
    assert func_name(0x04) == SZ_APPLICATION_COMMAND_HANDLER
    assert func_name(0x04) == "application_command_handler"
    assert func_name(FuncId.ZW_SEND_DATA) == "zw_send_data"
    assert func_name(0x49) == "zw_application_update"


def test_func_name_unknown() -> None:
    assert func_name(0x00) is None
    assert func_name(0xFF) is None


def test_func_id_names_are_unique() -> None:
    assert len(FUNC_ID_NAMES) == len(FuncId)
    assert len(set(FUNC_ID_NAMES.values())) == len(FUNC_ID_NAMES)
