#!/usr/bin/env python3
"""ZWave Bridge - the serial API command (function id) table.

Maps the numeric function id of a data frame to its semantic name. Ids not in
the table decode with a name of None (their raw id is retained by the frame).
"""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType
from typing import Final


class FuncId(IntEnum):
    """Serial API function ids, as used by the controller."""

    SERIAL_API_GET_INIT_DATA = 0x02
    SERIAL_API_APPL_NODE_INFORMATION = 0x03
    APPLICATION_COMMAND_HANDLER = 0x04
    ZW_GET_CONTROLLER_CAPABILITIES = 0x05
    SERIAL_API_SET_TIMEOUTS = 0x06
    SERIAL_API_GET_CAPABILITIES = 0x07
    SERIAL_API_SOFT_RESET = 0x08
    ZW_SEND_NODE_INFORMATION = 0x12
    ZW_SEND_DATA = 0x13
    ZW_GET_VERSION = 0x15
    ZW_R_F_POWER_LEVEL_SET = 0x17
    ZW_GET_RANDOM = 0x1C
    MEMORY_GET_ID = 0x20
    MEMORY_GET_BYTE = 0x21
    ZW_READ_MEMORY = 0x23
    ZW_SET_LEARN_NODE_STATE = 0x40
    ZW_GET_NODE_PROTOCOL_INFO = 0x41
    ZW_SET_DEFAULT = 0x42
    ZW_NEW_CONTROLLER = 0x43
    ZW_REPLICATION_COMMAND_COMPLETE = 0x44
    ZW_REPLICATION_SEND_DATA = 0x45
    ZW_ASSIGN_RETURN_ROUTE = 0x46
    ZW_DELETE_RETURN_ROUTE = 0x47
    ZW_REQUEST_NODE_NEIGHBOR_UPDATE = 0x48
    ZW_APPLICATION_UPDATE = 0x49
    ZW_ADD_NODE_TO_NETWORK = 0x4A
    ZW_REMOVE_NODE_FROM_NETWORK = 0x4B
    ZW_CREATE_NEW_PRIMARY = 0x4C
    ZW_CONTROLLER_CHANGE = 0x4D
    ZW_SET_LEARN_MODE = 0x50
    ZW_ASSIGN_SUC_RETURN_ROUTE = 0x51
    ZW_ENABLE_SUC = 0x52
    ZW_REQUEST_NETWORK_UPDATE = 0x53
    ZW_SET_SUC_NODE_ID = 0x54
    ZW_DELETE_SUC_RETURN_ROUTE = 0x55
    ZW_GET_SUC_NODE_ID = 0x56
    ZW_REQUEST_NODE_NEIGHBOR_UPDATE_OPTIONS = 0x5A
    ZW_EXPLORE_REQUEST_INCLUSION = 0x5E
    ZW_REQUEST_NODE_INFO = 0x60
    ZW_REMOVE_FAILED_NODE_ID = 0x61
    ZW_IS_FAILED_NODE_ID = 0x62
    ZW_REPLACE_FAILED_NODE = 0x63
    GET_ROUTING_TABLE_LINE = 0x80
    LOCK_ROUTE_RESPONSE = 0x90
    ZW_GET_VIRTUAL_NODES = 0xA5
    ZW_IS_VIRTUAL_NODE = 0xA6
    SERIAL_API_SETUP = 0x0B


FUNC_ID_NAMES: Final = MappingProxyType({f.value: f.name.lower() for f in FuncId})

SZ_APPLICATION_COMMAND_HANDLER: Final = FuncId.APPLICATION_COMMAND_HANDLER.name.lower()


def func_name(func_id: int) -> str | None:
    """Return the semantic name of a function id, or None if it is not known."""
    return FUNC_ID_NAMES.get(func_id)
