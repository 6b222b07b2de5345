#!/usr/bin/env python3
"""ZWave Bridge - Interfaces for the serial API protocol stack."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .frame import Frame


class TransportInterface(ABC):
    """Interface for the Frame Transport layer."""

    @abstractmethod
    def close(self) -> None:
        """Close the transport."""

    @abstractmethod
    def get_extra_info(self, name: str, default: Any = None) -> Any:
        """Get extra information about the transport."""

    @abstractmethod
    def is_closing(self) -> bool:
        """Return True if the transport is closing or has closed."""

    @abstractmethod
    async def write_frame(self, frame: bytes) -> None:
        """Write an (encoded) frame."""


class ProtocolInterface(ABC):
    """Interface for the serial API Protocol layer."""

    @abstractmethod
    def connection_made(self, transport: TransportInterface) -> None:
        """Called when a connection is made."""

    @abstractmethod
    def connection_lost(self, err: Exception | None) -> None:
        """Called when the connection is lost."""

    @abstractmethod
    def frames_received(self, frames: "Sequence[Frame]") -> None:
        """Receive a batch of frames (all those completed by one chunk of bytes)."""
