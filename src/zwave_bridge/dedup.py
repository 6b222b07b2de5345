#!/usr/bin/env python3
"""ZWave Bridge - suppression of repeated events (by their per-node counter)."""

from __future__ import annotations

import logging
from typing import Final

from .event import ApplicationEvent

_LOGGER = logging.getLogger(__name__)

# a drop greater than this is taken to be the counter wrapping around
WRAPAROUND_THRESHOLD: Final[int] = 100


class DedupFilter:
    """Accept an event only if its counter is new for its node.

    The controller may report the same event more than once (e.g. retransmits),
    each with the same counter. Counters start at 0 for a node not yet seen.
    """

    def __init__(self) -> None:
        self._counters: dict[int, int] = {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(counters={self._counters})"

    def accept(self, event: ApplicationEvent) -> bool:
        """Return True if the event is to be processed, and record its counter."""
        last = self._counters.get(event.node, 0)

        if event.counter > last or (last - event.counter) > WRAPAROUND_THRESHOLD:
            self._counters[event.node] = event.counter
            return True

        _LOGGER.debug(
            "node=%03d: counter=%s is not newer than %s (duplicate ignored)",
            event.node,
            event.counter,
            last,
        )
        return False

    def last_counter(self, node: int) -> int:
        """Return the counter of the node's last accepted event (0 if none)."""
        return self._counters.get(node, 0)

    def reset(self) -> None:
        self._counters.clear()
