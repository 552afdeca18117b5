"""Diagnostic sinks for non-fatal warnings."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger("ncrst")

#: Any callable receiving one human-readable warning message.
WarningSink = Callable[[str], None]


def log_warning(message: str) -> None:
    """Default sink: forward the message to the ``ncrst`` logger."""
    logger.warning(message)


class WarningCollector:
    """
    Sink that keeps every message it receives.

    Example:
        collector = WarningCollector()
        is_valid(container, sink=collector)
        for message in collector.messages:
            print(message)
    """

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    def __len__(self) -> int:
        return len(self.messages)

    def clear(self) -> None:
        """Forget all collected messages."""
        self.messages.clear()
