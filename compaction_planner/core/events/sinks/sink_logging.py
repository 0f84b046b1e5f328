"""
Logging event sink.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from typing import Any


class LoggingEventSink:
    """Logs planning events through the standard logging module.

    Every event is logged as ``domain_event``; the event type and fields
    are attached as ``extra`` so structured handlers can pick them up.
    """

    def __init__(self, logger: logging.Logger, level: int = logging.INFO) -> None:
        self._logger = logger
        self._level = level

    def on_event(self, event: Any) -> None:
        fields = asdict(event) if is_dataclass(event) else {"event": event}
        self._logger.log(
            self._level,
            "domain_event",
            extra={
                "event_type": type(event).__name__,
                "planning_event": fields,
            },
        )
