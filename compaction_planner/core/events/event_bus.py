"""
Synchronous planning event bus.
"""
from __future__ import annotations

from typing import Any, Iterable

from compaction_planner.core.events.event_sink import EventSink


class EventBus:
    """Fans planning events out to registered sinks, in registration order."""

    def __init__(self, sinks: Iterable[EventSink] | None = None) -> None:
        self._sinks: list[EventSink] = list(sinks) if sinks is not None else []
        self._closed = False

    def __enter__(self) -> EventBus:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def register(self, sink: EventSink) -> None:
        if self._closed:
            raise RuntimeError("cannot register a sink on a closed EventBus")
        self._sinks.append(sink)

    def emit(self, event: Any) -> None:
        if self._closed:
            raise RuntimeError("cannot emit on a closed EventBus")
        for sink in self._sinks:
            sink.on_event(event)

    def close(self) -> None:
        """
        Close every sink exposing a close() method. Safe to call twice.
        """
        if self._closed:
            return

        for sink in self._sinks:
            close_fn = getattr(sink, "close", None)
            if callable(close_fn):
                close_fn()

        self._closed = True
