"""
Event sink interface.

Sinks consume planning events emitted by the planner.
"""
from __future__ import annotations

from typing import Any, Protocol


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Consume a planning event."""
