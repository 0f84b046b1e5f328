from __future__ import annotations

from typing import Any

from compaction_planner.core.events.event_bus import EventBus


class _DiscardSink:
    def on_event(self, event: Any) -> None:
        return


class NullEventBus(EventBus):
    """EventBus that drops every planning event (default for the planner)."""

    def __init__(self) -> None:
        super().__init__(sinks=[_DiscardSink()])
