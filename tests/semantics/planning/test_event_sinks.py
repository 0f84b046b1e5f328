"""
Semantic test: planning event sinks.

Invariant:
Events reach every registered sink in order. The file recorder writes one
JSON line per event tagged with its type, the logging sink logs
"domain_event" with the event type attached, and a closed bus refuses
further events.
"""

from __future__ import annotations

import json
import logging

import pytest

from compaction_planner.core.events.event_bus import EventBus
from compaction_planner.core.events.events import TenantSkippedEvent
from compaction_planner.core.events.sinks.file_recorder import FileRecorderSink
from compaction_planner.core.events.sinks.null_event_bus import NullEventBus
from compaction_planner.core.events.sinks.sink_logging import LoggingEventSink


def mk_event() -> TenantSkippedEvent:
    return TenantSkippedEvent(plan_id="p", tenant_id="t1", block_count=1, input_blocks=4)


def test_file_recorder_writes_json_lines(tmp_path) -> None:
    path = tmp_path / "events" / "plan.jsonl"

    with EventBus(sinks=[FileRecorderSink(path)]) as bus:
        bus.emit(mk_event())
        bus.emit(mk_event())

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2

    record = json.loads(lines[0])
    assert record["event_type"] == "TenantSkippedEvent"
    assert record["tenant_id"] == "t1"
    assert record["input_blocks"] == 4


def test_logging_sink_logs_domain_event_with_type(caplog) -> None:
    logger = logging.getLogger("test.planning.events")
    bus = EventBus(sinks=[LoggingEventSink(logger)])

    with caplog.at_level(logging.INFO, logger="test.planning.events"):
        bus.emit(mk_event())

    assert [r.getMessage() for r in caplog.records] == ["domain_event"]
    assert caplog.records[0].event_type == "TenantSkippedEvent"
    assert caplog.records[0].planning_event["tenant_id"] == "t1"


def test_closed_bus_rejects_emit() -> None:
    bus = NullEventBus()
    bus.emit(mk_event())
    bus.close()
    bus.close()

    assert bus.closed
    with pytest.raises(RuntimeError):
        bus.emit(mk_event())
