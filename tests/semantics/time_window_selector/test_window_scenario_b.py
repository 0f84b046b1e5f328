"""
Semantic test: time window selector keeps the smallest blocks per window.

Invariant:
Each window run with at least input_blocks entries yields exactly
input_blocks entries, the ones with the fewest objects, keyed as
"<tenant>-<window>". The cursor moves past the whole run.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from compaction_planner.core.domain.types import BlockMeta
from compaction_planner.core.selection.block_selector import (
    SelectorState,
    TimeWindowBlockSelector,
)

# One hour after the epoch: with a 3h window, hours 0-1 fall in window 0
# and hours 2-4 fall in window 1.
BASE = datetime(1970, 1, 1, 1, tzinfo=timezone.utc)


def mk_block(hour: int, total_objects: int) -> BlockMeta:
    start = BASE + timedelta(hours=hour)
    return BlockMeta(
        block_id=f"b{hour}",
        tenant_id="t1",
        start_time=start,
        end_time=start + timedelta(hours=1),
        total_objects=total_objects,
    )


def test_two_windows_yield_two_groups() -> None:
    blocklist = [
        mk_block(0, 20),
        mk_block(1, 40),
        mk_block(2, 50),
        mk_block(3, 10),
        mk_block(4, 30),
    ]

    selector = TimeWindowBlockSelector(
        blocklist,
        input_blocks=2,
        max_compaction_range=timedelta(hours=3),
    )

    assert [selector.window_for_block(b) for b in blocklist] == [0, 0, 1, 1, 1]

    first = selector.select_next()
    assert [b.block_id for b in first.blocks] == ["b0", "b1"]
    assert first.grouping_key == "t1-0"
    assert selector.cursor == 2

    second = selector.select_next()
    assert sorted(b.total_objects for b in second.blocks) == [10, 30]
    assert [b.block_id for b in second.blocks] == ["b3", "b4"]
    assert second.grouping_key == "t1-1"
    assert selector.cursor == 5
    assert selector.state is SelectorState.EXHAUSTED

    assert selector.select_next().is_empty
