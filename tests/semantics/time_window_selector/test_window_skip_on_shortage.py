"""
Semantic test: windows with too few blocks are skipped for the pass.

Invariant:
A window run shorter than input_blocks never contributes any entry to a
returned group, the cursor still advances past it, and the scan continues
with the next window within the same call.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from compaction_planner.core.domain.types import BlockMeta
from compaction_planner.core.selection.block_selector import TimeWindowBlockSelector

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def mk_block(block_id: str, minutes: int, total_objects: int = 1) -> BlockMeta:
    start = BASE + timedelta(minutes=minutes)
    return BlockMeta(
        block_id=block_id,
        tenant_id="t1",
        start_time=start,
        end_time=start + timedelta(minutes=5),
        total_objects=total_objects,
    )


def test_short_window_is_skipped_within_one_call() -> None:
    blocklist = [
        # window 0: two blocks, too few for input_blocks=3
        mk_block("w0-a", 0),
        mk_block("w0-b", 30),
        # window 1: one block
        mk_block("w1-a", 70),
        # window 2: three blocks
        mk_block("w2-a", 125),
        mk_block("w2-b", 140),
        mk_block("w2-c", 170),
    ]

    selector = TimeWindowBlockSelector(
        blocklist,
        input_blocks=3,
        max_compaction_range=timedelta(hours=1),
    )

    selection = selector.select_next()

    assert [b.block_id for b in selection.blocks] == ["w2-a", "w2-b", "w2-c"]
    assert selection.grouping_key.startswith("t1-")
    assert selector.cursor == 6

    returned = {b.block_id for b in selection.blocks}
    assert returned.isdisjoint({"w0-a", "w0-b", "w1-a"})


def test_only_short_windows_exhaust_the_selector() -> None:
    blocklist = [
        mk_block("a", 0),
        mk_block("b", 61),
        mk_block("c", 122),
    ]

    selector = TimeWindowBlockSelector(
        blocklist,
        input_blocks=2,
        max_compaction_range=timedelta(hours=1),
    )

    assert selector.select_next().is_empty
    assert selector.cursor == 3
    assert selector.select_next().is_empty
    assert selector.cursor == 3
