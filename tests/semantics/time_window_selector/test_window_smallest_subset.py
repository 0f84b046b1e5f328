"""
Semantic test: smallest subset and window purity.

Invariant:
Every returned group shares a single window id and has exactly
input_blocks entries. Every entry left out of a group has at least as many
objects as every entry kept. Among equal object counts the earlier catalog
entries are kept.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from compaction_planner.core.domain.types import BlockMeta
from compaction_planner.core.selection.block_selector import TimeWindowBlockSelector

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def mk_block(block_id: str, minutes: int, total_objects: int) -> BlockMeta:
    start = BASE + timedelta(minutes=minutes)
    return BlockMeta(
        block_id=block_id,
        tenant_id="tenant-a",
        start_time=start,
        end_time=start + timedelta(minutes=10),
        total_objects=total_objects,
    )


def test_kept_entries_are_the_smallest_of_the_run() -> None:
    counts = [700, 15, 320, 15, 999, 4, 88, 250]
    blocklist = [mk_block(f"b{i}", i * 5, n) for i, n in enumerate(counts)]

    selector = TimeWindowBlockSelector(
        blocklist,
        input_blocks=4,
        max_compaction_range=timedelta(hours=1),
    )

    selection = selector.select_next()

    assert len(selection) == 4
    assert len({selector.window_for_block(b) for b in selection.blocks}) == 1

    kept = {b.block_id for b in selection.blocks}
    left_out = [b for b in blocklist if b.block_id not in kept]

    assert max(b.total_objects for b in selection.blocks) <= min(
        b.total_objects for b in left_out
    )
    assert sorted(b.total_objects for b in selection.blocks) == [4, 15, 15, 88]

    # Returned in catalog order.
    assert [b.block_id for b in selection.blocks] == ["b1", "b3", "b5", "b6"]


def test_ties_keep_earlier_catalog_entries() -> None:
    blocklist = [mk_block(f"b{i}", i * 5, 10) for i in range(5)]

    selector = TimeWindowBlockSelector(
        blocklist,
        input_blocks=3,
        max_compaction_range=timedelta(hours=1),
    )

    selection = selector.select_next()

    assert [b.block_id for b in selection.blocks] == ["b0", "b1", "b2"]


def test_grouping_key_uses_window_id() -> None:
    blocklist = [mk_block(f"b{i}", i, 1) for i in range(2)]

    selector = TimeWindowBlockSelector(
        blocklist,
        input_blocks=2,
        max_compaction_range=timedelta(hours=1),
    )

    expected_window = int(BASE.timestamp()) // 3600
    assert selector.select_next().grouping_key == f"tenant-a-{expected_window}"
