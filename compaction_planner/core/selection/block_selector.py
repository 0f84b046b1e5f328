"""
Compaction block selectors.

A selector proposes groups of blocks that are safe to merge into a single
larger block. It is constructed from a catalog sorted by tenant and start
time, then driven by repeated select_next() calls until it returns the
empty selection.

Selectors are single-use: the cursor only moves forward and never resets.
To revisit skipped entries, fetch a fresh catalog and build a new selector.
"""

# pylint: disable=too-few-public-methods
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Protocol, Sequence

from compaction_planner.core.domain.block_heap import BlockMetaHeap
from compaction_planner.core.domain.types import is_sorted_blocklist

if TYPE_CHECKING:
    from compaction_planner.core.domain.types import BlockMeta

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result and state models
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BlockSelection:
    """
    One proposed compaction group.

    An empty selection (no blocks, empty key) means the selector has no
    more work for this pass. It is not an error.
    """

    blocks: tuple[BlockMeta, ...]
    grouping_key: str

    @classmethod
    def empty(cls) -> BlockSelection:
        return cls(blocks=(), grouping_key="")

    @property
    def is_empty(self) -> bool:
        return not self.blocks

    def __len__(self) -> int:
        return len(self.blocks)

    def __bool__(self) -> bool:
        return bool(self.blocks)


class SelectorState(Enum):
    SCANNING = "scanning"
    EXHAUSTED = "exhausted"


class CompactionBlockSelector(Protocol):
    """Common interface of all block selection strategies."""

    @property
    def cursor(self) -> int:
        """Current scan position within the catalog."""

    @property
    def state(self) -> SelectorState:
        """Whether the selector can still produce work."""

    def select_next(self) -> BlockSelection:
        """Return the next group to compact, or the empty selection."""


# ---------------------------------------------------------------------------
# Shared cursor handling
# ---------------------------------------------------------------------------

class _CursorSelector:
    """Cursor, state, and construction checks shared by both strategies."""

    def __init__(
        self,
        blocklist: Sequence[BlockMeta],
        *,
        input_blocks: int,
        max_compaction_range: timedelta,
        strict: bool = False,
    ) -> None:
        if input_blocks <= 0:
            raise ValueError("configuration error: groupSize must be positive")

        if max_compaction_range <= timedelta(0):
            raise ValueError(
                "configuration error: max compaction range must be positive"
            )

        blocks = tuple(blocklist)

        if strict:
            if len(blocks) < input_blocks:
                raise ValueError("configuration error: catalog shorter than groupSize")
            if not is_sorted_blocklist(blocks):
                raise ValueError(
                    "configuration error: catalog is not sorted by tenant and start time"
                )

        self._blocklist: tuple[BlockMeta, ...] = blocks
        self._input_blocks = input_blocks
        self._max_compaction_range = max_compaction_range
        self._cursor = 0
        self._state = SelectorState.SCANNING if blocks else SelectorState.EXHAUSTED

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def state(self) -> SelectorState:
        return self._state

    @property
    def input_blocks(self) -> int:
        return self._input_blocks

    @property
    def max_compaction_range(self) -> timedelta:
        return self._max_compaction_range

    @property
    def blocklist(self) -> tuple[BlockMeta, ...]:
        return self._blocklist

    def _exhaust(self) -> BlockSelection:
        self._cursor = len(self._blocklist)
        self._state = SelectorState.EXHAUSTED
        return BlockSelection.empty()


# ---------------------------------------------------------------------------
# Simple block selector
# ---------------------------------------------------------------------------

class SimpleBlockSelector(_CursorSelector):
    """
    First-fit selector over runs of consecutive catalog entries.

    A run of exactly input_blocks consecutive entries qualifies when the
    time from the first entry's start to the last entry's end is strictly
    shorter than max_compaction_range. The earliest qualifying run wins.
    """

    def select_next(self) -> BlockSelection:
        if self._state is SelectorState.EXHAUSTED:
            return BlockSelection.empty()

        n = self._input_blocks
        blocks = self._blocklist

        # Catalog shorter than the group size: nothing to scan.
        if n > len(blocks):
            return self._exhaust()

        while self._cursor + n <= len(blocks):
            start = self._cursor
            first = blocks[start]
            last = blocks[start + n - 1]

            if last.end_time - first.start_time < self._max_compaction_range:
                self._cursor = start + n
                if self._cursor == len(blocks):
                    self._state = SelectorState.EXHAUSTED

                LOGGER.debug(
                    "simple selector matched run",
                    extra={"start": start, "tenant_id": first.tenant_id},
                )
                return BlockSelection(
                    blocks=blocks[start:start + n],
                    grouping_key=first.tenant_id,
                )

            self._cursor += 1

        return self._exhaust()


# ---------------------------------------------------------------------------
# Time window block selector
# ---------------------------------------------------------------------------

class TimeWindowBlockSelector(_CursorSelector):
    """
    Selector that groups blocks by fixed-width time window.

    Entries whose start times fall in the same window (and are contiguous
    in the catalog) form a run. A run with at least input_blocks entries
    yields the input_blocks entries with the fewest objects. Shorter runs
    are skipped for the rest of this pass.
    """

    def __init__(
        self,
        blocklist: Sequence[BlockMeta],
        *,
        input_blocks: int,
        max_compaction_range: timedelta,
        strict: bool = False,
    ) -> None:
        super().__init__(
            blocklist,
            input_blocks=input_blocks,
            max_compaction_range=max_compaction_range,
            strict=strict,
        )

        window_seconds = int(max_compaction_range.total_seconds())
        if window_seconds < 1:
            raise ValueError(
                "configuration error: time window must be at least one second"
            )
        self._window_seconds = window_seconds

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def window_for_block(self, meta: BlockMeta) -> int:
        return meta.unix_start // self._window_seconds

    def select_next(self) -> BlockSelection:
        if self._state is SelectorState.EXHAUSTED:
            return BlockSelection.empty()

        blocks = self._blocklist

        while self._cursor < len(blocks):
            run_start = self._cursor
            first = blocks[run_start]
            window = self.window_for_block(first)

            run_end = run_start + 1
            while run_end < len(blocks) and self.window_for_block(blocks[run_end]) == window:
                run_end += 1

            self._cursor = run_end

            if run_end - run_start >= self._input_blocks:
                heap = BlockMetaHeap(blocks[run_start:run_end])
                heap.trim_to(self._input_blocks)

                if self._cursor == len(blocks):
                    self._state = SelectorState.EXHAUSTED

                return BlockSelection(
                    blocks=tuple(heap.items()),
                    grouping_key=f"{first.tenant_id}-{window}",
                )

            LOGGER.debug(
                "time window skipped",
                extra={
                    "window": window,
                    "tenant_id": first.tenant_id,
                    "run_length": run_end - run_start,
                },
            )

        return self._exhaust()
