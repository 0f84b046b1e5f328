"""Max-priority queue over block catalog entries.

The heap orders entries by ``total_objects`` with the largest entry at the
front. It backs the "keep the N smallest blocks of a bucket" step of the
time window selector: push a whole bucket, then evict from the front until
N entries remain.

Ordering key stored in the underlying ``heapq`` min-heap:

    (-total_objects, -sequence)

- negating total_objects turns heapq's min-heap into a max-heap
- sequence is the insertion counter; among equal total_objects the entry
  pushed later is at the front, so ties evict later catalog entries first
"""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from compaction_planner.core.domain.types import BlockMeta


class BlockMetaHeap:
    """Largest-first priority queue keyed by ``BlockMeta.total_objects``.

    One instance serves a single bucket computation and is discarded
    afterwards.
    """

    def __init__(self, blocks: Iterable[BlockMeta] | None = None) -> None:
        self._heap: list[tuple[int, int, BlockMeta]] = []
        self._counter: int = 0

        if blocks is not None:
            for meta in blocks:
                self.push(meta)

    def __len__(self) -> int:
        return len(self._heap)

    @staticmethod
    def ranks_before(a: BlockMeta, b: BlockMeta) -> bool:
        """Return True if ``a`` is closer to the front than ``b``."""
        return a.total_objects > b.total_objects

    def push(self, meta: BlockMeta) -> None:
        heapq.heappush(self._heap, (-meta.total_objects, -self._counter, meta))
        self._counter += 1

    def pop(self) -> BlockMeta:
        """Remove and return the entry with the most objects."""
        if not self._heap:
            raise IndexError("pop from empty BlockMetaHeap")
        _, _, meta = heapq.heappop(self._heap)
        return meta

    def peek(self) -> BlockMeta:
        if not self._heap:
            raise IndexError("peek into empty BlockMetaHeap")
        return self._heap[0][2]

    def trim_to(self, size: int) -> list[BlockMeta]:
        """
        Evict the largest entries until at most ``size`` remain.

        Returns the evicted entries in eviction order (largest first).
        """
        if size < 0:
            raise ValueError("size must be >= 0")

        evicted: list[BlockMeta] = []
        while len(self._heap) > size:
            evicted.append(self.pop())
        return evicted

    def items(self) -> list[BlockMeta]:
        """Return the remaining entries in insertion order."""
        # Sequence is stored negated, so the largest key is the oldest push.
        return [meta for _, _, meta in sorted(self._heap, key=lambda item: -item[1])]
