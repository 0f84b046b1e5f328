"""
Planning model definitions.

This module contains immutable planning structures describing the
compaction jobs produced by one planning pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class CompactionJob:
    """
    One group of blocks to be merged into a single block by the executor.
    """

    job_id: str
    grouping_key: str
    tenant_id: str
    block_ids: tuple[str, ...]
    start_time: datetime
    end_time: datetime
    total_objects: int
    total_bytes: int

    @property
    def block_count(self) -> int:
        return len(self.block_ids)


@dataclass(frozen=True, slots=True)
class CompactionPlan:
    """
    Result of one planning pass over a catalog snapshot.
    """

    plan_id: str
    strategy: str
    jobs: list[CompactionJob]
    considered_blocks: int
