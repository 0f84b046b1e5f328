"""Block catalog data models.

This module defines the canonical Pydantic model for one entry of the block
catalog together with the ordering helpers every selector relies on. The
catalog itself is owned by the catalog provider; selectors only read it.
"""

# pylint: disable=missing-function-docstring
from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable, Sequence

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Catalog entry
# ---------------------------------------------------------------------------


class BlockMeta(BaseModel):
    """
    Metadata describing one immutable, previously written data block.

    Notes:
    - total_objects is a size/weight proxy only and is never validated
      against the block contents.
    - size_bytes is informational and only used for plan summaries.
    """

    block_id: str = Field(..., min_length=1)
    tenant_id: str = Field(..., min_length=1)

    start_time: AwareDatetime
    end_time: AwareDatetime

    total_objects: int = Field(..., ge=0)
    size_bytes: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def validate_time_range(self) -> BlockMeta:
        if self.end_time < self.start_time:
            raise ValueError("end_time must be >= start_time")
        return self

    @property
    def unix_start(self) -> int:
        """Start time as whole unix seconds."""
        return math.floor(self.start_time.timestamp())


# ---------------------------------------------------------------------------
# Ordering helpers
#
# Selectors treat "contiguous in the sequence" as "related in time and
# tenant". These helpers produce and check that ordering.
# ---------------------------------------------------------------------------


def blocklist_sort_key(meta: BlockMeta) -> tuple[str, datetime]:
    return (meta.tenant_id, meta.start_time)


def sort_blocklist(blocks: Iterable[BlockMeta]) -> list[BlockMeta]:
    """Return a new list sorted by tenant, then start time (stable)."""
    return sorted(blocks, key=blocklist_sort_key)


def is_sorted_blocklist(blocks: Sequence[BlockMeta]) -> bool:
    """Check whether a catalog satisfies the (tenant_id, start_time) order."""
    return all(
        blocklist_sort_key(prev) <= blocklist_sort_key(cur)
        for prev, cur in zip(blocks, blocks[1:])
    )
