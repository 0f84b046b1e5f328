"""Compaction planning configuration model.

This module defines the CompactionConfig schema used to parse compaction
settings from JSON and the factory that turns a config plus a catalog into
a ready-to-drive block selector.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any, Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

from compaction_planner.core.selection.block_selector import (
    SimpleBlockSelector,
    TimeWindowBlockSelector,
)

if TYPE_CHECKING:
    from compaction_planner.core.domain.types import BlockMeta
    from compaction_planner.core.selection.block_selector import CompactionBlockSelector


SelectorStrategy = Literal["simple", "time_window"]


class CompactionConfig(BaseModel):
    """Structured compaction configuration.

    JSON example:
        "compaction": {
          "strategy": "time_window",
          "input_blocks": 4,
          "max_compaction_range": "PT1H",
          "max_compaction_objects": 6000000
        }

    ``max_compaction_range`` accepts anything Pydantic parses as a
    timedelta (ISO 8601 duration, seconds as a number, "HH:MM:SS").
    For the simple strategy it caps the span of a group; for the time
    window strategy it is the window width.
    """

    strategy: SelectorStrategy = "time_window"

    # Number of blocks merged per compaction job.
    input_blocks: int = Field(default=4, gt=0)
    max_compaction_range: timedelta = timedelta(hours=1)

    # Planning limits applied by the planner, not by the selectors.
    max_compaction_objects: int | None = Field(default=None, gt=0)
    max_jobs: int | None = Field(default=None, gt=0)

    strict_catalog: bool = False

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_json_obj(cls, compaction_obj: dict[str, Any]) -> CompactionConfig:
        """Create a CompactionConfig instance from a JSON-compatible object."""
        return cls.model_validate(compaction_obj)

    @model_validator(mode="after")
    def validate_range(self) -> CompactionConfig:
        """Validate the compaction range against the selected strategy."""
        if self.max_compaction_range <= timedelta(0):
            raise ValueError("max_compaction_range must be > 0")
        if self.strategy == "time_window" and self.max_compaction_range < timedelta(seconds=1):
            raise ValueError("max_compaction_range must be at least one second for time_window")
        return self


def build_selector(
    config: CompactionConfig,
    blocklist: Sequence[BlockMeta],
) -> CompactionBlockSelector:
    """Instantiate the configured selection strategy over ``blocklist``."""

    if config.strategy == "simple":
        return SimpleBlockSelector(
            blocklist,
            input_blocks=config.input_blocks,
            max_compaction_range=config.max_compaction_range,
            strict=config.strict_catalog,
        )

    if config.strategy == "time_window":
        return TimeWindowBlockSelector(
            blocklist,
            input_blocks=config.input_blocks,
            max_compaction_range=config.max_compaction_range,
            strict=config.strict_catalog,
        )

    raise ValueError(f"Unknown selector strategy: {config.strategy}")
