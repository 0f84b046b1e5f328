"""Public API for the compaction_planner package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Config API
# ----------------------------------------------------------------------
from compaction_planner.core.config.compaction_config import (
    CompactionConfig,
    build_selector,
)

# ----------------------------------------------------------------------
# Catalog and ordering structures
# ----------------------------------------------------------------------
from compaction_planner.core.domain.block_heap import BlockMetaHeap
from compaction_planner.core.domain.types import (
    BlockMeta,
    is_sorted_blocklist,
    sort_blocklist,
)

# ----------------------------------------------------------------------
# Selectors
# ----------------------------------------------------------------------
from compaction_planner.core.selection.block_selector import (
    BlockSelection,
    CompactionBlockSelector,
    SelectorState,
    SimpleBlockSelector,
    TimeWindowBlockSelector,
)

# ----------------------------------------------------------------------
# Planning
# ----------------------------------------------------------------------
from compaction_planner.planning.blocklist import BlocklistProvider, JsonFileBlocklist
from compaction_planner.planning.plan_models import CompactionJob, CompactionPlan
from compaction_planner.planning.planner import plan_compaction

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Catalog
    "BlockMeta",
    "sort_blocklist",
    "is_sorted_blocklist",
    "BlockMetaHeap",

    # Selectors
    "CompactionBlockSelector",
    "SimpleBlockSelector",
    "TimeWindowBlockSelector",
    "BlockSelection",
    "SelectorState",

    # Config
    "CompactionConfig",
    "build_selector",

    # Planning
    "BlocklistProvider",
    "JsonFileBlocklist",
    "plan_compaction",
    "CompactionPlan",
    "CompactionJob",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("compaction-planner")
except PackageNotFoundError:
    __version__ = "0.0.0"
