from __future__ import annotations

import logging
from itertools import groupby
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from compaction_planner.core.config.compaction_config import CompactionConfig
    from compaction_planner.core.domain.types import BlockMeta
    from compaction_planner.core.events.event_bus import EventBus
    from compaction_planner.core.selection.block_selector import BlockSelection

from compaction_planner.core.config.compaction_config import build_selector
from compaction_planner.core.domain.types import sort_blocklist
from compaction_planner.core.events.events import (
    CompactionJobPlannedEvent,
    GroupRejectedEvent,
    PlanCompletedEvent,
    TenantSkippedEvent,
)
from compaction_planner.core.events.sinks.null_event_bus import NullEventBus
from compaction_planner.planning.plan_models import CompactionJob, CompactionPlan

LOGGER = logging.getLogger(__name__)


def _job_from_selection(job_id: str, selection: BlockSelection) -> CompactionJob:
    blocks = selection.blocks
    return CompactionJob(
        job_id=job_id,
        grouping_key=selection.grouping_key,
        tenant_id=blocks[0].tenant_id,
        block_ids=tuple(meta.block_id for meta in blocks),
        start_time=min(meta.start_time for meta in blocks),
        end_time=max(meta.end_time for meta in blocks),
        total_objects=sum(meta.total_objects for meta in blocks),
        total_bytes=sum(meta.size_bytes for meta in blocks),
    )


def plan_compaction(
    *,
    plan_id: str,
    blocklist: Sequence[BlockMeta],
    config: CompactionConfig,
    event_bus: EventBus | None = None,
) -> CompactionPlan:
    """
    Build a deterministic compaction plan for one catalog snapshot.

    This function performs *planning only*.
    It does not read or write blocks and does not execute any merges.

    Responsibilities:
    - order the catalog by tenant and start time
    - run one independent selector per tenant partition
    - drive each selector until it reports no more work
    - apply the object and job limits from the configuration
    - produce a pure CompactionPlan

    Parameters
    ----------
    plan_id:
        Stable identifier for the planning pass.

    blocklist:
        Catalog snapshot. Entries are only read, never mutated.

    config:
        Selection strategy and limits.

    event_bus:
        Receives one event per planned job, skipped tenant and rejected
        group. Defaults to a bus that discards everything.

    Returns
    -------
    CompactionPlan
        Jobs in planning order (tenant order, then selector order).
    """

    if not plan_id:
        raise ValueError("plan_id must be non-empty")

    bus = event_bus if event_bus is not None else NullEventBus()

    # ------------------------------------------------------------------
    # 1. Order and partition the catalog
    # ------------------------------------------------------------------

    ordered = sort_blocklist(blocklist)
    partitions: list[tuple[str, list[BlockMeta]]] = [
        (tenant_id, list(group))
        for tenant_id, group in groupby(ordered, key=lambda meta: meta.tenant_id)
    ]

    # ------------------------------------------------------------------
    # 2. Drive one selector per tenant
    # ------------------------------------------------------------------

    jobs: list[CompactionJob] = []
    rejected_groups = 0
    limit_reached = False

    for tenant_id, tenant_blocks in partitions:
        if limit_reached:
            break

        if len(tenant_blocks) < config.input_blocks:
            LOGGER.debug(
                "Tenant has fewer blocks than input_blocks; skipping",
                extra={"tenant_id": tenant_id, "blocks": len(tenant_blocks)},
            )
            bus.emit(
                TenantSkippedEvent(
                    plan_id=plan_id,
                    tenant_id=tenant_id,
                    block_count=len(tenant_blocks),
                    input_blocks=config.input_blocks,
                )
            )
            continue

        # Single-tenant partition: every selection belongs to tenant_id.
        selector = build_selector(config, tenant_blocks)

        while True:
            selection = selector.select_next()
            if selection.is_empty:
                break

            total_objects = sum(meta.total_objects for meta in selection.blocks)

            if (
                config.max_compaction_objects is not None
                and total_objects > config.max_compaction_objects
            ):
                rejected_groups += 1
                LOGGER.info(
                    "Group exceeds max_compaction_objects; not planned",
                    extra={
                        "grouping_key": selection.grouping_key,
                        "total_objects": total_objects,
                    },
                )
                bus.emit(
                    GroupRejectedEvent(
                        plan_id=plan_id,
                        grouping_key=selection.grouping_key,
                        tenant_id=tenant_id,
                        total_objects=total_objects,
                        max_compaction_objects=config.max_compaction_objects,
                    )
                )
                continue

            job = _job_from_selection(f"job_{len(jobs):04d}", selection)

            jobs.append(job)
            bus.emit(
                CompactionJobPlannedEvent(
                    plan_id=plan_id,
                    job_id=job.job_id,
                    grouping_key=job.grouping_key,
                    tenant_id=job.tenant_id,
                    block_ids=job.block_ids,
                    total_objects=job.total_objects,
                )
            )

            if config.max_jobs is not None and len(jobs) >= config.max_jobs:
                limit_reached = True
                break

    # ------------------------------------------------------------------
    # 3. Return final plan
    # ------------------------------------------------------------------

    bus.emit(
        PlanCompletedEvent(
            plan_id=plan_id,
            strategy=config.strategy,
            jobs=len(jobs),
            tenants=len(partitions),
            considered_blocks=len(ordered),
            rejected_groups=rejected_groups,
        )
    )

    LOGGER.info(
        "Compaction plan built",
        extra={"plan_id": plan_id, "jobs": len(jobs), "blocks": len(ordered)},
    )

    return CompactionPlan(
        plan_id=plan_id,
        strategy=config.strategy,
        jobs=jobs,
        considered_blocks=len(ordered),
    )
