from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from compaction_planner.core.config.compaction_config import CompactionConfig
    from compaction_planner.planning.plan_models import CompactionPlan


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class JobSummary:
    job_id: str
    grouping_key: str
    tenant_id: str
    block_count: int
    total_objects: int
    total_bytes: int
    span_seconds: float


@dataclass(frozen=True, slots=True)
class PlanSummary:
    plan_id: str
    strategy: str
    job_count: int
    tenant_count: int
    considered_blocks: int
    selected_blocks: int
    coverage: float  # selected / considered, 0.0 - 1.0
    jobs: List[JobSummary]
    warnings: List[str]


# ---------------------------------------------------------------------------
# Summary builder
# ---------------------------------------------------------------------------

def summarize_plan(
    *,
    plan: CompactionPlan,
    config: CompactionConfig,
) -> PlanSummary:
    warnings: list[str] = []
    jobs: list[JobSummary] = []

    if not plan.jobs:
        warnings.append("Plan contains no compaction jobs")

    selected_blocks = sum(job.block_count for job in plan.jobs)
    coverage = (
        selected_blocks / plan.considered_blocks if plan.considered_blocks else 0.0
    )

    if len(plan.jobs) > 1000:
        warnings.append(
            f"High number of compaction jobs ({len(plan.jobs)}); consider max_jobs"
        )

    for job in plan.jobs:
        share = job.block_count / plan.considered_blocks if plan.considered_blocks else 0.0
        if share > 0.5:
            warnings.append(
                f"{job.job_id} holds {share:.0%} of the catalog "
                f"({job.block_count} / {plan.considered_blocks} blocks)"
            )

        if (
            config.max_compaction_objects is not None
            and job.total_objects > config.max_compaction_objects * 0.9
        ):
            warnings.append(
                f"{job.job_id} is close to max_compaction_objects "
                f"({job.total_objects} / {config.max_compaction_objects})"
            )

        jobs.append(
            JobSummary(
                job_id=job.job_id,
                grouping_key=job.grouping_key,
                tenant_id=job.tenant_id,
                block_count=job.block_count,
                total_objects=job.total_objects,
                total_bytes=job.total_bytes,
                span_seconds=(job.end_time - job.start_time).total_seconds(),
            )
        )

    return PlanSummary(
        plan_id=plan.plan_id,
        strategy=plan.strategy,
        job_count=len(plan.jobs),
        tenant_count=len({job.tenant_id for job in plan.jobs}),
        considered_blocks=plan.considered_blocks,
        selected_blocks=selected_blocks,
        coverage=coverage,
        jobs=jobs,
        warnings=warnings,
    )


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def print_plan_summary(summary: PlanSummary) -> None:
    print(f"Plan: {summary.plan_id}")
    print(f"Strategy: {summary.strategy}")
    print(f"Jobs: {summary.job_count} across {summary.tenant_count} tenant(s)")
    print(
        f"Blocks selected: {summary.selected_blocks} / "
        f"{summary.considered_blocks} ({summary.coverage:.0%})"
    )
    print()

    if summary.warnings:
        print("Warnings:")
        for w in summary.warnings:
            print(f"  - {w}")
        print()

    print("Jobs:")
    for j in summary.jobs:
        used_mb = j.total_bytes / 1024**2
        print(
            f"  - {j.job_id} [{j.grouping_key}]: "
            f"{j.block_count} blocks | "
            f"{j.total_objects} objects | "
            f"{used_mb:.1f} MB | "
            f"{j.span_seconds / 3600:.2f} h span"
        )
