"""
Planning event models.

These events represent immutable facts observed while planning compaction.
They are consumed by loggers, recorders, and monitoring pipelines.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class CompactionJobPlannedEvent:
    plan_id: str
    job_id: str
    grouping_key: str
    tenant_id: str

    block_ids: tuple[str, ...]
    total_objects: int


@dataclass(slots=True)
class TenantSkippedEvent:
    plan_id: str
    tenant_id: str

    block_count: int
    input_blocks: int


@dataclass(slots=True)
class GroupRejectedEvent:
    plan_id: str
    grouping_key: str
    tenant_id: str

    total_objects: int
    max_compaction_objects: int


@dataclass(slots=True)
class PlanCompletedEvent:
    plan_id: str
    strategy: str

    jobs: int
    tenants: int
    considered_blocks: int
    rejected_groups: int
