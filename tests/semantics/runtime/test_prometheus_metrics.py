"""
Semantic test: planning metrics are best-effort.

Invariant:
Without a Pushgateway URL the client is disabled and pushing is a no-op.
Gauges reflect the latest plan summary, and a failing push never raises.
"""

from __future__ import annotations

from compaction_planner.planning.summary import PlanSummary
from compaction_planner.runtime import prometheus_metrics
from compaction_planner.runtime.prometheus_metrics import PrometheusMetricsClient


def mk_summary(job_count: int) -> PlanSummary:
    return PlanSummary(
        plan_id="p",
        strategy="time_window",
        job_count=job_count,
        tenant_count=1,
        considered_blocks=10,
        selected_blocks=job_count * 2,
        coverage=job_count * 2 / 10,
        jobs=[],
        warnings=[],
    )


def test_disabled_without_url(monkeypatch) -> None:
    monkeypatch.delenv("PROMETHEUS_PUSHGATEWAY_URL", raising=False)

    client = PrometheusMetricsClient()

    assert not client.is_enabled()
    client.push_all(job="compaction_planner")


def test_gauges_track_latest_plan(monkeypatch) -> None:
    monkeypatch.delenv("PROMETHEUS_PUSHGATEWAY_URL", raising=False)
    client = PrometheusMetricsClient()

    client.record_plan(mk_summary(1))
    client.record_plan(mk_summary(3))

    value = client.registry.get_sample_value(
        "compaction_planner_jobs_planned",
        {"strategy": "time_window"},
    )
    assert value == 3.0


def test_grouping_key_from_env(monkeypatch) -> None:
    monkeypatch.setenv(
        "PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON",
        '{"compactor": "c-0", "ignored": 1}',
    )

    assert PrometheusMetricsClient._load_grouping_key() == {"compactor": "c-0"}


def test_push_failure_is_swallowed(monkeypatch) -> None:
    def failing_push(**kwargs) -> None:
        raise OSError("connection refused")

    monkeypatch.setattr(prometheus_metrics, "push_to_gateway", failing_push)

    client = PrometheusMetricsClient(pushgateway_url="http://localhost:9091")
    client.record_plan(mk_summary(2))
    client.push_all(job="compaction_planner")
