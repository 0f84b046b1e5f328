from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

if TYPE_CHECKING:
    from compaction_planner.planning.summary import PlanSummary

LOGGER = logging.getLogger(__name__)


class PrometheusMetricsClient:
    """Prometheus Pushgateway client for one-shot planning runs.

    Expected environment:
    - PROMETHEUS_PUSHGATEWAY_URL: URL to the Pushgateway.
      Example: http://pushgateway.monitoring.svc.cluster.local:9091

    Optional:
    - PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON: JSON object used as grouping key,
      e.g. {"compactor": "compactor-0"}. Without it, pushes from different
      compactor instances overwrite each other.

    Metrics delivery is a side-effect: a planning run never fails because
    the Pushgateway is unreachable.
    """

    def __init__(self, pushgateway_url: str | None = None) -> None:
        self._pushgateway_url = pushgateway_url or os.environ.get("PROMETHEUS_PUSHGATEWAY_URL")
        self._grouping_key = self._load_grouping_key()
        self._registry = CollectorRegistry()
        self._gauges: dict[str, Gauge] = {}

    def is_enabled(self) -> bool:
        return self._pushgateway_url is not None

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    @staticmethod
    def _load_grouping_key() -> dict[str, str]:
        raw = os.environ.get("PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON")
        if not raw:
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning(
                "Invalid PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON; ignoring"
            )
            return {}

        if not isinstance(data, dict):
            return {}

        return {
            key: value
            for key, value in data.items()
            if isinstance(key, str) and isinstance(value, str)
        }

    def set_gauge(
        self,
        *,
        name: str,
        value: float,
        labels: dict[str, str],
        documentation: str | None = None,
    ) -> None:
        gauge = self._gauges.get(name)
        if gauge is None:
            gauge = Gauge(
                name,
                documentation=documentation or name,
                labelnames=sorted(labels.keys()),
                registry=self._registry,
            )
            self._gauges[name] = gauge

        gauge.labels(**labels).set(value)

    def record_plan(self, summary: PlanSummary) -> None:
        labels = {"strategy": summary.strategy}

        self.set_gauge(
            name="compaction_planner_jobs_planned",
            value=summary.job_count,
            labels=labels,
            documentation="Compaction jobs produced by the last planning pass",
        )
        self.set_gauge(
            name="compaction_planner_blocks_considered",
            value=summary.considered_blocks,
            labels=labels,
            documentation="Catalog entries seen by the last planning pass",
        )
        self.set_gauge(
            name="compaction_planner_blocks_selected",
            value=summary.selected_blocks,
            labels=labels,
            documentation="Catalog entries assigned to a compaction job",
        )

    def push_all(self, *, job: str) -> None:
        if not self._pushgateway_url:
            return

        try:
            push_to_gateway(
                gateway=self._pushgateway_url,
                job=job,
                registry=self._registry,
                grouping_key=self._grouping_key,
            )
        except OSError as exc:
            LOGGER.warning(
                "Prometheus push failed",
                extra={"job": job, "error": str(exc)},
            )
            return

        LOGGER.info(
            "Prometheus metrics pushed",
            extra={"job": job, "grouping_key": self._grouping_key},
        )
