from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from compaction_planner.planning.plan_models import CompactionPlan

from compaction_planner.core.config.compaction_config import CompactionConfig
from compaction_planner.core.events.event_bus import EventBus
from compaction_planner.core.events.sinks.file_recorder import FileRecorderSink
from compaction_planner.core.events.sinks.sink_logging import LoggingEventSink
from compaction_planner.planning.blocklist import JsonFileBlocklist
from compaction_planner.planning.planner import plan_compaction
from compaction_planner.planning.summary import print_plan_summary, summarize_plan
from compaction_planner.runtime.prometheus_metrics import PrometheusMetricsClient

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    return json.loads(path.read_text(encoding="utf-8"))


def _emit_jobs(*, plan: CompactionPlan, out_dir: Path) -> list[str]:
    """
    Write one JSON document per compaction job.
    These files are what the compaction executor consumes.
    """
    out_dir.mkdir(parents=True, exist_ok=True)

    index: list[str] = []
    for job in plan.jobs:
        out_path = out_dir / f"{job.job_id}.json"
        payload = {"plan_id": plan.plan_id, "strategy": plan.strategy, **asdict(job)}
        out_path.write_text(
            json.dumps(payload, indent=2, default=str),
            encoding="utf-8",
        )
        index.append(str(out_path))

    (out_dir / "jobs.json").write_text(
        json.dumps(index, indent=2),
        encoding="utf-8",
    )
    return index


def _build_event_bus(events_file: Path | None) -> EventBus:
    bus = EventBus(sinks=[LoggingEventSink(logging.getLogger("compaction_planner.events"))])
    if events_file is not None:
        bus.register(FileRecorderSink(events_file))
    return bus


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Plan compaction jobs for a block catalog snapshot"
    )

    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to planner JSON config with 'id' and 'compaction' blocks.",
    )

    parser.add_argument(
        "--blocklist",
        type=Path,
        required=True,
        help="Path to the JSON block catalog snapshot.",
    )

    parser.add_argument(
        "--tenant",
        type=str,
        default=None,
        help="Only plan blocks of this tenant.",
    )

    parser.add_argument(
        "--emit-dir",
        type=Path,
        default=None,
        help="Directory where one JSON per compaction job is written.",
    )

    parser.add_argument(
        "--events-file",
        type=Path,
        default=None,
        help="Append planning events to this JSON lines file.",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level.",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # ------------------------------------------------------------------
    # Load config and catalog
    # ------------------------------------------------------------------

    cfg = _load_json(args.config)

    plan_id: str = cfg.get("id", "")
    if not plan_id:
        print("Error: config must define a non-empty 'id'.", file=sys.stderr)
        return 2

    config = CompactionConfig.from_json_obj(cfg.get("compaction", {}))

    blocklist = JsonFileBlocklist(args.blocklist).fetch(tenant_id=args.tenant)

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    with _build_event_bus(args.events_file) as bus:
        plan = plan_compaction(
            plan_id=plan_id,
            blocklist=blocklist,
            config=config,
            event_bus=bus,
        )

    summary = summarize_plan(plan=plan, config=config)

    print_plan_summary(summary)

    metrics = PrometheusMetricsClient()
    if metrics.is_enabled():
        metrics.record_plan(summary)
        metrics.push_all(job="compaction_planner")

    if args.emit_dir is None:
        return 0

    # ------------------------------------------------------------------
    # Emit job documents
    # ------------------------------------------------------------------

    index = _emit_jobs(plan=plan, out_dir=args.emit_dir)

    print()
    print(f"Emitted {len(index)} compaction job(s) to: {args.emit_dir}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
