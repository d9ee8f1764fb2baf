#!/usr/bin/env python3
"""
Print the production reports: dashboard, workshop performance, defects
and per-group progress.

Reads the database named by the active configuration; nothing is written.

Usage:
    python3 scripts/view_reports.py [--config override.yaml]
        [--producer NAME] [--start YYYY-MM-DD] [--end YYYY-MM-DD]
"""

import argparse
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


# ===================================================================
# Pretty-print helpers
# ===================================================================

W = 72  # total line width


def _hdr(title: str, subtitle: str = "") -> str:
    lines = ["", "=" * W, title.center(W)]
    if subtitle:
        lines.append(subtitle.center(W))
    lines.append("=" * W)
    return "\n".join(lines)


def _kv(label: str, value) -> str:
    return f"  {label:<40}{value!s:>28}"


# ===================================================================
# Report printers
# ===================================================================


def print_dashboard(state) -> None:
    d = state.dashboard
    print(_hdr("DASHBOARD"))
    print(_kv("Order groups", d.total_orders))
    print(_kv("Completed", d.completed_orders))
    print(_kv("In progress / awaiting cut", d.in_progress_orders))
    print(_kv("Cancelled", d.issues))
    progress = state.completion_progress()
    print(_kv("Produced / cut", f"{progress.produced} / {progress.target} ({progress.percentage}%)"))


def print_producer_performance(state) -> None:
    print(_hdr("WORKSHOP PERFORMANCE"))
    print(f"  {'Workshop':<20}{'Done':>8}{'Open':>8}{'Rows':>8}{'Units':>10}{'Avg days':>12}")
    print(f"  {'-' * 20}{'-' * 8:>8}{'-' * 8:>8}{'-' * 8:>8}{'-' * 10:>10}{'-' * 12:>12}")
    for s in state.producer_stats:
        avg = "-" if s.avg_completion_days is None else str(s.avg_completion_days)
        print(
            f"  {s.name:<20}{s.completed_orders:>8}{s.in_progress_orders:>8}"
            f"{s.total_orders:>8}{s.total_quantity:>10}{avg:>12}"
        )


def print_defects(state, producer, start, end) -> None:
    print(_hdr("DEFECTS BY REASON"))
    if not state.defect_totals:
        print("  No defective units used.")
    for total in state.defect_totals:
        split = ", ".join(f"{p}: {n}" for p, n in sorted(total.by_producer.items()))
        print(f"  {total.reason:<28}{total.total:>8}   {split}")

    report = state.defect_rate(producer=producer, start=start, end=end)
    scope = producer or "all workshops"
    if start or end:
        scope += f", {start or '...'} to {end or '...'}"
    print(_hdr("DEFECT RATE", scope))
    print(_kv("Units cut", report.total_cut))
    print(_kv("Defective units", report.total_defects))
    print(_kv("Defect rate", f"{report.defect_percentage}%"))
    for share in report.reasons:
        print(f"    {share.reason:<30}{share.count:>8}{share.percentage:>10}%")


def print_groups(state) -> None:
    print(_hdr("ORDER GROUPS"))
    for group_id in state.group_ids():
        status = state.status_of_group(group_id)
        progress = state.group_progress.get(group_id)
        pct = progress.percentage if progress else 0
        print(f"  {group_id:<40}{status.value:>16}{pct:>10}%")
        for row in state.order_detail(group_id):
            print(
                f"      {row.size.value:<5}{row.producer:<18}"
                f"ordered {row.ordered:>4}  cut {row.cut:>4}  "
                f"produced {row.produced:>4}  left {row.remaining:>4}"
            )
    if state.allocation.has_overflow:
        print()
        print(f"  WARNING: {len(state.allocation.overflow)} overflow attribution(s); "
              "more was cut than ordered in some groups.")


def main() -> int:
    parser = argparse.ArgumentParser(description="Print production reports.")
    parser.add_argument("--config", help="Override configuration YAML file")
    parser.add_argument("--producer", help="Limit the defect rate to one workshop")
    parser.add_argument("--start", help="Defect rate range start (inclusive)")
    parser.add_argument("--end", help="Defect rate range end (inclusive)")
    args = parser.parse_args()

    from textile_config import get_active_config
    from textile_kernel.db.engine import get_session, init_engine_from_url
    from textile_kernel.domain.validation import parse_date
    from textile_kernel.exceptions import TextileKernelError
    from textile_kernel.logging_config import configure_logging
    from textile_kernel.selectors.snapshot_selector import SnapshotSelector
    from textile_services.production_view import ProductionView

    try:
        config = get_active_config(args.config)
        start = parse_date(args.start) if args.start else None
        end = parse_date(args.end) if args.end else None
    except TextileKernelError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    # Reports go to stdout; keep structured logs to warnings and above.
    configure_logging(level="WARNING")
    init_engine_from_url(config.database_url, echo=config.echo_sql)

    session = get_session()
    try:
        snapshot = SnapshotSelector(session).load()
    finally:
        session.close()

    state = ProductionView(unassigned_label=config.unassigned_label).compute(snapshot)
    print_dashboard(state)
    print_producer_performance(state)
    print_defects(state, args.producer, start, end)
    print_groups(state)
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
