"""
Module: textile_engines.reporting
Responsibility:
    Roll allocation output and order state up into the statistics the
    production team reads: producer performance, defect breakdowns, defect
    rates, dashboard counts, completion progress and per-size order
    progress.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Consumes resolved orders
    (see ``textile_engines.status``) and allocation usages.

Invariants enforced:
    - Defects are counted as defective units *used* (attributed by the
      allocation engine), not as units received.
    - Percentages over a zero base are 0, never an error.
    - Usages whose order or stock entry cannot be found are skipped.

Failure modes:
    None.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from textile_engines.tracer import traced_engine
from textile_kernel.domain.entities import (
    CuttingReport,
    Order,
    Producer,
    ProductionStatus,
    StockEntry,
    StockUsage,
)
from textile_kernel.domain.identifiers import UNASSIGNED
from textile_kernel.domain.numbers import (
    floor_percentage,
    percentage,
    round_half_up,
    whole_percentage,
)
from textile_kernel.domain.sizes import SIZE_ORDER, Size, Sizes, parse_size
from textile_kernel.logging_config import get_logger

logger = get_logger("engines.reporting")

_OPEN_STATUSES = (ProductionStatus.IN_PROGRESS, ProductionStatus.PENDING_CUT)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProducerPerformanceStat:
    name: str
    completed_orders: int
    in_progress_orders: int
    total_orders: int
    total_quantity: int
    avg_completion_days: int | None


@dataclass(frozen=True)
class DefectReasonTotal:
    """Defective units used under one reason, split by producer."""

    reason: str
    total: int
    by_producer: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class DefectShare:
    reason: str
    count: int
    percentage: Decimal  # share of all defects in scope


@dataclass(frozen=True)
class DefectRateReport:
    total_defects: int
    total_cut: int
    defect_percentage: Decimal
    reasons: tuple[DefectShare, ...]


@dataclass(frozen=True)
class DashboardSummary:
    """Counts per order group (not per producer row)."""

    total_orders: int
    completed_orders: int
    in_progress_orders: int
    issues: int


@dataclass(frozen=True)
class CompletionProgress:
    produced: int
    target: int
    percentage: int


@dataclass(frozen=True)
class UsageDetail:
    date: date
    quantity: int
    is_defective: bool


@dataclass(frozen=True)
class SizeProgressRow:
    """Progress of one order row at one size."""

    order_id: str
    size: Size
    producer: str
    ordered: int
    cut: int
    produced: int
    remaining: int
    percentage: int
    usage_details: tuple[UsageDetail, ...]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _in_range(day: date, start: date | None, end: date | None) -> bool:
    return (start is None or day >= start) and (end is None or day <= end)


def _index_by_id(records: Iterable) -> dict:
    return {r.id: r for r in records}


# ---------------------------------------------------------------------------
# Producer performance
# ---------------------------------------------------------------------------


@traced_engine("producer_performance", "1.0", fingerprint_fields=("orders",))
def producer_performance(
    producers: Sequence[Producer],
    orders: Sequence[Order],
) -> tuple[ProducerPerformanceStat, ...]:
    """
    Per-producer order statistics, in producer order.

    ``orders`` should be resolved orders.  A completed order without a
    completion date is not counted as completed.  Average completion time
    is the half-up rounded mean of (completion - created) in days, None
    when the producer has no completed orders.
    """
    stats: list[ProducerPerformanceStat] = []
    for producer in producers:
        producer_orders = [o for o in orders if o.producer == producer.name]
        completed = [
            o for o in producer_orders
            if o.status == ProductionStatus.COMPLETED and o.completion_date is not None
        ]
        durations = [(o.completion_date - o.created_date).days for o in completed]
        avg_days = round_half_up(sum(durations), len(durations)) if durations else None

        stats.append(ProducerPerformanceStat(
            name=producer.name,
            completed_orders=len(completed),
            in_progress_orders=sum(1 for o in producer_orders if o.status in _OPEN_STATUSES),
            total_orders=len(producer_orders),
            total_quantity=sum(o.total_quantity for o in producer_orders),
            avg_completion_days=avg_days,
        ))
    return tuple(stats)


# ---------------------------------------------------------------------------
# Defects
# ---------------------------------------------------------------------------


@traced_engine("defect_breakdown", "1.0", fingerprint_fields=("stock_usages",))
def defect_breakdown(
    stock_usages: Sequence[StockUsage],
    stock_entries: Sequence[StockEntry],
    orders: Sequence[Order],
    unassigned_label: str = UNASSIGNED,
) -> tuple[DefectReasonTotal, ...]:
    """
    Defective units used per defect reason, with a per-producer split.

    Joins usage -> stock entry (for the reason) -> order (for the
    producer).  Sorted by total descending, then reason name.
    """
    entries = _index_by_id(stock_entries)
    orders_by_id = _index_by_id(orders)
    totals: dict[str, dict[str, int]] = {}

    for usage in stock_usages:
        entry = entries.get(usage.stock_entry_id)
        order = orders_by_id.get(usage.order_id)
        if entry is None or order is None:
            continue
        defective = usage.total_defective
        if defective <= 0 or not entry.defect_reason:
            continue
        by_producer = totals.setdefault(entry.defect_reason, {})
        producer = order.producer or unassigned_label
        by_producer[producer] = by_producer.get(producer, 0) + defective

    result = [
        DefectReasonTotal(reason=reason, total=sum(split.values()), by_producer=dict(split))
        for reason, split in totals.items()
    ]
    result.sort(key=lambda r: (-r.total, r.reason))
    return tuple(result)


@traced_engine("defect_rate", "1.0", fingerprint_fields=("producer", "start", "end"))
def defect_rate(
    stock_usages: Sequence[StockUsage],
    stock_entries: Sequence[StockEntry],
    orders: Sequence[Order],
    cutting_reports: Sequence[CuttingReport],
    producer: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> DefectRateReport:
    """
    Defective units used relative to units cut, for a scope.

    Scope is a producer (None for all orders) and an optional inclusive
    date range.  The cut side counts confirmed cutting reports of the
    groups the producer works on, dated within range; the defect side
    counts defective units used by the producer's orders from stock
    entries dated within range.
    """
    scoped = [o for o in orders if producer is None or o.producer == producer]
    group_ids = {o.group_id for o in scoped}
    order_ids = {o.id for o in scoped}
    entries = _index_by_id(stock_entries)

    total_cut = sum(
        r.sizes.total
        for r in cutting_reports
        if r.is_confirmed and r.group_id in group_ids and _in_range(r.date, start, end)
    )

    by_reason: dict[str, int] = {}
    for usage in stock_usages:
        if usage.order_id not in order_ids:
            continue
        entry = entries.get(usage.stock_entry_id)
        defective = usage.total_defective
        if entry is None or defective <= 0 or not entry.defect_reason:
            continue
        if not _in_range(entry.date, start, end):
            continue
        by_reason[entry.defect_reason] = by_reason.get(entry.defect_reason, 0) + defective

    total_defects = sum(by_reason.values())
    shares = sorted(by_reason.items(), key=lambda kv: (-kv[1], kv[0]))

    return DefectRateReport(
        total_defects=total_defects,
        total_cut=total_cut,
        defect_percentage=percentage(total_defects, total_cut),
        reasons=tuple(
            DefectShare(reason=reason, count=count, percentage=percentage(count, total_defects))
            for reason, count in shares
        ),
    )


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


def group_status(group_orders: Iterable[Order]) -> ProductionStatus:
    """Status of an order group: cancelled > in-progress > pending-cut > completed."""
    statuses = {o.status for o in group_orders}
    for status in (
        ProductionStatus.CANCELLED,
        ProductionStatus.IN_PROGRESS,
        ProductionStatus.PENDING_CUT,
    ):
        if status in statuses:
            return status
    return ProductionStatus.COMPLETED


def dashboard_summary(orders: Sequence[Order]) -> DashboardSummary:
    groups: dict[str, list[Order]] = {}
    for order in orders:
        groups.setdefault(order.group_id, []).append(order)

    statuses = [group_status(rows) for rows in groups.values()]
    return DashboardSummary(
        total_orders=len(groups),
        completed_orders=sum(1 for s in statuses if s == ProductionStatus.COMPLETED),
        in_progress_orders=sum(1 for s in statuses if s in _OPEN_STATUSES),
        issues=sum(1 for s in statuses if s == ProductionStatus.CANCELLED),
    )


def completion_progress(
    orders: Sequence[Order],
    stock_usages: Sequence[StockUsage],
    cutting_reports: Sequence[CuttingReport],
    product_name: str | None = None,
    color: str | None = None,
    size: Size | str | None = None,
) -> CompletionProgress:
    """Units produced against the confirmed cut target, optionally filtered."""
    scoped = [
        o for o in orders
        if (not product_name or o.product_name == product_name)
        and (not color or o.color == color)
    ]
    if not scoped:
        return CompletionProgress(produced=0, target=0, percentage=0)

    bucket = parse_size(size) if size else None
    order_ids = {o.id for o in scoped}
    group_ids = {o.group_id for o in scoped}

    def measure(sizes: Sizes) -> int:
        return sizes.get(bucket) if bucket else sizes.total

    target = sum(
        measure(r.sizes)
        for r in cutting_reports
        if r.is_confirmed and r.group_id in group_ids
    )
    produced = sum(measure(u.used_sizes) for u in stock_usages if u.order_id in order_ids)
    return CompletionProgress(
        produced=produced,
        target=target,
        percentage=whole_percentage(produced, target),
    )


# ---------------------------------------------------------------------------
# Order detail
# ---------------------------------------------------------------------------


def order_size_progress(
    group_orders: Sequence[Order],
    stock_usages: Sequence[StockUsage],
    stock_entries: Sequence[StockEntry],
    cut_sizes: Sizes,
    unassigned_label: str = UNASSIGNED,
) -> tuple[SizeProgressRow, ...]:
    """
    One row per (order, size) with a non-zero ordered quantity.

    ``cut`` is the group's confirmed cut at that size, shared by every row
    of the group.  ``percentage`` is truncated.  Rows are sorted by size,
    then producer.
    """
    entries = _index_by_id(stock_entries)
    rows: list[SizeProgressRow] = []

    for order in group_orders:
        usages = [u for u in stock_usages if u.order_id == order.id]
        for size in SIZE_ORDER:
            ordered = order.sizes.get(size)
            if ordered <= 0:
                continue
            produced = sum(u.used_sizes.get(size) for u in usages)
            cut = cut_sizes.get(size)

            details: list[UsageDetail] = []
            for usage in usages:
                entry = entries.get(usage.stock_entry_id)
                if entry is None:
                    continue
                normal = usage.used_normal_sizes.get(size)
                if normal > 0:
                    details.append(UsageDetail(date=entry.date, quantity=normal, is_defective=False))
                defective = usage.used_defective_sizes.get(size)
                if defective > 0:
                    details.append(UsageDetail(date=entry.date, quantity=defective, is_defective=True))
            details.sort(key=lambda d: d.date)

            rows.append(SizeProgressRow(
                order_id=order.id,
                size=size,
                producer=order.producer or unassigned_label,
                ordered=ordered,
                cut=cut,
                produced=produced,
                remaining=cut - produced,
                percentage=floor_percentage(produced, cut),
                usage_details=tuple(details),
            ))

    size_rank = {size: i for i, size in enumerate(SIZE_ORDER)}
    rows.sort(key=lambda r: (size_rank[r.size], r.producer))
    logger.debug("order_size_progress_built", extra={"row_count": len(rows)})
    return tuple(rows)
