"""
Module: textile_engines.allocation
Responsibility:
    Attribute received stock to orders.  Matches stock entries (normal and
    defective units) against confirmed cut quantities and outstanding order
    demand, producing one StockUsage record per (order, stock entry) pair.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import textile_kernel.domain and the engine tracer.

Invariants enforced:
    - Conservation: per (product, color, size) the units attributed never
      exceed the units received, separately for normal and defective.
    - Cut ceiling: per group and size the units attributed never exceed the
      confirmed cut quantity.
    - FIFO: stock entries are consumed oldest date first; an older entry is
      exhausted before a newer one is touched.
    - Normal before defective: defective units of a size are only consumed
      once no normal units of that size remain in the bucket.
    - Group priority: order groups are served by the creation date of their
      earliest order, oldest first.
    - Determinism: identical inputs produce identical usages, ids included.

Failure modes:
    None.  Quantities are clamped with ``min``; inconsistent data such as a
    cut exceeding the ordered quantity is absorbed by the overflow rule
    (see ``_distribute``) and reported in ``AllocationResult.overflow``.

Usage:
    from textile_engines.allocation import StockAllocationEngine

    engine = StockAllocationEngine()
    result = engine.allocate(
        orders=snapshot.orders,
        stock_entries=snapshot.active_stock_entries,
        cutting_reports=snapshot.cutting_reports,
    )
    for usage in result.usages:
        ...
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from textile_engines.tracer import traced_engine
from textile_kernel.domain.entities import (
    CuttingReport,
    Order,
    StockEntry,
    StockUsage,
    usage_id_for,
)
from textile_kernel.domain.sizes import SIZE_ORDER, Size, Sizes
from textile_kernel.logging_config import get_logger

logger = get_logger("engines.allocation")

StockKey = tuple[str, str]


@dataclass(frozen=True)
class OverflowRecord:
    """
    Units that no order of the group could absorb.

    Happens when more was cut (and produced) than ordered at a size.  The
    units are attributed to the group's first order anyway, which keeps the
    stock accounted for but lets that order exceed its ordered quantity.
    """

    group_id: str
    order_id: str
    stock_entry_id: str
    size: Size
    quantity: int
    is_defective: bool


@dataclass(frozen=True)
class EntryConsumption:
    """How much of one stock entry was attributed, and what is left."""

    stock_entry_id: str
    used_normal: Sizes
    used_defective: Sizes
    remaining_normal: Sizes
    remaining_defective: Sizes

    @property
    def total_used(self) -> int:
        return self.used_normal.total + self.used_defective.total


@dataclass(frozen=True)
class AllocationResult:
    """
    Complete allocation result.

    Guarantees:
        - ``usages`` are in creation order (group priority, then size, then
          stock date), each (order_id, stock_entry_id) pair at most once.
        - ``cut_by_group`` holds the summed confirmed cut per group.
    """

    usages: tuple[StockUsage, ...]
    overflow: tuple[OverflowRecord, ...]
    cut_by_group: dict[str, Sizes]
    consumption: tuple[EntryConsumption, ...]

    @property
    def total_used(self) -> int:
        return sum(u.total_used for u in self.usages)

    @property
    def has_overflow(self) -> bool:
        return bool(self.overflow)

    def for_order(self, order_id: str) -> tuple[StockUsage, ...]:
        return tuple(u for u in self.usages if u.order_id == order_id)

    def for_stock_entry(self, stock_entry_id: str) -> tuple[StockUsage, ...]:
        return tuple(u for u in self.usages if u.stock_entry_id == stock_entry_id)

    def produced_by_order(self) -> dict[str, Sizes]:
        """Units attributed to each order, normal and defective combined."""
        produced: dict[str, Sizes] = {}
        for usage in self.usages:
            produced[usage.order_id] = produced.get(usage.order_id, Sizes()) + usage.used_sizes
        return produced

    def consumption_for(self, stock_entry_id: str) -> EntryConsumption | None:
        for item in self.consumption:
            if item.stock_entry_id == stock_entry_id:
                return item
        return None

    def consumed_by_entry(self) -> dict[str, tuple[int, int]]:
        """(normal, defective) units used per stock entry id."""
        return {
            c.stock_entry_id: (c.used_normal.total, c.used_defective.total)
            for c in self.consumption
        }

    def remaining_by_entry(self) -> dict[str, tuple[Sizes, Sizes]]:
        """(normal, defective) units still unattributed per stock entry id."""
        return {
            c.stock_entry_id: (c.remaining_normal, c.remaining_defective)
            for c in self.consumption
        }


# ---------------------------------------------------------------------------
# Working state (mutable, private to one allocate() call)
# ---------------------------------------------------------------------------


def _counts(sizes: Sizes) -> dict[Size, int]:
    return {size: qty for size, qty in sizes.items()}


def _freeze(counts: dict[Size, int]) -> Sizes:
    return Sizes(**{size.value: qty for size, qty in counts.items()})


@dataclass
class _StockCursor:
    entry: StockEntry
    remaining_normal: dict[Size, int]
    remaining_defective: dict[Size, int]

    @classmethod
    def open(cls, entry: StockEntry) -> _StockCursor:
        return cls(
            entry=entry,
            remaining_normal=_counts(entry.normal_sizes),
            remaining_defective=_counts(entry.defective_sizes),
        )

    def consumption(self) -> EntryConsumption:
        remaining_normal = _freeze(self.remaining_normal)
        remaining_defective = _freeze(self.remaining_defective)
        return EntryConsumption(
            stock_entry_id=self.entry.id,
            used_normal=Sizes(**{
                s.value: self.entry.normal_sizes.get(s) - remaining_normal.get(s)
                for s in SIZE_ORDER
            }),
            used_defective=Sizes(**{
                s.value: self.entry.defective_sizes.get(s) - remaining_defective.get(s)
                for s in SIZE_ORDER
            }),
            remaining_normal=remaining_normal,
            remaining_defective=remaining_defective,
        )


@dataclass
class _UsageAccumulator:
    order_id: str
    stock_entry_id: str
    normal: dict[Size, int] = field(default_factory=lambda: dict.fromkeys(SIZE_ORDER, 0))
    defective: dict[Size, int] = field(default_factory=lambda: dict.fromkeys(SIZE_ORDER, 0))

    def add(self, size: Size, quantity: int, is_defective: bool) -> None:
        target = self.defective if is_defective else self.normal
        target[size] += quantity

    def to_usage(self) -> StockUsage:
        return StockUsage(
            id=usage_id_for(self.order_id, self.stock_entry_id),
            order_id=self.order_id,
            stock_entry_id=self.stock_entry_id,
            used_normal_sizes=_freeze(self.normal),
            used_defective_sizes=_freeze(self.defective),
        )


@dataclass
class _CutGroup:
    product_name: str
    color: str
    sizes: Sizes


class _UsageLedger:
    """Usage accumulators keyed by (order_id, stock_entry_id), in creation order."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], _UsageAccumulator] = {}

    def get(self, order_id: str, stock_entry_id: str) -> _UsageAccumulator:
        key = (order_id, stock_entry_id)
        acc = self._entries.get(key)
        if acc is None:
            acc = _UsageAccumulator(order_id=order_id, stock_entry_id=stock_entry_id)
            self._entries[key] = acc
        return acc

    def usages(self) -> tuple[StockUsage, ...]:
        return tuple(acc.to_usage() for acc in self._entries.values())


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class StockAllocationEngine:
    """
    FIFO attribution of stock entries to order groups.

    Contract:
        Pure function of (orders, stock entries, cutting reports).
        No I/O, no clock, no randomness.
    Non-goals:
        - Does not filter archived entries for the caller beyond skipping
          any that are passed in; callers pass the active set.
        - Does not decide order status; see ``textile_engines.status``.
    """

    @traced_engine(
        "stock_allocation",
        "1.0",
        fingerprint_fields=("orders", "stock_entries", "cutting_reports"),
    )
    def allocate(
        self,
        orders: Sequence[Order],
        stock_entries: Sequence[StockEntry],
        cutting_reports: Sequence[CuttingReport],
    ) -> AllocationResult:
        """
        Attribute stock to orders.

        Args:
            orders: All order rows; array order within a group decides which
                order is served first at each size.
            stock_entries: Active stock entries.
            cutting_reports: All cutting reports; only confirmed ones count.

        Returns:
            AllocationResult with usages, overflow records, the cut per
            group and per-entry consumption.
        """
        t0 = time.monotonic()
        logger.info("allocation_started", extra={
            "order_count": len(orders),
            "stock_entry_count": len(stock_entries),
            "cutting_report_count": len(cutting_reports),
        })

        buckets = self._bucket_stock(stock_entries)
        cut_by_group = self._sum_confirmed_cuts(cutting_reports)
        orders_by_group = self._group_orders(orders)

        ledger = _UsageLedger()
        overflow: list[OverflowRecord] = []

        for group_id in self._group_priority(cut_by_group, orders_by_group):
            cut = cut_by_group[group_id]
            group_orders = orders_by_group[group_id]
            stock = buckets.get((cut.product_name, cut.color), [])
            remaining_ordered = {o.id: _counts(o.sizes) for o in group_orders}

            for size in SIZE_ORDER:
                needed = cut.sizes.get(size)
                if needed == 0:
                    continue

                for is_defective in (False, True):
                    for cursor in stock:
                        if needed == 0:
                            break
                        pool = cursor.remaining_defective if is_defective else cursor.remaining_normal
                        take = min(needed, pool[size])
                        if take > 0:
                            pool[size] -= take
                            needed -= take
                            overflow.extend(self._distribute(
                                group_id=group_id,
                                group_orders=group_orders,
                                remaining_ordered=remaining_ordered,
                                ledger=ledger,
                                stock_entry_id=cursor.entry.id,
                                size=size,
                                quantity=take,
                                is_defective=is_defective,
                            ))
                    if needed == 0:
                        break

        usages = ledger.usages()
        consumption = tuple(
            cursor.consumption() for bucket in buckets.values() for cursor in bucket
        )

        for record in overflow:
            logger.warning("allocation_overflow", extra={
                "group_id": record.group_id,
                "order_id": record.order_id,
                "stock_entry_id": record.stock_entry_id,
                "size": record.size.value,
                "quantity": record.quantity,
                "is_defective": record.is_defective,
            })

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("allocation_completed", extra={
            "usage_count": len(usages),
            "group_count": len(cut_by_group),
            "overflow_count": len(overflow),
            "total_used": sum(u.total_used for u in usages),
            "duration_ms": duration_ms,
        })

        return AllocationResult(
            usages=usages,
            overflow=tuple(overflow),
            cut_by_group={gid: cut.sizes for gid, cut in cut_by_group.items()},
            consumption=consumption,
        )

    # -- partitioning ----------------------------------------------------

    def _bucket_stock(
        self, stock_entries: Iterable[StockEntry]
    ) -> dict[StockKey, list[_StockCursor]]:
        """Stock cursors per (product, color), oldest entry first (stable)."""
        buckets: dict[StockKey, list[_StockCursor]] = {}
        for entry in sorted(stock_entries, key=lambda e: e.date):
            if entry.is_archived:
                continue
            buckets.setdefault(entry.stock_key, []).append(_StockCursor.open(entry))
        return buckets

    def _sum_confirmed_cuts(
        self, cutting_reports: Iterable[CuttingReport]
    ) -> dict[str, _CutGroup]:
        cuts: dict[str, _CutGroup] = {}
        for report in cutting_reports:
            if not report.is_confirmed:
                continue
            group = cuts.get(report.group_id)
            if group is None:
                cuts[report.group_id] = _CutGroup(
                    product_name=report.product_name,
                    color=report.color,
                    sizes=report.sizes,
                )
            else:
                group.sizes = group.sizes + report.sizes
        return cuts

    def _group_orders(self, orders: Iterable[Order]) -> dict[str, list[Order]]:
        grouped: dict[str, list[Order]] = {}
        for order in orders:
            grouped.setdefault(order.group_id, []).append(order)
        return grouped

    def _group_priority(
        self,
        cut_by_group: dict[str, _CutGroup],
        orders_by_group: dict[str, list[Order]],
    ) -> list[str]:
        """Cut groups that have orders, oldest earliest-order first (stable)."""
        candidates = [gid for gid in cut_by_group if orders_by_group.get(gid)]

        def earliest(group_id: str) -> date:
            return min(o.created_date for o in orders_by_group[group_id])

        return sorted(candidates, key=earliest)

    # -- distribution ----------------------------------------------------

    def _distribute(
        self,
        *,
        group_id: str,
        group_orders: Sequence[Order],
        remaining_ordered: dict[str, dict[Size, int]],
        ledger: _UsageLedger,
        stock_entry_id: str,
        size: Size,
        quantity: int,
        is_defective: bool,
    ) -> list[OverflowRecord]:
        """
        Spread units taken from one stock entry over the group's orders.

        Orders are served in their given order, each up to what it still
        has outstanding at ``size``.  Units left after every order is
        satisfied go to the first order of the group.
        """
        left = quantity
        for order in group_orders:
            if left == 0:
                break
            outstanding = remaining_ordered[order.id]
            if outstanding[size] > 0:
                take = min(left, outstanding[size])
                ledger.get(order.id, stock_entry_id).add(size, take, is_defective)
                outstanding[size] -= take
                left -= take

        if left > 0:
            first = group_orders[0]
            ledger.get(first.id, stock_entry_id).add(size, left, is_defective)
            return [OverflowRecord(
                group_id=group_id,
                order_id=first.id,
                stock_entry_id=stock_entry_id,
                size=size,
                quantity=left,
                is_defective=is_defective,
            )]
        return []


def calculate_stock_usage(
    orders: Sequence[Order],
    stock_entries: Sequence[StockEntry],
    cutting_reports: Sequence[CuttingReport],
) -> tuple[StockUsage, ...]:
    """Functional form of ``StockAllocationEngine.allocate`` returning usages only."""
    return StockAllocationEngine().allocate(
        orders=orders,
        stock_entries=stock_entries,
        cutting_reports=cutting_reports,
    ).usages
