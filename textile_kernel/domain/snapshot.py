"""
ProductionSnapshot -- the full in-memory dataset at one point in time.

Everything derived (stock usage, order status, statistics) is a pure
function of a snapshot. The snapshot itself is immutable; a change to the
base data produces a new snapshot with a new fingerprint.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from textile_kernel.domain.entities import (
    Color,
    CuttingReport,
    DefectReason,
    Order,
    Producer,
    StockEntry,
)


@dataclass(frozen=True)
class ProductionSnapshot:
    orders: tuple[Order, ...] = ()
    stock_entries: tuple[StockEntry, ...] = ()
    cutting_reports: tuple[CuttingReport, ...] = ()
    producers: tuple[Producer, ...] = ()
    colors: tuple[Color, ...] = ()
    defect_reasons: tuple[DefectReason, ...] = ()

    @property
    def active_stock_entries(self) -> tuple[StockEntry, ...]:
        """Stock entries that take part in allocation (archived excluded)."""
        return tuple(e for e in self.stock_entries if not e.is_archived)

    def orders_in_group(self, group_id: str) -> tuple[Order, ...]:
        return tuple(o for o in self.orders if o.group_id == group_id)

    def reports_in_group(self, group_id: str) -> tuple[CuttingReport, ...]:
        return tuple(r for r in self.cutting_reports if r.group_id == group_id)

    def fingerprint(self) -> str:
        """
        Deterministic SHA-256 of the snapshot contents.

        Two snapshots with equal records (in equal order) share a
        fingerprint; used to memoize derived state per snapshot version.
        """
        canonical = repr(
            (
                self.orders,
                self.stock_entries,
                self.cutting_reports,
                self.producers,
                self.colors,
                self.defect_reasons,
            )
        )
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
