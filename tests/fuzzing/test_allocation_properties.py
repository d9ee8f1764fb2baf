"""
Hypothesis-based property tests for the allocation engine.

Each example is a small production dataset: two product/color keys,
one to four order groups with one to three producer rows, a confirmed or
unconfirmed cut per group, and a handful of dated stock receipts with
normal and defective units.

Properties:
- Conservation: units attributed never exceed units received, per entry,
  separately for normal and defective.
- Cut ceiling: per group and size, units attributed never exceed the cut.
- Demand cap: without over-cutting, no row is produced past its order.
- Overflow is exactly the excess over the ordered quantity.
- FIFO and normal-before-defective within a (product, color) bucket.
- Determinism: the same input gives the same result.
- Cancelled orders are never reclassified by the status resolver.
"""

from datetime import date, timedelta

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from textile_engines.allocation import StockAllocationEngine
from textile_engines.status import StatusResolver
from textile_kernel.domain.clock import DeterministicClock
from textile_kernel.domain.entities import (
    CuttingReport,
    Order,
    ProductionStatus,
    StockEntry,
)
from textile_kernel.domain.sizes import SIZE_ORDER, Sizes, sum_sizes

KEYS = (("T-SHIRT", "SİYAH"), ("SWEATSHIRT", "LACİVERT"))
START = date(2025, 1, 1)

PROPERTY_SETTINGS = settings(
    max_examples=60,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)


def size_vectors(high: int):
    return st.fixed_dictionaries(
        {size.value: st.integers(min_value=0, max_value=high) for size in SIZE_ORDER}
    ).map(lambda values: Sizes(**values))


@composite
def snapshots(draw, allow_overcut: bool = True):
    """(orders, stock entries, cutting reports) for one dataset."""
    orders: list[Order] = []
    cuts: list[CuttingReport] = []

    for g in range(draw(st.integers(min_value=1, max_value=4))):
        product, color = draw(st.sampled_from(KEYS))
        group_id = f"g{g}"
        rows = [
            Order(
                id=f"{group_id}-o{r}",
                group_id=group_id,
                created_date=START + timedelta(days=draw(st.integers(0, 10))),
                product_name=product,
                color=color,
                sizes=draw(size_vectors(8)),
                status=draw(st.sampled_from(list(ProductionStatus))),
                producer=draw(st.sampled_from([None, "ATÖLYE A", "ATÖLYE B"])),
            )
            for r in range(draw(st.integers(min_value=1, max_value=3)))
        ]
        orders.extend(rows)

        ordered = sum_sizes(o.sizes for o in rows)
        slack = 3 if allow_overcut else 0
        cut = Sizes(**{
            size.value: draw(st.integers(0, ordered.get(size) + slack)) for size in SIZE_ORDER
        })
        cuts.append(CuttingReport(
            id=f"{group_id}-c",
            date=START + timedelta(days=12),
            group_id=group_id,
            product_name=product,
            color=color,
            sizes=cut,
            is_confirmed=draw(st.booleans()),
        ))

    entries = []
    for e in range(draw(st.integers(min_value=0, max_value=6))):
        product, color = draw(st.sampled_from(KEYS))
        defective = draw(size_vectors(3)) if draw(st.booleans()) else Sizes()
        entries.append(StockEntry(
            id=f"e{e}",
            date=START + timedelta(days=draw(st.integers(13, 30))),
            product_name=product,
            color=color,
            normal_sizes=draw(size_vectors(10)),
            defective_sizes=defective,
            defect_reason="LEKE" if not defective.is_zero else None,
        ))
    return draw(st.permutations(orders)), entries, cuts


def _allocate(orders, entries, cuts):
    return StockAllocationEngine().allocate(
        orders=orders, stock_entries=entries, cutting_reports=cuts
    )


class TestAllocationProperties:

    @given(data=snapshots())
    @PROPERTY_SETTINGS
    def test_conservation(self, data):
        orders, entries, cuts = data
        result = _allocate(orders, entries, cuts)

        for usage in result.usages:
            assert usage.used_sizes == usage.used_normal_sizes + usage.used_defective_sizes

        for entry in entries:
            usages = result.for_stock_entry(entry.id)
            used_normal = sum_sizes(u.used_normal_sizes for u in usages)
            used_defective = sum_sizes(u.used_defective_sizes for u in usages)
            for size in SIZE_ORDER:
                assert used_normal.get(size) <= entry.normal_sizes.get(size)
                assert used_defective.get(size) <= entry.defective_sizes.get(size)

            item = result.consumption_for(entry.id)
            assert item.used_normal == used_normal
            assert item.used_defective == used_defective
            assert item.used_normal + item.remaining_normal == entry.normal_sizes
            assert item.used_defective + item.remaining_defective == entry.defective_sizes

    @given(data=snapshots())
    @PROPERTY_SETTINGS
    def test_cut_ceiling(self, data):
        orders, entries, cuts = data
        result = _allocate(orders, entries, cuts)
        group_of = {o.id: o.group_id for o in orders}

        produced_by_group: dict[str, Sizes] = {}
        for usage in result.usages:
            gid = group_of[usage.order_id]
            produced_by_group[gid] = produced_by_group.get(gid, Sizes()) + usage.used_sizes

        for gid, produced in produced_by_group.items():
            cut = result.cut_by_group[gid]
            for size in SIZE_ORDER:
                assert produced.get(size) <= cut.get(size)

    @given(data=snapshots(allow_overcut=False))
    @PROPERTY_SETTINGS
    def test_demand_cap_without_overcut(self, data):
        orders, entries, cuts = data
        result = _allocate(orders, entries, cuts)
        ordered = {o.id: o.sizes for o in orders}

        assert not result.has_overflow
        for order_id, produced in result.produced_by_order().items():
            for size in SIZE_ORDER:
                assert produced.get(size) <= ordered[order_id].get(size)

    @given(data=snapshots())
    @PROPERTY_SETTINGS
    def test_overflow_is_the_only_excess(self, data):
        orders, entries, cuts = data
        result = _allocate(orders, entries, cuts)
        ordered = {o.id: o.sizes for o in orders}

        excess: dict[tuple[str, str], int] = {}
        for record in result.overflow:
            key = (record.order_id, record.size.value)
            excess[key] = excess.get(key, 0) + record.quantity

        for order_id, produced in result.produced_by_order().items():
            for size in SIZE_ORDER:
                over = produced.get(size) - ordered[order_id].get(size)
                assert max(over, 0) == excess.get((order_id, size.value), 0)

    @given(data=snapshots())
    @PROPERTY_SETTINGS
    def test_fifo_and_normal_before_defective(self, data):
        orders, entries, cuts = data
        result = _allocate(orders, entries, cuts)

        for key in KEYS:
            bucket = sorted((e for e in entries if e.stock_key == key), key=lambda e: e.date)
            consumption = [result.consumption_for(e.id) for e in bucket]
            for size in SIZE_ORDER:
                for kind in ("normal", "defective"):
                    used = [getattr(c, f"used_{kind}").get(size) for c in consumption]
                    left = [getattr(c, f"remaining_{kind}").get(size) for c in consumption]
                    # An entry is only touched once every older entry is exhausted.
                    for i, amount in enumerate(used):
                        if amount > 0:
                            assert all(remaining == 0 for remaining in left[:i])

                defective_used = sum(c.used_defective.get(size) for c in consumption)
                normal_left = sum(c.remaining_normal.get(size) for c in consumption)
                if defective_used > 0:
                    assert normal_left == 0

    @given(data=snapshots())
    @PROPERTY_SETTINGS
    def test_deterministic(self, data):
        orders, entries, cuts = data
        first = _allocate(orders, entries, cuts)
        second = _allocate(orders, entries, cuts)

        assert first.usages == second.usages
        assert first.overflow == second.overflow
        assert first.consumption == second.consumption

    @given(data=snapshots())
    @PROPERTY_SETTINGS
    def test_cancelled_orders_never_reclassified(self, data):
        orders, entries, cuts = data
        usages = _allocate(orders, entries, cuts).usages
        resolved = StatusResolver(DeterministicClock()).resolve(orders, usages, entries, cuts)

        for before, after in zip(orders, resolved):
            if before.status == ProductionStatus.CANCELLED:
                assert after is before
