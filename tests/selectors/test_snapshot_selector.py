"""
Tests for SnapshotSelector and the SizesJSON column type.
"""

from datetime import date

from sqlalchemy import text

from textile_kernel.domain.sizes import Sizes
from textile_kernel.selectors.snapshot_selector import SnapshotSelector
from textile_kernel.services.reference_data_service import ReferenceDataService


class TestOrdering:

    def test_orders_in_insertion_sequence(self, session, create_order):
        late = create_order(created_date=date(2025, 3, 9))
        early = create_order(created_date=date(2025, 3, 1))

        assert [o.id for o in SnapshotSelector(session).orders()] == [late.id, early.id]

    def test_orders_in_group(self, session, create_order):
        first = create_order()
        create_order(product_name="SWEATSHIRT")

        assert SnapshotSelector(session).orders_in_group(first.group_id) == (first,)

    def test_stock_entries_by_date_then_sequence(self, session, create_stock_entry):
        late = create_stock_entry(entry_date=date(2025, 3, 20), normal={"s": 1})
        early_a = create_stock_entry(entry_date=date(2025, 3, 10), normal={"s": 2})
        early_b = create_stock_entry(entry_date=date(2025, 3, 10), normal={"s": 3})

        ids = [e.id for e in SnapshotSelector(session).stock_entries()]
        assert ids == [early_a.id, early_b.id, late.id]

    def test_lookups_by_name(self, session):
        service = ReferenceDataService(session)
        for name in ("ZEYTİN", "BEYAZ", "LACİVERT"):
            service.add_color(name)

        colors = SnapshotSelector(session).load().colors
        assert [c.name for c in colors] == ["BEYAZ", "LACİVERT", "ZEYTİN"]


class TestSnapshot:

    def test_load_counts(self, session, create_order, create_stock_entry):
        order = create_order()
        create_stock_entry()

        snapshot = SnapshotSelector(session).load()
        assert snapshot.orders == (order,)
        (entry,) = snapshot.stock_entries
        assert entry.normal_sizes == Sizes(s=1)
        # The placeholder cut created with the order.
        (report,) = snapshot.cutting_reports
        assert report.group_id == order.group_id
        assert not report.is_confirmed

    def test_fingerprint_tracks_changes(self, session, create_order):
        create_order()
        before = SnapshotSelector(session).load().fingerprint()
        assert SnapshotSelector(session).load().fingerprint() == before

        create_order(product_name="SWEATSHIRT")
        assert SnapshotSelector(session).load().fingerprint() != before


class TestSizesColumn:

    def test_missing_buckets_read_as_zero(self, session, create_order):
        order = create_order()
        session.execute(
            text("UPDATE orders SET sizes = :sizes WHERE id = :id"),
            {"sizes": '{"m": 4}', "id": order.id},
        )
        session.expire_all()

        (stored,) = SnapshotSelector(session).orders()
        assert stored.sizes == Sizes(m=4)

    def test_stored_json_is_canonical(self, session, create_order):
        order = create_order(sizes={"m": 3})
        raw = session.execute(
            text("SELECT sizes FROM orders WHERE id = :id"), {"id": order.id}
        ).scalar_one()
        assert raw.startswith('{"xs": 0, "s": 0, "m": 3')

