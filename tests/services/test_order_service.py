"""
Tests for OrderService.

Covers:
- add_orders(): group ids, unassigned/pending-cut rows, placeholder cut
- replace_group(): write-back of a reassignment, row sequence
- delete_group(), apply_status(), cancel_order()
- not-found errors
"""

from dataclasses import replace
from datetime import date

import pytest
from sqlalchemy import select

from textile_kernel.domain.entities import ProductionStatus
from textile_kernel.domain.sizes import Sizes
from textile_kernel.domain.validation import validate_order_draft
from textile_kernel.exceptions import OrderGroupNotFoundError, OrderNotFoundError
from textile_kernel.models.cutting_report import CuttingReportRecord
from textile_kernel.models.order import OrderRecord
from textile_kernel.selectors.snapshot_selector import SnapshotSelector
from textile_kernel.services.order_service import OrderService


@pytest.fixture
def service(session) -> OrderService:
    return OrderService(session)


def _draft(product="T-SHIRT", color="SİYAH", created=date(2025, 3, 5), sizes=None):
    return validate_order_draft(
        product_name=product,
        color=color,
        created_date=created,
        sizes=sizes or {"s": 10},
    )


class TestAddOrders:

    def test_creates_pending_unassigned_rows(self, service, session):
        (order,) = service.add_orders([_draft(sizes={"s": 20, "m": 30})])

        assert order.group_id == "0503tshırtsiyah"
        assert order.producer is None
        assert order.status == ProductionStatus.PENDING_CUT
        assert order.completion_date is None
        assert order.id.startswith("0503tshırtsiyah-UNASSIGNED-")

        record = session.get(OrderRecord, order.id)
        assert record.sizes == Sizes(s=20, m=30)
        assert record.total_quantity == 50
        assert record.status == "pending-cut"

    def test_placeholder_cut_per_new_group(self, service, session):
        service.add_orders([
            _draft(),
            _draft(sizes={"m": 5}),
            _draft(color="BEYAZ"),
        ])
        reports = list(session.scalars(select(CuttingReportRecord)))

        assert sorted(r.group_id for r in reports) == ["0503tshırtbeyaz", "0503tshırtsiyah"]
        for report in reports:
            assert report.is_confirmed is False
            assert report.sizes == Sizes()
            assert report.date == date(2025, 3, 5)

    def test_same_day_product_color_share_a_group(self, service):
        first, second = service.add_orders([_draft(), _draft(sizes={"m": 5})])
        third = service.add_orders([_draft(created=date(2025, 3, 6))])[0]

        assert first.group_id == second.group_id
        assert third.group_id == "0603tshırtsiyah"

    def test_existing_group_gets_no_second_placeholder(self, service, session):
        service.add_orders([_draft()])
        service.add_orders([_draft(sizes={"l": 1})])

        count = len(list(session.scalars(select(CuttingReportRecord))))
        assert count == 1

    def test_row_sequence_follows_insertion(self, service, session):
        created = service.add_orders([_draft(), _draft(color="BEYAZ"), _draft(sizes={"m": 1})])

        assert [o.id for o in SnapshotSelector(session).orders()] == [o.id for o in created]

    def test_logs(self, service, captured_logs):
        service.add_orders([_draft(), _draft(color="BEYAZ")])

        (record,) = [r for r in captured_logs() if r["message"] == "orders_added"]
        assert record["order_count"] == 2
        assert record["group_count"] == 2


class TestReplaceGroup:

    def test_rewritten_group_moves_to_the_end(self, service, session):
        first = service.add_orders([_draft()])[0]
        other = service.add_orders([_draft(color="BEYAZ")])[0]

        new_rows = [
            replace(first, sizes=Sizes(s=4)),
            replace(first, id="0503tshırtsiyah-ATÖLYE A-x", producer="ATÖLYE A", sizes=Sizes(s=6)),
        ]
        service.replace_group(first.group_id, new_rows)

        orders = SnapshotSelector(session).orders()
        assert [o.id for o in orders] == [other.id, first.id, "0503tshırtsiyah-ATÖLYE A-x"]
        assert orders[1].sizes == Sizes(s=4)
        assert orders[2].producer == "ATÖLYE A"

    def test_unknown_group(self, service):
        with pytest.raises(OrderGroupNotFoundError) as exc_info:
            service.replace_group("nope", [])
        assert exc_info.value.code == "ORDER_GROUP_NOT_FOUND"


class TestDeleteAndStatus:

    def test_delete_group_removes_orders_and_reports(self, service, session):
        kept = service.add_orders([_draft(color="BEYAZ")])[0]
        gone = service.add_orders([_draft(), _draft(sizes={"m": 2})])[0]

        assert service.delete_group(gone.group_id) == 2

        snapshot = SnapshotSelector(session).load()
        assert [o.id for o in snapshot.orders] == [kept.id]
        assert [r.group_id for r in snapshot.cutting_reports] == [kept.group_id]

    def test_delete_unknown_group(self, service):
        with pytest.raises(OrderGroupNotFoundError):
            service.delete_group("nope")

    def test_apply_status(self, service):
        order = service.add_orders([_draft()])[0]
        updated = service.apply_status(order.id, ProductionStatus.COMPLETED, date(2025, 3, 20))

        assert updated.status == ProductionStatus.COMPLETED
        assert updated.completion_date == date(2025, 3, 20)
        assert service.get(order.id) == updated

    def test_cancel_clears_completion(self, service):
        order = service.add_orders([_draft()])[0]
        service.apply_status(order.id, ProductionStatus.COMPLETED, date(2025, 3, 20))
        cancelled = service.cancel_order(order.id)

        assert cancelled.status == ProductionStatus.CANCELLED
        assert cancelled.completion_date is None

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFoundError):
            service.get("nope")
        with pytest.raises(OrderNotFoundError):
            service.cancel_order("nope")
