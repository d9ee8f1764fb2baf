"""
Module: textile_engines.reassignment
Responsibility:
    Move size quantities between the per-producer rows of an order group,
    and redistribute a group over its producers when its total changes.

Architecture position:
    Engines -- pure calculation layer.  Returns new Order values; the
    write-back is done by ``textile_services.workflow`` through
    ``OrderService.replace_group``.

Invariants enforced:
    - Only groups touched by a move are returned as affected; every other
      order is passed through untouched, in its original relative order.
    - ``Order.total_quantity`` is derived from sizes, so it is always the
      sum after a move.
    - Rows whose total drops to zero are removed.
    - Per group and size, a move never changes the group's total.

Failure modes:
    None.  Parts naming unknown orders, zero quantities or a source already
    owned by the target are skipped.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import date

from textile_engines.tracer import traced_engine
from textile_kernel.domain.entities import Order
from textile_kernel.domain.identifiers import UNASSIGNED, make_order_id, producer_or_none
from textile_kernel.domain.numbers import round_half_up
from textile_kernel.domain.sizes import SIZE_ORDER, Size, Sizes, parse_size
from textile_kernel.logging_config import get_logger

logger = get_logger("engines.reassignment")

OrderIdFactory = Callable[[str, str | None], str]


@dataclass(frozen=True)
class PartMove:
    """One (order, size) quantity moved to another producer's row."""

    source_order_id: str
    target_order_id: str
    size: Size
    quantity: int


@dataclass(frozen=True)
class ReassignmentResult:
    """
    Outcome of a reassignment.

    ``orders`` is the full order list after the move.  Callers persisting
    the change replace each group in ``affected_group_ids`` with its rows
    from ``orders``.
    """

    orders: tuple[Order, ...]
    affected_group_ids: tuple[str, ...]
    moved: tuple[PartMove, ...]

    def orders_in_group(self, group_id: str) -> tuple[Order, ...]:
        return tuple(o for o in self.orders if o.group_id == group_id)


@traced_engine("reassignment", "1.0", fingerprint_fields=("parts", "target_producer"))
def reassign_parts(
    orders: Sequence[Order],
    parts: Iterable[tuple[str, Size | str]],
    target_producer: str | None,
    new_order_id: OrderIdFactory = make_order_id,
) -> ReassignmentResult:
    """
    Move the given (order id, size) parts to ``target_producer``.

    ``target_producer`` may be a producer name, ``UNASSIGNED`` or None.
    Within the source order's group the target row is the one already held
    by the target producer, or a new row (empty sizes, everything else
    copied from the source) appended after the group's existing rows.
    """
    target = producer_or_none(target_producer)
    parts = [(order_id, parse_size(size)) for order_id, size in parts]
    part_ids = {order_id for order_id, _ in parts}

    group_ids = list(dict.fromkeys(o.group_id for o in orders if o.id in part_ids))
    if not group_ids:
        return ReassignmentResult(orders=tuple(orders), affected_group_ids=(), moved=())

    # Working copy of the touched groups: id -> order, in original order.
    working: dict[str, Order] = {o.id: o for o in orders if o.group_id in group_ids}
    moved: list[PartMove] = []

    for order_id, size in parts:
        source = working.get(order_id)
        if source is None or source.producer == target:
            continue
        quantity = source.sizes.get(size)
        if quantity == 0:
            continue

        target_row = next(
            (o for o in working.values() if o.group_id == source.group_id and o.producer == target),
            None,
        )
        if target_row is None:
            target_row = replace(
                source,
                id=new_order_id(source.group_id, target),
                producer=target,
                sizes=Sizes(),
            )

        working[target_row.id] = replace(
            target_row,
            sizes=target_row.sizes.with_quantity(size, target_row.sizes.get(size) + quantity),
        )
        working[source.id] = replace(source, sizes=source.sizes.with_quantity(size, 0))
        moved.append(PartMove(
            source_order_id=source.id,
            target_order_id=target_row.id,
            size=size,
            quantity=quantity,
        ))

    # Untouched orders first, then the rebuilt rows of the affected groups.
    affected = frozenset(group_ids)
    result = [o for o in orders if o.group_id not in affected]
    result.extend(o for o in working.values() if o.total_quantity > 0)

    logger.info("parts_reassigned", extra={
        "producer": target or UNASSIGNED,
        "part_count": len(parts),
        "moved_count": len(moved),
        "group_count": len(group_ids),
    })
    return ReassignmentResult(
        orders=tuple(result),
        affected_group_ids=tuple(group_ids),
        moved=tuple(moved),
    )


def resize_group(
    group_orders: Sequence[Order],
    new_total_sizes: Sizes,
    created_date: date | None = None,
    new_order_id: OrderIdFactory = make_order_id,
) -> tuple[Order, ...]:
    """
    Redistribute a new per-size total over a group's producers.

    Each producer (the unassigned share counts as one) keeps its share of
    the old group total; per size the new quantity is
    ``round_half_up(new_total[size] * share)``.  Rows come out one per
    producer in order of first appearance, with fresh ids; producers whose
    new total is zero are dropped.  Status and completion date come from
    the group's first row, as does the creation date unless one is given.

    Rounding may make the rows sum to one unit more or less than the new
    total at a size.
    """
    if not group_orders:
        return ()
    first = group_orders[0]

    share_by_producer: dict[str | None, int] = {}
    for order in group_orders:
        share_by_producer[order.producer] = (
            share_by_producer.get(order.producer, 0) + order.total_quantity
        )
    old_total = sum(share_by_producer.values())
    if old_total == 0:
        # No share to go by; the first producer takes the whole group.
        share_by_producer = {first.producer: 1}
        old_total = 1

    rows: list[Order] = []
    for producer, share in share_by_producer.items():
        sizes = Sizes(**{
            size.value: round_half_up(new_total_sizes.get(size) * share, old_total)
            for size in SIZE_ORDER
        })
        if sizes.is_zero:
            continue
        rows.append(replace(
            first,
            id=new_order_id(first.group_id, producer),
            producer=producer,
            sizes=sizes,
            created_date=created_date or first.created_date,
        ))

    logger.info("group_resized", extra={
        "group_id": first.group_id,
        "producer_count": len(share_by_producer),
        "row_count": len(rows),
        "new_total": new_total_sizes.total,
    })
    return tuple(rows)
