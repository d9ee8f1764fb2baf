"""
Validation -- data-entry boundary checks.

Responsibility:
    Turns raw form input into validated drafts for the write services.
    This is the only place where production data is rejected; once a
    draft exists the engines accept it as well-formed.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Failure modes:
    - MissingFieldError for empty model/color/reference names.
    - InvalidDateError for dates that are not ISO formatted.
    - EmptyQuantityError when an order or stock entry totals zero.
    - DefectReasonRequiredError when defective units lack a reason.
    - InvalidSizesError propagated from ``Sizes.of``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from textile_kernel.domain.identifiers import producer_or_none
from textile_kernel.domain.sizes import Sizes
from textile_kernel.exceptions import (
    DefectReasonRequiredError,
    EmptyQuantityError,
    InvalidDateError,
    MissingFieldError,
)


@dataclass(frozen=True)
class OrderDraft:
    """A validated new order line, before ids and status are assigned."""

    created_date: date
    product_name: str
    color: str
    sizes: Sizes


@dataclass(frozen=True)
class StockEntryDraft:
    """A validated stock receipt, before an id is assigned."""

    date: date
    product_name: str
    color: str
    normal_sizes: Sizes
    defective_sizes: Sizes
    producer: str | None = None
    defect_reason: str | None = None


def parse_date(value: Any) -> date:
    """
    Parse an entry date.

    Accepts ``date``/``datetime`` objects and ISO strings; a time part
    after ``T`` is ignored, matching how dates are stored.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip().split("T")[0])
        except ValueError:
            raise InvalidDateError(value) from None
    raise InvalidDateError(value)


def require_text(value: str | None, field_name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise MissingFieldError(field_name)
    return text


def normalize_name(value: str | None, field_name: str = "name") -> str:
    """Lookup names (colors, producers, defect reasons) are stored upper-case."""
    return require_text(value, field_name).upper()


def _as_sizes(value: Sizes | Mapping[str, Any] | None) -> Sizes:
    return value if isinstance(value, Sizes) else Sizes.of(value)


def validate_order_draft(
    *,
    product_name: str | None,
    color: str | None,
    created_date: Any,
    sizes: Sizes | Mapping[str, Any] | None,
) -> OrderDraft:
    parsed_sizes = _as_sizes(sizes)
    product = require_text(product_name, "product_name")
    if parsed_sizes.is_zero:
        raise EmptyQuantityError(f"order {product}")
    return OrderDraft(
        created_date=parse_date(created_date),
        product_name=product,
        color=normalize_name(color, "color"),
        sizes=parsed_sizes,
    )


def validate_stock_entry_draft(
    *,
    entry_date: Any,
    product_name: str | None,
    color: str | None,
    normal_sizes: Sizes | Mapping[str, Any] | None = None,
    defective_sizes: Sizes | Mapping[str, Any] | None = None,
    producer: str | None = None,
    defect_reason: str | None = None,
) -> StockEntryDraft:
    normal = _as_sizes(normal_sizes)
    defective = _as_sizes(defective_sizes)
    product = require_text(product_name, "product_name")
    if normal.is_zero and defective.is_zero:
        raise EmptyQuantityError(f"stock entry {product}")

    reason = (defect_reason or "").strip().upper() or None
    if defective.total > 0 and reason is None:
        raise DefectReasonRequiredError(defective.total)
    if defective.is_zero:
        reason = None

    return StockEntryDraft(
        date=parse_date(entry_date),
        product_name=product,
        color=normalize_name(color, "color"),
        normal_sizes=normal,
        defective_sizes=defective,
        producer=producer_or_none(producer),
        defect_reason=reason,
    )
