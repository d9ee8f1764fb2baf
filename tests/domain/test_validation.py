"""Tests for data-entry validation of orders and stock entries."""

from datetime import date, datetime

import pytest

from textile_kernel.domain.sizes import Sizes
from textile_kernel.domain.validation import (
    normalize_name,
    parse_date,
    validate_order_draft,
    validate_stock_entry_draft,
)
from textile_kernel.exceptions import (
    DefectReasonRequiredError,
    EmptyQuantityError,
    InvalidDateError,
    InvalidSizesError,
    MissingFieldError,
    ValidationError,
)


class TestParseDate:

    def test_iso_string(self):
        assert parse_date("2025-03-14") == date(2025, 3, 14)

    def test_time_part_ignored(self):
        assert parse_date("2025-03-14T09:30:00Z") == date(2025, 3, 14)

    def test_date_and_datetime_objects(self):
        assert parse_date(date(2025, 3, 14)) == date(2025, 3, 14)
        assert parse_date(datetime(2025, 3, 14, 18, 0)) == date(2025, 3, 14)

    @pytest.mark.parametrize("value", ["", "14.03.2025", "2025-13-01", None, 20250314])
    def test_rejects_invalid(self, value):
        with pytest.raises(InvalidDateError):
            parse_date(value)


class TestOrderDraft:

    def test_valid_draft(self):
        draft = validate_order_draft(
            product_name=" T-SHIRT ",
            color="siyah",
            created_date="2025-03-05",
            sizes={"s": 15, "m": 30},
        )
        assert draft.product_name == "T-SHIRT"
        assert draft.color == "SIYAH"
        assert draft.created_date == date(2025, 3, 5)
        assert draft.sizes == Sizes(s=15, m=30)

    def test_missing_product(self):
        with pytest.raises(MissingFieldError) as exc_info:
            validate_order_draft(product_name="  ", color="SİYAH", created_date="2025-03-05", sizes={"s": 1})
        assert exc_info.value.field_name == "product_name"

    def test_missing_color(self):
        with pytest.raises(MissingFieldError):
            validate_order_draft(product_name="T-SHIRT", color=None, created_date="2025-03-05", sizes={"s": 1})

    def test_zero_total_rejected(self):
        with pytest.raises(EmptyQuantityError):
            validate_order_draft(product_name="T-SHIRT", color="SİYAH", created_date="2025-03-05", sizes={})

    def test_negative_size_rejected(self):
        with pytest.raises(InvalidSizesError):
            validate_order_draft(
                product_name="T-SHIRT", color="SİYAH", created_date="2025-03-05", sizes={"s": -2}
            )


class TestStockEntryDraft:

    def test_normal_only(self):
        draft = validate_stock_entry_draft(
            entry_date="2025-03-14",
            product_name="T-SHIRT",
            color="SİYAH",
            normal_sizes={"s": 10},
            producer="ATÖLYE A",
            defect_reason="LEKE",
        )
        assert draft.normal_sizes == Sizes(s=10)
        assert draft.defective_sizes == Sizes()
        assert draft.producer == "ATÖLYE A"
        # No defective units, so the reason is dropped.
        assert draft.defect_reason is None

    def test_defective_requires_reason(self):
        with pytest.raises(DefectReasonRequiredError) as exc_info:
            validate_stock_entry_draft(
                entry_date="2025-03-14",
                product_name="T-SHIRT",
                color="SİYAH",
                defective_sizes={"m": 3},
            )
        assert exc_info.value.defective_total == 3
        assert isinstance(exc_info.value, ValidationError)

    def test_defective_with_reason(self):
        draft = validate_stock_entry_draft(
            entry_date="2025-03-14",
            product_name="T-SHIRT",
            color="SİYAH",
            defective_sizes={"m": 3},
            defect_reason=" kumaş defosu ",
        )
        assert draft.defect_reason == "KUMAŞ DEFOSU"

    def test_unassigned_producer_becomes_none(self):
        draft = validate_stock_entry_draft(
            entry_date="2025-03-14",
            product_name="T-SHIRT",
            color="SİYAH",
            normal_sizes={"s": 1},
            producer="UNASSIGNED",
        )
        assert draft.producer is None

    def test_empty_entry_rejected(self):
        with pytest.raises(EmptyQuantityError):
            validate_stock_entry_draft(entry_date="2025-03-14", product_name="T-SHIRT", color="SİYAH")

    def test_bad_date_rejected(self):
        with pytest.raises(InvalidDateError):
            validate_stock_entry_draft(
                entry_date="yesterday",
                product_name="T-SHIRT",
                color="SİYAH",
                normal_sizes={"s": 1},
            )


def test_normalize_name_upper_cases():
    assert normalize_name("  atölye a ") == "ATÖLYE A"
    with pytest.raises(MissingFieldError):
        normalize_name("")
