"""Tests for the Sizes value object and size bucket parsing."""

import pytest

from textile_kernel.domain.sizes import SIZE_ORDER, Size, Sizes, parse_size, sum_sizes
from textile_kernel.exceptions import InvalidSizesError


class TestParseSize:

    def test_accepts_enum_and_names(self):
        assert parse_size(Size.M) is Size.M
        assert parse_size("xl") is Size.XL
        assert parse_size(" XXL ") is Size.XXL

    def test_unknown_bucket_rejected(self):
        with pytest.raises(InvalidSizesError) as exc_info:
            parse_size("3xl")
        assert exc_info.value.code == "INVALID_SIZES"


class TestSizes:

    def test_defaults_to_zero(self):
        sizes = Sizes()
        assert sizes.total == 0
        assert sizes.is_zero
        assert sizes == Sizes.zero()

    def test_canonical_order(self):
        assert SIZE_ORDER == (Size.XS, Size.S, Size.M, Size.L, Size.XL, Size.XXL)
        sizes = Sizes(xxl=1, xs=2)
        assert [size for size, _ in sizes.items()] == list(SIZE_ORDER)

    def test_negative_quantity_rejected(self):
        with pytest.raises(InvalidSizesError):
            Sizes(m=-1)

    def test_non_integer_quantity_rejected(self):
        with pytest.raises(InvalidSizesError):
            Sizes(m=1.5)
        with pytest.raises(InvalidSizesError):
            Sizes(m=True)

    def test_of_mapping(self):
        sizes = Sizes.of({"s": 15, "M": "30", "xl": None})
        assert sizes == Sizes(s=15, m=30)

    def test_of_empty(self):
        assert Sizes.of(None) == Sizes()
        assert Sizes.of({}) == Sizes()

    def test_of_rejects_fractions(self):
        with pytest.raises(InvalidSizesError):
            Sizes.of({"s": 2.5})
        with pytest.raises(InvalidSizesError):
            Sizes.of({"s": "two"})

    def test_of_rejects_unknown_bucket(self):
        with pytest.raises(InvalidSizesError):
            Sizes.of({"xxxl": 1})

    def test_get_and_with_quantity(self):
        sizes = Sizes(s=5)
        updated = sizes.with_quantity("m", 7)
        assert updated.get(Size.M) == 7
        assert updated.get("s") == 5
        assert sizes.get("m") == 0

    def test_addition(self):
        assert Sizes(s=1, m=2) + Sizes(m=3, xxl=4) == Sizes(s=1, m=5, xxl=4)

    def test_total_and_dict(self):
        sizes = Sizes(xs=1, s=2, m=3, l=4, xl=5, xxl=6)
        assert sizes.total == 21
        assert sizes.to_dict() == {"xs": 1, "s": 2, "m": 3, "l": 4, "xl": 5, "xxl": 6}

    def test_sum_sizes(self):
        assert sum_sizes([]) == Sizes()
        assert sum_sizes([Sizes(s=1), Sizes(s=2), Sizes(l=3)]) == Sizes(s=3, l=3)

    def test_str_lists_non_zero_buckets(self):
        assert str(Sizes(s=15, l=2)) == "s=15 l=2"
