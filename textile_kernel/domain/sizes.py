"""
Sizes -- per-size quantity vectors.

Responsibility:
    Provides the ``Size`` bucket enumeration and the immutable ``Sizes``
    value object that every order, cutting report, stock entry and usage
    record uses to carry quantities.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Quantities are non-negative integers.
    - Iteration is always in canonical bucket order (xs .. xxl), so any
      computation walking sizes is deterministic.

Failure modes:
    - InvalidSizesError on an unknown bucket name or a negative quantity.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from textile_kernel.exceptions import InvalidSizesError


class Size(str, Enum):
    """Garment size bucket."""

    XS = "xs"
    S = "s"
    M = "m"
    L = "l"
    XL = "xl"
    XXL = "xxl"


SIZE_ORDER: tuple[Size, ...] = tuple(Size)


def parse_size(value: Size | str) -> Size:
    """Coerce a bucket name ("m", "XL") to a ``Size``."""
    if isinstance(value, Size):
        return value
    try:
        return Size(str(value).strip().lower())
    except ValueError:
        raise InvalidSizesError(str(value), "unknown size bucket") from None


@dataclass(frozen=True, slots=True)
class Sizes:
    """
    Immutable quantity per size bucket.

    Contract:
        One non-negative integer per bucket.  Arithmetic returns new
        instances; nothing mutates in place.
    """

    xs: int = 0
    s: int = 0
    m: int = 0
    l: int = 0  # noqa: E741
    xl: int = 0
    xxl: int = 0

    def __post_init__(self) -> None:
        for size in SIZE_ORDER:
            qty = getattr(self, size.value)
            if not isinstance(qty, int) or isinstance(qty, bool):
                raise InvalidSizesError(size.value, f"quantity must be int, got {qty!r}")
            if qty < 0:
                raise InvalidSizesError(size.value, f"quantity cannot be negative ({qty})")

    @classmethod
    def zero(cls) -> Sizes:
        return cls()

    @classmethod
    def of(cls, values: Mapping[Size | str, Any] | None) -> Sizes:
        """
        Build from a mapping of bucket -> quantity.

        Missing buckets default to 0; ``None`` quantities count as 0.
        String quantities holding integers ("12") are accepted, since the
        persisted JSON and YAML fixtures are not always typed.
        """
        if not values:
            return cls()
        kwargs: dict[str, int] = {}
        for key, raw in values.items():
            size = parse_size(key)
            if raw is None or raw == "":
                qty = 0
            else:
                try:
                    qty = int(raw)
                except (TypeError, ValueError):
                    raise InvalidSizesError(size.value, f"not a whole number: {raw!r}") from None
                if qty != raw and not isinstance(raw, str):
                    raise InvalidSizesError(size.value, f"not a whole number: {raw!r}")
            kwargs[size.value] = qty
        return cls(**kwargs)

    def get(self, size: Size | str) -> int:
        return getattr(self, parse_size(size).value)

    def with_quantity(self, size: Size | str, quantity: int) -> Sizes:
        """Return a copy with one bucket replaced."""
        values = self.to_dict()
        values[parse_size(size).value] = quantity
        return Sizes(**values)

    def items(self) -> Iterator[tuple[Size, int]]:
        for size in SIZE_ORDER:
            yield size, getattr(self, size.value)

    def to_dict(self) -> dict[str, int]:
        return {size.value: getattr(self, size.value) for size in SIZE_ORDER}

    @property
    def total(self) -> int:
        return self.xs + self.s + self.m + self.l + self.xl + self.xxl

    @property
    def is_zero(self) -> bool:
        return self.total == 0

    def __add__(self, other: Sizes) -> Sizes:
        if not isinstance(other, Sizes):
            return NotImplemented
        return Sizes(
            xs=self.xs + other.xs,
            s=self.s + other.s,
            m=self.m + other.m,
            l=self.l + other.l,
            xl=self.xl + other.xl,
            xxl=self.xxl + other.xxl,
        )

    def __str__(self) -> str:
        return " ".join(f"{size.value}={qty}" for size, qty in self.items() if qty)


def sum_sizes(vectors: Any) -> Sizes:
    """Sum an iterable of ``Sizes`` (empty -> zero)."""
    total = Sizes()
    for vector in vectors:
        total = total + vector
    return total
