"""Group and order identifier construction."""

from __future__ import annotations

import re
from datetime import date
from uuid import uuid4

UNASSIGNED = "UNASSIGNED"

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9çğıöşü]")

# str.lower() maps "I" to "i" and "İ" to "i" + combining dot; Turkish
# casing maps them to "ı" and "i".
_TURKISH_LOWER = str.maketrans({"I": "ı", "İ": "i"})


def slugify(text: str | None, locale: str = "tr") -> str:
    """Lowercase, strip whitespace and keep only [a-z0-9çğıöşü]."""
    if not text:
        return ""
    if locale == "tr":
        text = text.translate(_TURKISH_LOWER)
    lowered = text.lower()
    return _DISALLOWED.sub("", _WHITESPACE.sub("", lowered))


def make_group_id(created: date, product_name: str, color: str, locale: str = "tr") -> str:
    """``DDMM`` + product slug + color slug.

    ``(2025-03-05, "T-SHIRT", "SİYAH")`` gives ``0503tshırtsiyah`` under
    Turkish casing and ``0503tshirtsiyah`` with ``locale="default"``.
    """
    prefix = f"{created.day:02d}{created.month:02d}"
    return f"{prefix}{slugify(product_name, locale)}{slugify(color, locale)}"


def make_order_id(group_id: str, producer: str | None) -> str:
    """Unique order row id for one producer's share of a group."""
    return f"{group_id}-{producer or UNASSIGNED}-{uuid4()}"


def producer_or_none(name: str | None) -> str | None:
    """Map the UNASSIGNED sentinel (and blanks) to None."""
    if name is None:
        return None
    name = name.strip()
    if not name or name == UNASSIGNED:
        return None
    return name
