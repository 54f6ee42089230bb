"""
Change detection for the analysis cache.

The hash is a 32-bit polynomial rolling hash (``h * 31 + unit``) over UTF-16
code units, rendered in base 36 with a leading minus for negative values, so
hashes stored by earlier deployments stay comparable.
"""

from __future__ import annotations

from typing import Iterable

from .models import FeedbackItem

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _utf16_units(text: str) -> Iterable[int]:
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_DIGITS[rem])
    return sign + "".join(reversed(digits))


def rolling_hash(text: str) -> str:
    h = 0
    for unit in _utf16_units(text):
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return _to_base36(h)


def feedback_hash(items: Iterable[FeedbackItem]) -> str:
    """Hash of the ``id:content`` pairs of ``items``, independent of their order."""
    parts = sorted((f"{item.id}:{item.content}" for item in items), key=lambda s: s.encode("utf-16-be"))
    return rolling_hash("|".join(parts))
