from __future__ import annotations

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

DEFAULT_OFFSET = 0
DEFAULT_LIMIT = 20

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class Page:
    items: list[int] = field(default_factory=list)
    has_more: bool = False


def _parse_int_prefix(raw: object) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return None
    return int(match.group(1))


def coerce_offset(raw: object) -> int:
    value = _parse_int_prefix(raw)
    if value is None or value < 0:
        return DEFAULT_OFFSET
    return value


def coerce_limit(raw: object, *, max_limit: int | None = None) -> int:
    value = _parse_int_prefix(raw)
    if value is None or value < 0:
        value = DEFAULT_LIMIT
    if max_limit is not None and value > max_limit:
        return max_limit
    return value


def paginate(merged: Sequence[int], offset: int, limit: int) -> Page:
    """Slice ``[offset, offset + limit)`` out of ``merged``.

    ``has_more`` only reports that the page came back full; a full last page
    still says ``True`` and ``limit == 0`` always does.
    """
    items = list(merged[offset : offset + limit])
    return Page(items=items, has_more=len(items) == limit)
