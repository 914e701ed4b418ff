from __future__ import annotations

from collections.abc import Iterable, Sequence


def merge(candidates: Sequence[int], saved_order: Iterable[int]) -> list[int]:
    """Overlay a saved ordering on top of ascending candidates.

    Saved identifiers that are still candidates come first, in saved order;
    the remaining candidates follow in their own order.  Saved identifiers
    outside the candidate set are skipped.
    """
    saved = list(saved_order)
    if not saved:
        return list(candidates)

    members = set(candidates)
    head: list[int] = []
    emitted: set[int] = set()
    for identifier in saved:
        if identifier in members and identifier not in emitted:
            head.append(identifier)
            emitted.add(identifier)

    tail = [identifier for identifier in candidates if identifier not in emitted]
    return head + tail
