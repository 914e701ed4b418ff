"""Substring search over the virtual item domain.

Identifiers are the integers ``DOMAIN_MIN..DOMAIN_MAX``.  An identifier
matches a query when its decimal text contains the query; the empty query
matches everything.  Matches are produced lazily in ascending order so a
request only pays for the window it asks for.
"""

from __future__ import annotations

from collections.abc import Iterator
from itertools import islice

DOMAIN_MIN = 1
DOMAIN_MAX = 1_000_000
DOMAIN_SIZE = DOMAIN_MAX - DOMAIN_MIN + 1


def normalize_query(query: str | None) -> str:
    if query is None:
        return ""
    return str(query)


def first_candidate(query: str) -> int | None:
    """Return the smallest identifier that could contain ``query``.

    ``None`` means nothing in the domain can match: the query has a
    non-digit character or its smallest host number is past the ceiling.
    """
    if not query:
        return DOMAIN_MIN
    if not query.isdigit() or not query.isascii():
        return None
    # "05" first appears inside 105, "0" inside 10.
    start = int(query) if query[0] != "0" else int("1" + query)
    start = max(DOMAIN_MIN, start)
    if start > DOMAIN_MAX:
        return None
    return start


def iter_matches(query: str | None) -> Iterator[int]:
    q = normalize_query(query)
    start = first_candidate(q)
    if start is None:
        return
    if not q:
        yield from range(start, DOMAIN_MAX + 1)
        return
    for identifier in range(start, DOMAIN_MAX + 1):
        if q in str(identifier):
            yield identifier


def filter_domain(query: str | None, min_count: int) -> list[int]:
    """Materialize at most ``min_count`` ascending matches for ``query``.

    Stops at ``DOMAIN_MAX`` even when fewer matches exist.
    """
    if min_count <= 0:
        return []
    return list(islice(iter_matches(query), min(min_count, DOMAIN_SIZE)))
