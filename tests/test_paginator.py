from __future__ import annotations

import pytest

from catalog.paginator import DEFAULT_LIMIT, DEFAULT_OFFSET, Page, coerce_limit, coerce_offset, paginate


def test_full_first_page_reports_more():
    seq = list(range(1, 26))
    page = paginate(seq, 0, 20)
    assert page.items == list(range(1, 21))
    assert page.has_more is True


def test_partial_last_page_reports_no_more():
    seq = list(range(1, 26))
    page = paginate(seq, 20, 20)
    assert page.items == [21, 22, 23, 24, 25]
    assert page.has_more is False


def test_full_last_page_still_reports_more():
    page = paginate(list(range(1, 41)), 20, 20)
    assert len(page.items) == 20
    assert page.has_more is True


def test_offset_past_end_is_empty_page():
    page = paginate([1, 2, 3], 10, 5)
    assert page == Page(items=[], has_more=False)


def test_zero_limit_is_empty_but_full():
    page = paginate([1, 2, 3], 0, 0)
    assert page.items == []
    assert page.has_more is True


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, DEFAULT_OFFSET),
        ("", DEFAULT_OFFSET),
        ("abc", DEFAULT_OFFSET),
        ("-5", DEFAULT_OFFSET),
        ("40", 40),
        ("15abc", 15),
        (" 7", 7),
        (12, 12),
        (3.9, 3),
        (float("nan"), DEFAULT_OFFSET),
        (True, DEFAULT_OFFSET),
    ],
)
def test_coerce_offset(raw, expected):
    assert coerce_offset(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, DEFAULT_LIMIT),
        ("x", DEFAULT_LIMIT),
        ("-1", DEFAULT_LIMIT),
        ("0", 0),
        ("50", 50),
        ("1e3", 1),
    ],
)
def test_coerce_limit(raw, expected):
    assert coerce_limit(raw) == expected


def test_coerce_limit_clamps_to_maximum():
    assert coerce_limit("5000", max_limit=1000) == 1000
    assert coerce_limit("999", max_limit=1000) == 999
    assert coerce_limit("junk", max_limit=10) == 10


def test_coerce_offset_does_not_read_hex_prefix():
    assert coerce_offset("0x10") == 0
