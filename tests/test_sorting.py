from collections import Counter

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kmapkit.sorting import heap_make, ksmall, radix_sort


@given(st.lists(st.integers(-1000, 1000), min_size=1, max_size=200), st.data())
def test_ksmall_matches_sorted(values, data):
    k = data.draw(st.integers(0, len(values) - 1))
    work = list(values)
    assert ksmall(work, k) == sorted(values)[k]
    assert Counter(work) == Counter(values)


def test_ksmall_median_of_small_list():
    assert ksmall([5, 1, 4, 2, 3], 2) == 3
    assert ksmall([7], 0) == 7


def test_ksmall_out_of_range():
    with pytest.raises(IndexError):
        ksmall([1, 2, 3], 3)
    with pytest.raises(IndexError):
        ksmall([], 0)


@given(st.lists(st.integers(-500, 500), max_size=200))
def test_heap_make_builds_max_heap(values):
    work = list(values)
    heap_make(work)
    assert Counter(work) == Counter(values)
    for i in range(1, len(work)):
        assert work[(i - 1) // 2] >= work[i]
    if work:
        assert work[0] == max(values)


@given(st.lists(st.integers(0, 2**64 - 1), max_size=400))
def test_radix_sort_64bit(values):
    work = list(values)
    radix_sort(work)
    assert work == sorted(values)


@given(st.lists(st.integers(0, 255), max_size=300))
def test_radix_sort_one_byte(values):
    work = list(values)
    radix_sort(work, key_bytes=1)
    assert work == sorted(values)


def test_radix_sort_with_key_keeps_pairs():
    pairs = [((i * 7919) % 1000, i) for i in range(500)]
    work = list(pairs)
    radix_sort(work, key=lambda p: p[0], key_bytes=2)
    assert [p[0] for p in work] == sorted(p[0] for p in pairs)
    assert sorted(work) == sorted(pairs)


def test_radix_sort_rejects_bad_keys():
    with pytest.raises(ValueError):
        radix_sort([1, -2, 3])
    with pytest.raises(ValueError):
        radix_sort([256], key_bytes=1)