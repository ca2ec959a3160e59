import math

import pytest
from hypothesis import given, strategies as st

from kmapkit.seqpack import mg_log2, seq4_get, seq4_set


def test_first_slot_low_nibble():
    packed = [0]
    seq4_set(packed, 0, 5)
    assert packed == [5]


def test_last_slot_high_nibble():
    packed = [0]
    seq4_set(packed, 7, 0xF)
    assert packed[0] == 0xF0000000


def test_second_word_used_from_position_eight():
    packed = [0, 0]
    seq4_set(packed, 8, 3)
    assert packed[0] == 0
    assert seq4_get(packed, 8) == 3


@given(st.lists(st.integers(min_value=0, max_value=15), min_size=1, max_size=100))
def test_round_trip(codes):
    packed = [0] * ((len(codes) + 7) // 8)
    for i, c in enumerate(codes):
        seq4_set(packed, i, c)
    assert [seq4_get(packed, i) for i in range(len(codes))] == codes
    assert all(0 <= w <= 0xFFFFFFFF for w in packed)


def test_negative_position_rejected():
    with pytest.raises(IndexError):
        seq4_set([0], -1, 1)
    with pytest.raises(IndexError):
        seq4_get([0], -1)


@pytest.mark.parametrize("k", range(1, 20))
def test_powers_of_two(k):
    assert mg_log2(float(2 ** k)) == pytest.approx(k, abs=0.01)


@given(st.floats(min_value=2.0, max_value=1e30, allow_nan=False))
def test_close_to_exact_log2(x):
    assert abs(mg_log2(x) - math.log2(x)) < 0.01