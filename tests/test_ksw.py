from hypothesis import given, strategies as st

from kmapkit.ksw import NEG_INF, ExtzResult, apply_zdrop, backtrack, push_cigar
from kmapkit.records import CigarOp, cigar_string


def _lengths(cigar, ops):
    return sum(w >> 4 for w in cigar if (w & 0xF) in ops)


def test_push_cigar_merges_equal_ops():
    cigar = []
    push_cigar(cigar, CigarOp.MATCH, 3)
    push_cigar(cigar, CigarOp.MATCH, 2)
    push_cigar(cigar, CigarOp.INS, 1)
    assert cigar == [(5 << 4) | CigarOp.MATCH, (1 << 4) | CigarOp.INS]
    assert cigar_string(cigar) == "5M1I"


def test_reset_restores_initial_state():
    ez = ExtzResult()
    ez.max, ez.score, ez.max_q, ez.zdropped, ez.cigar = 7, 3, 4, True, [16]
    ez.reset()
    assert ez == ExtzResult()
    assert ez.score == NEG_INF
    assert ez.max_t == -1


def test_backtrack_all_matches():
    p = [0] * 9
    cigar = backtrack(False, False, 0, p, [0, 0, 0], None, 3, 2, 2)
    assert cigar == [(3 << 4) | CigarOp.MATCH]


def test_backtrack_leading_deletion():
    p = [0] * 8
    cigar = backtrack(False, False, 0, p, [0] * 4, None, 2, 3, 1)
    assert cigar == [(2 << 4) | CigarOp.DEL, (2 << 4) | CigarOp.MATCH]


def test_backtrack_rev_keeps_trace_order():
    p = [0] * 8
    cigar = backtrack(False, True, 0, p, [0] * 4, None, 2, 3, 1)
    assert cigar == [(2 << 4) | CigarOp.MATCH, (2 << 4) | CigarOp.DEL]


def test_backtrack_leading_intron():
    p = [0] * 8
    cigar = backtrack(False, False, 1, p, [0] * 4, None, 2, 3, 1)
    assert cigar[0] == (2 << 4) | CigarOp.N_SKIP


def test_backtrack_forced_insertion_outside_band():
    p = [0] * 9
    cigar = backtrack(False, False, 0, p, [0, 0, 3], None, 3, 2, 2)
    assert cigar[-1] == (3 << 4) | CigarOp.INS


def test_backtrack_forced_deletion_past_band_end():
    p = [0] * 9
    cigar = backtrack(False, False, 0, p, [0, 0, 0], [2, 2, 0], 3, 2, 2)
    assert cigar[-1] & 0xF == CigarOp.DEL


def test_backtrack_rotated_all_matches():
    p = [0] * 25
    cigar = backtrack(True, False, 0, p, [0] * 5, None, 5, 2, 2)
    assert cigar == [(3 << 4) | CigarOp.MATCH]


@given(
    st.integers(min_value=0, max_value=6),
    st.integers(min_value=0, max_value=6),
    st.integers(min_value=0, max_value=3),
    st.data(),
)
def test_backtrack_consumes_both_sequences(i0, j0, min_intron, data):
    n_col = j0 + 1
    p = data.draw(st.lists(st.integers(0, 127), min_size=(i0 + 1) * n_col, max_size=(i0 + 1) * n_col))
    cigar = backtrack(False, False, min_intron, p, [0] * (i0 + 1), None, n_col, i0, j0)
    assert _lengths(cigar, {CigarOp.MATCH, CigarOp.INS}) == j0 + 1
    assert _lengths(cigar, {CigarOp.MATCH, CigarOp.DEL, CigarOp.N_SKIP}) == i0 + 1
    ops = [w & 0xF for w in cigar]
    assert all(a != b for a, b in zip(ops, ops[1:]))


def test_zdrop_records_new_max():
    ez = ExtzResult()
    assert apply_zdrop(ez, False, 10, 3, 2, 100, 1) is False
    assert (ez.max, ez.max_t, ez.max_q) == (10, 3, 2)


def test_zdrop_rotated_coordinates():
    ez = ExtzResult()
    apply_zdrop(ez, True, 10, 5, 3, 100, 1)
    assert (ez.max_t, ez.max_q) == (3, 2)


def test_zdrop_triggers_on_large_drop():
    ez = ExtzResult()
    apply_zdrop(ez, False, 10, 3, 2, 50, 1)
    assert apply_zdrop(ez, False, -200, 5, 4, 50, 1) is True
    assert ez.zdropped is True


def test_zdrop_disabled_when_negative():
    ez = ExtzResult()
    apply_zdrop(ez, False, 10, 3, 2, -1, 1)
    assert apply_zdrop(ez, False, -200, 5, 4, -1, 1) is False
    assert ez.zdropped is False


def test_zdrop_ignores_cells_behind_max():
    ez = ExtzResult()
    apply_zdrop(ez, False, 10, 3, 2, 0, 1)
    assert apply_zdrop(ez, False, -200, 1, 4, 0, 1) is False
    assert ez.max == 10