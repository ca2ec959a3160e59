import pytest
from hypothesis import given, strategies as st

from kmapkit.records import (
    CIGAR_CHARS,
    CigarOp,
    Hit,
    Region,
    cigar_string,
)


def _enc(length, op):
    return length << 4 | op


def test_cigar_op_chars_in_strings():
    texts = [cigar_string([_enc(1, op)]) for op in CigarOp]
    assert texts == ["1" + c for c in CIGAR_CHARS[:9]]
    assert cigar_string([_enc(4, CigarOp.EQ_MATCH)]) == "4="


def test_cigar_string_example():
    cigar = [_enc(10, CigarOp.MATCH), _enc(2, CigarOp.INS), _enc(5, CigarOp.DEL)]
    assert cigar_string(cigar) == "10M2I5D"


def test_cigar_string_empty():
    assert cigar_string([]) == ""


def test_cigar_string_rejects_bad_op():
    with pytest.raises(ValueError):
        cigar_string([_enc(3, 12)])


@given(st.lists(st.tuples(st.integers(1, 10000), st.integers(0, 8)), max_size=20))
def test_cigar_string_parts(ops):
    text = cigar_string([_enc(n, o) for n, o in ops])
    expected = "".join(str(n) + CigarOp(o).char for n, o in ops)
    assert text == expected


def test_region_validation():
    with pytest.raises(ValueError):
        Region(mapq=300)
    with pytest.raises(ValueError):
        Region(trans_strand=3)


def test_region_is_primary():
    assert Region(id=2, parent=2).is_primary
    assert not Region(id=2, parent=0).is_primary


def test_hit_from_region_fields():
    cigar = [_enc(50, CigarOp.MATCH), _enc(1, CigarOp.DEL), _enc(49, CigarOp.MATCH)]
    region = Region(id=0, parent=0, rs=100, re=201, qs=0, qe=99, rev=True,
                    mapq=60, mlen=90, blen=101, n_ambi=2, trans_strand=2,
                    seg_id=1, cigar=cigar)
    hit = Hit.from_region(region, "chr1", 5000)
    assert hit.ctg == "chr1"
    assert hit.ctg_len == 5000
    assert (hit.r_st, hit.r_en, hit.q_st, hit.q_en) == (100, 201, 0, 99)
    assert hit.strand == -1
    assert hit.trans_strand == -1
    assert hit.is_primary
    assert hit.seg_id == 1
    assert hit.NM == region.blen - region.mlen + region.n_ambi
    assert hit.cigar == ((50, 2 * 0), (1, 2), (49, 0))
    assert hit.cigar_str == cigar_string(cigar)


@pytest.mark.parametrize("ts,expected", [(0, 0), (1, 1), (2, -1)])
def test_hit_trans_strand(ts, expected):
    hit = Hit.from_region(Region(trans_strand=ts), "c", 1)
    assert hit.trans_strand == expected


def test_hit_forward_secondary():
    hit = Hit.from_region(Region(id=3, parent=1, rev=False), "c", 10)
    assert hit.strand == 1
    assert hit.is_primary is False