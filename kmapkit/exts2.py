"""Splice-aware extension alignment over anti-diagonals with 8-bit
difference scores and an optional long-gap (intron) state."""

from __future__ import annotations

from itertools import islice
from typing import List, Optional, Sequence, Tuple

from kmapkit.ksw import NEG_INF, ExtzResult, KswFlag, apply_zdrop, backtrack

_SP0 = (8, 15, 21, 30)

# Splice-site classes keyed by (reverse CIGAR, strand) and the two bases at
# the site. An entry that is a set marks a canonical site: its class is -1 when
# the flanking base is in the set and 0 otherwise.
_DONOR = {
    (False, "for"): {(2, 3): frozenset({0, 2}), (2, 1): 1, (0, 3): 2},
    (False, "rev"): {(1, 3): frozenset({0, 2}), (2, 3): 2},
    (True, "for"): {(2, 0): frozenset({1, 3}), (1, 0): 2},
    (True, "rev"): {(1, 0): frozenset({1, 3}), (1, 2): 1, (3, 0): 2},
}
_ACCEPTOR = {
    (False, "for"): {(0, 2): frozenset({1, 3}), (0, 1): 2},
    (False, "rev"): {(0, 1): frozenset({1, 3}), (2, 1): 1, (0, 3): 2},
    (True, "for"): {(3, 2): frozenset({0, 2}), (1, 2): 1, (3, 0): 2},
    (True, "rev"): {(3, 1): frozenset({0, 2}), (3, 2): 2},
}


def _s8(x: int) -> int:
    """Wrap to a signed 8-bit integer."""
    return ((x + 128) & 0xFF) - 128


def _check_strand_flags(flag: int) -> None:
    if flag & KswFlag.SPLICE_FOR and flag & KswFlag.SPLICE_REV:
        raise ValueError("SPLICE_FOR and SPLICE_REV cannot both be set")


def _splice_penalties(flag: int, noncan: int) -> List[int]:
    if flag & KswFlag.SPLICE_CMPLX:
        return [int(v / 3.0 + 0.499) for v in _SP0]
    first = int(noncan / 2) if flag & KswFlag.SPLICE_FLANK else 0
    return [first, noncan, noncan, noncan]


def _site_class(table: dict, pair: Tuple[int, int], flank: int) -> int:
    entry = table.get(pair, 3)
    if isinstance(entry, frozenset):
        return -1 if flank in entry else 0
    return entry


def splice_scores(
    target: Sequence[int],
    flag: int,
    noncan: int,
    junc: Optional[Sequence[int]] = None,
    junc_bonus: int = 0,
) -> Tuple[List[int], List[int]]:
    """Per-position donor and acceptor scores for a 0/1/2/3-encoded target.

    Without a splice flag both lists are all zero. ``junc`` holds per-position
    annotation bits (1/2 forward donor/acceptor, 8/4 reverse) that earn
    ``junc_bonus``. Scores are signed 8-bit values.
    """
    _check_strand_flags(flag)
    tlen = len(target)
    rev = bool(flag & KswFlag.REV_CIGAR)
    if flag & (KswFlag.SPLICE_FOR | KswFlag.SPLICE_REV):
        sp = _splice_penalties(flag, noncan)
        donor = [_s8(-sp[3])] * tlen
        acceptor = [_s8(-sp[3])] * tlen
        strand = "for" if flag & KswFlag.SPLICE_FOR else "rev"
        dtab, atab = _DONOR[(rev, strand)], _ACCEPTOR[(rev, strand)]
        triples = zip(target[1:], target[2:], target[3:])
        for t, (b1, b2, b3) in enumerate(islice(triples, max(tlen - 4, 0))):
            z = _site_class(dtab, (b1, b2), b3)
            donor[t] = 0 if z < 0 else _s8(-sp[z])
        for t, (a0, a1, a2) in enumerate(zip(target, target[1:], target[2:]), start=2):
            z = _site_class(atab, (a1, a2), a0)
            acceptor[t] = 0 if z < 0 else _s8(-sp[z])
    else:
        donor = [0] * tlen
        acceptor = [0] * tlen

    if junc is not None:
        fwd = bool(flag & KswFlag.SPLICE_FOR)
        rvs = bool(flag & KswFlag.SPLICE_REV)
        d_for, d_rev, a_for, a_rev = (2, 4, 1, 8) if rev else (1, 8, 2, 4)
        for t, bits in enumerate(islice(junc[1:], max(tlen - 1, 0))):
            if (fwd and bits & d_for) or (rvs and bits & d_rev):
                donor[t] = _s8(donor[t] + junc_bonus)
        for t, bits in enumerate(islice(junc, tlen)):
            if (fwd and bits & a_for) or (rvs and bits & a_rev):
                acceptor[t] = _s8(acceptor[t] + junc_bonus)
    return donor, acceptor


def exts2(
    query: Sequence[int],
    target: Sequence[int],
    m: int,
    mat: Sequence[int],
    q: int,
    e: int,
    q2: int,
    noncan: int = 0,
    zdrop: int = -1,
    junc_bonus: int = 0,
    flag: int = 0,
    junc: Optional[Sequence[int]] = None,
) -> ExtzResult:
    """Align ``query`` against ``target`` allowing long deletions (introns).

    Sequences hold residue codes below ``m``; code ``m - 1`` is a wildcard
    unless GENERIC_SC is set. ``mat`` is the m*m score matrix, ``q``/``e``
    the short gap open/extension penalties and ``q2`` the constant cost of
    a long gap. Returns scores, extension end points and the CIGAR.
    """
    ez = ExtzResult()
    qlen, tlen = len(query), len(target)
    if m <= 1 or qlen <= 0 or tlen <= 0 or q2 <= q + e:
        return ez
    _check_strand_flags(flag)
    if len(mat) < m * m:
        raise ValueError(f"score matrix needs {m * m} entries, got {len(mat)}")
    if e <= 0:
        raise ValueError("gap extension penalty must be positive")
    with_cigar = not flag & KswFlag.SCORE_ONLY
    approx_max = bool(flag & KswFlag.APPROX_MAX)
    right = bool(flag & KswFlag.RIGHT)
    generic = bool(flag & KswFlag.GENERIC_SC)

    scores = list(mat[: m * m])
    if -min(scores) > 2 * (q + e):
        return ez

    qe = q + e
    long_thres = (q2 - q) // e - 1
    if q2 > q + e + long_thres * e:
        long_thres += 1
    long_diff = long_thres * e - (q2 - q)

    q8, q28, qe8 = _s8(q), _s8(q2), _s8(qe)
    neg_qe, neg_q2 = _s8(-qe), _s8(-q2)
    sc_mch, sc_mis = _s8(mat[0]), _s8(mat[1])
    sc_n = _s8(-e) if mat[m * m - 1] == 0 else _s8(mat[m * m - 1])
    wildcard = (m - 1) & 0xFF

    def score(tb: int, qb: int) -> int:
        if generic:
            return _s8(mat[tb * m + qb])
        if (tb & 0xFF) == wildcard or (qb & 0xFF) == wildcard:
            return sc_n
        return sc_mch if (tb & 0xFF) == (qb & 0xFF) else sc_mis

    def edge(r: int) -> int:
        if r == 0:
            return neg_qe
        if r < long_thres:
            return _s8(-e)
        if r == long_thres:
            return _s8(long_diff)
        return 0

    donor, acceptor = splice_scores(target, flag, noncan, junc, junc_bonus)

    u = [neg_qe] * tlen
    v = [neg_qe] * tlen
    x = [neg_qe] * tlen
    y = [neg_qe] * tlen
    x2 = [neg_q2] * tlen
    H = [NEG_INF] * tlen
    n_rows = qlen + tlen - 1
    n_col = min(qlen, tlen)
    p = bytearray(n_rows * n_col) if with_cigar else bytearray()
    off = [0] * n_rows
    off_end = [0] * n_rows
    h0 = 0
    last_h0_t = 0

    for r in range(n_rows):
        st0 = max(0, r - qlen + 1)
        en0 = min(tlen - 1, r)
        if st0 > 0:
            x1, x21, v1 = x[st0 - 1], x2[st0 - 1], v[st0 - 1]
        else:
            x1, x21, v1 = neg_qe, neg_q2, edge(r)
        if en0 == r:
            y[r] = neg_qe
            u[r] = edge(r)
        off[r], off_end[r] = st0, en0
        base = r * n_col - st0

        for t in range(st0, en0 + 1):
            z = score(target[t], query[r - t])
            xt1, x1 = x1, x[t]
            vt1, v1 = v1, v[t]
            x2t1, x21 = x21, x2[t]
            a = _s8(xt1 + vt1)
            ut = u[t]
            b = _s8(y[t] + ut)
            a2 = _s8(x2t1 + vt1)
            a2a = _s8(a2 + acceptor[t])
            if right:
                d = 0 if z > a else 1
                z = max(z, a)
                d = d if z > b else 2
                z = max(z, b)
                d = d if z > a2a else 3
                z = max(z, a2a)
            else:
                d = 1 if a > z else 0
                z = max(z, a)
                if b > z:
                    d = 2
                z = max(z, b)
                if a2a > z:
                    d = 3
                z = max(z, a2a)
            u[t] = _s8(z - vt1)
            v[t] = _s8(z - ut)
            tmp = _s8(z - q8)
            a = _s8(a - tmp)
            b = _s8(b - tmp)
            a2 = _s8(a2 - _s8(z - q28))
            x[t] = _s8(max(a, 0) - qe8)
            y[t] = _s8(max(b, 0) - qe8)
            x2[t] = _s8(max(a2, donor[t]) - q28)
            if with_cigar:
                if right:
                    d |= (0x08 if a >= 0 else 0) | (0x10 if b >= 0 else 0)
                    d |= 0x20 if a2 >= donor[t] else 0
                else:
                    d |= (0x08 if a > 0 else 0) | (0x10 if b > 0 else 0)
                    d |= 0x20 if a2 > donor[t] else 0
                p[base + t] = d

        if not approx_max:
            if r > 0:
                max_h = H[en0] = H[en0 - 1] + u[en0] if en0 > 0 else H[en0] + v[en0]
                max_t = en0
                en1 = st0 + (en0 - st0) // 4 * 4
                lane_h = [max_h] * 4
                lane_t = [max_t] * 4
                for blk in range(st0, en1, 4):
                    for lane in range(4):
                        pos = blk + lane
                        H[pos] += v[pos]
                        if H[pos] > lane_h[lane]:
                            lane_h[lane], lane_t[lane] = H[pos], blk
                for lane, (hv, tv) in enumerate(zip(lane_h, lane_t)):
                    if max_h < hv:
                        max_h, max_t = hv, tv + lane
                for pos in range(en1, en0):
                    H[pos] += v[pos]
                    if H[pos] > max_h:
                        max_h, max_t = H[pos], pos
            else:
                H[0] = v[0] - qe
                max_h, max_t = H[0], 0
            if en0 == tlen - 1 and H[en0] > ez.mte:
                ez.mte, ez.mte_q = H[en0], r - en0
            if r - st0 == qlen - 1 and H[st0] > ez.mqe:
                ez.mqe, ez.mqe_t = H[st0], st0
            if apply_zdrop(ez, True, max_h, r, max_t, zdrop, 0):
                break
            if r == qlen + tlen - 2 and en0 == tlen - 1:
                ez.score = H[tlen - 1]
        else:
            if r > 0:
                cur_in = st0 <= last_h0_t <= en0
                if cur_in and st0 <= last_h0_t + 1 <= en0:
                    d0, d1 = v[last_h0_t], u[last_h0_t + 1]
                    if d0 > d1:
                        h0 += d0
                    else:
                        h0 += d1
                        last_h0_t += 1
                elif cur_in:
                    h0 += v[last_h0_t]
                else:
                    last_h0_t += 1
                    h0 += u[last_h0_t]
            else:
                h0 = v[0] - qe
                last_h0_t = 0
            if flag & KswFlag.APPROX_DROP and apply_zdrop(ez, True, h0, r, last_h0_t, zdrop, 0):
                break
            if r == qlen + tlen - 2 and en0 == tlen - 1:
                ez.score = h0

    if with_cigar:
        rev_cigar = bool(flag & KswFlag.REV_CIGAR)
        if not ez.zdropped and not flag & KswFlag.EXTZ_ONLY:
            ez.cigar = backtrack(True, rev_cigar, long_thres, p, off, off_end,
                                 n_col, tlen - 1, qlen - 1)
        elif ez.max_t >= 0 and ez.max_q >= 0:
            ez.cigar = backtrack(True, rev_cigar, long_thres, p, off, off_end,
                                 n_col, ez.max_t, ez.max_q)
    return ez