"""Shared pieces of the banded extension aligners: flags, results, CIGAR
building, backtracking and Z-drop."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from kmapkit.records import CigarOp

NEG_INF = -0x40000000


class KswFlag(enum.IntFlag):
    """Alignment behaviour bits."""

    SCORE_ONLY = 0x01
    RIGHT = 0x02
    GENERIC_SC = 0x04
    APPROX_MAX = 0x08
    APPROX_DROP = 0x10
    EXTZ_ONLY = 0x40
    REV_CIGAR = 0x80
    SPLICE_FOR = 0x100
    SPLICE_REV = 0x200
    SPLICE_FLANK = 0x400
    SPLICE_CMPLX = 0x800


@dataclass
class ExtzResult:
    """Scores, extension end points and CIGAR of one extension alignment."""

    max: int = 0
    zdropped: bool = False
    max_q: int = -1
    max_t: int = -1
    mqe: int = NEG_INF
    mqe_t: int = -1
    mte: int = NEG_INF
    mte_q: int = -1
    score: int = NEG_INF
    reach_end: bool = False
    cigar: List[int] = field(default_factory=list)

    def reset(self) -> None:
        """Return to the state before any alignment was made."""
        self.max_q = self.max_t = self.mqe_t = self.mte_q = -1
        self.max = 0
        self.score = self.mqe = self.mte = NEG_INF
        self.cigar = []
        self.zdropped = False
        self.reach_end = False


def push_cigar(cigar: List[int], op: int, length: int) -> None:
    """Append ``length`` of ``op``, merging with the last operation if equal."""
    if cigar and (cigar[-1] & 0xF) == op:
        cigar[-1] += length << 4
    else:
        cigar.append((length << 4) | int(op))


def backtrack(
    is_rot: bool,
    is_rev: bool,
    min_intron_len: int,
    p: Sequence[int],
    off: Sequence[int],
    off_end: Optional[Sequence[int]],
    n_col: int,
    i0: int,
    j0: int,
) -> List[int]:
    """Trace back through a direction matrix from target ``i0``, query ``j0``.

    Each byte of ``p`` holds in bits 0-2 the state reaching the maximum and in
    bits 3-6 whether each gap state continues. Rows are anti-diagonals when
    ``is_rot`` is true. Returns the BAM-encoded CIGAR, reversed into reading
    order unless ``is_rev`` is set.
    """
    cigar: List[int] = []
    i, j, state = i0, j0, 0
    while i >= 0 and j >= 0:
        force_state = -1
        if is_rot:
            r = i + j
            if i < off[r]:
                force_state = 2
            if off_end is not None and i > off_end[r]:
                force_state = 1
            tmp = p[r * n_col + i - off[r]] if force_state < 0 else 0
        else:
            if j < off[i]:
                force_state = 2
            if off_end is not None and j > off_end[i]:
                force_state = 1
            tmp = p[i * n_col + j - off[i]] if force_state < 0 else 0
        if state == 0:
            state = tmp & 7
        elif not (tmp >> (state + 2)) & 1:
            state = 0
        if state == 0:
            state = tmp & 7
        if force_state >= 0:
            state = force_state
        if state == 0:
            push_cigar(cigar, CigarOp.MATCH, 1)
            i -= 1
            j -= 1
        elif state == 1 or (state == 3 and min_intron_len <= 0):
            push_cigar(cigar, CigarOp.DEL, 1)
            i -= 1
        elif state == 3:
            push_cigar(cigar, CigarOp.N_SKIP, 1)
            i -= 1
        else:
            push_cigar(cigar, CigarOp.INS, 1)
            j -= 1
    if i >= 0:
        op = CigarOp.N_SKIP if 0 < min_intron_len <= i else CigarOp.DEL
        push_cigar(cigar, op, i + 1)
    if j >= 0:
        push_cigar(cigar, CigarOp.INS, j + 1)
    if not is_rev:
        cigar.reverse()
    return cigar


def apply_zdrop(ez: ExtzResult, is_rot: bool, h: int, a: int, b: int, zdrop: int, e: int) -> bool:
    """Record a new maximum or report whether the score dropped too far.

    With ``is_rot`` the cell is (anti-diagonal ``a``, target ``b``), otherwise
    (target ``a``, query ``b``). Returns True and sets ``ez.zdropped`` when
    the extension should stop.
    """
    if is_rot:
        r, t = a, b
    else:
        r, t = a + b, a
    if h > ez.max:
        ez.max, ez.max_t, ez.max_q = h, t, r - t
    elif t >= ez.max_t and r - t >= ez.max_q:
        tl = t - ez.max_t
        ql = (r - t) - ez.max_q
        gap = abs(tl - ql)
        if zdrop >= 0 and ez.max - h > zdrop + gap * e:
            ez.zdropped = True
            return True
    return False