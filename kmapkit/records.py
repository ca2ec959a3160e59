"""Mapping flags, CIGAR operators and alignment records."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

VERSION = "2.26-r1175"
INDEX_MAGIC = b"MMI\x02"
MAX_SEG = 255
CIGAR_CHARS = "MIDNSHP=XB"


class MapFlag(enum.IntFlag):
    """Mapping option bits."""

    NO_DIAG = 0x001
    NO_DUAL = 0x002
    CIGAR = 0x004
    OUT_SAM = 0x008
    NO_QUAL = 0x010
    OUT_CG = 0x020
    OUT_CS = 0x040
    SPLICE = 0x080
    SPLICE_FOR = 0x100
    SPLICE_REV = 0x200
    NO_LJOIN = 0x400
    OUT_CS_LONG = 0x800
    SR = 0x1000
    FRAG_MODE = 0x2000
    NO_PRINT_2ND = 0x4000
    TWO_IO_THREADS = 0x8000
    LONG_CIGAR = 0x10000
    INDEPEND_SEG = 0x20000
    SPLICE_FLANK = 0x40000
    SOFTCLIP = 0x80000
    FOR_ONLY = 0x100000
    REV_ONLY = 0x200000
    HEAP_SORT = 0x400000
    ALL_CHAINS = 0x800000
    OUT_MD = 0x1000000
    COPY_COMMENT = 0x2000000
    EQX = 0x4000000
    PAF_NO_HIT = 0x8000000
    NO_END_FLT = 0x10000000
    HARD_MLEVEL = 0x20000000
    SAM_HIT_ONLY = 0x40000000
    RMQ = 0x80000000
    QSTRAND = 0x100000000
    NO_INV = 0x200000000
    NO_HASH_NAME = 0x400000000
    SPLICE_OLD = 0x800000000
    SECONDARY_SEQ = 0x1000000000
    ZMW_HIT_ONLY = 0x2000000000


class IndexFlag(enum.IntFlag):
    """Index construction bits."""

    HPC = 0x1
    NO_SEQ = 0x2
    NO_NAME = 0x4


class CigarOp(enum.IntEnum):
    """CIGAR operators in BAM numbering."""

    MATCH = 0
    INS = 1
    DEL = 2
    N_SKIP = 3
    SOFTCLIP = 4
    HARDCLIP = 5
    PADDING = 6
    EQ_MATCH = 7
    X_MISMATCH = 8

    @property
    def char(self) -> str:
        """The single-letter symbol of this operator."""
        return CIGAR_CHARS[self.value]


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name}={value} outside [{low}, {high}]")


@dataclass
class Region:
    """One alignment of a query against a reference sequence.

    ``cigar`` holds BAM-encoded operations (length << 4 | op).
    """

    id: int = 0
    cnt: int = 0
    rid: int = 0
    score: int = 0
    qs: int = 0
    qe: int = 0
    rs: int = 0
    re: int = 0
    parent: int = 0
    subsc: int = 0
    as_: int = 0
    mlen: int = 0
    blen: int = 0
    n_sub: int = 0
    score0: int = 0
    mapq: int = 0
    split: int = 0
    rev: bool = False
    inv: bool = False
    sam_pri: bool = False
    proper_frag: bool = False
    pe_thru: bool = False
    seg_split: bool = False
    seg_id: int = 0
    split_inv: bool = False
    is_alt: bool = False
    strand_retained: bool = False
    hash: int = 0
    div: float = 0.0
    dp_score: int = 0
    dp_max: int = 0
    dp_max2: int = 0
    n_ambi: int = 0
    trans_strand: int = 0
    cigar: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_range("mapq", self.mapq, 0, 255)
        _check_range("split", self.split, 0, 3)
        _check_range("seg_id", self.seg_id, 0, 255)
        _check_range("trans_strand", self.trans_strand, 0, 2)
        _check_range("n_ambi", self.n_ambi, 0, (1 << 30) - 1)

    @property
    def is_primary(self) -> bool:
        return self.id == self.parent


def _decode_cigar(cigar: Iterable[int]) -> List[Tuple[int, int]]:
    ops = []
    for word in cigar:
        op = word & 0xF
        if op >= len(CIGAR_CHARS):
            raise ValueError(f"unknown CIGAR operator {op}")
        ops.append((word >> 4, op))
    return ops


def cigar_string(cigar: Iterable[int]) -> str:
    """Render BAM-encoded CIGAR operations as text such as ``10M2I``."""
    return "".join(f"{length}{CIGAR_CHARS[op]}" for length, op in _decode_cigar(cigar))


@dataclass(frozen=True)
class Hit:
    """A user-facing view of an alignment."""

    ctg: str
    ctg_len: int
    r_st: int
    r_en: int
    q_st: int
    q_en: int
    strand: int
    mapq: int
    mlen: int
    blen: int
    NM: int
    trans_strand: int
    is_primary: bool
    seg_id: int
    cigar: Tuple[Tuple[int, int], ...]

    @classmethod
    def from_region(cls, region: Region, ctg_name: str, ctg_len: int) -> "Hit":
        """Build a hit from an alignment on the named reference sequence."""
        ts = {1: 1, 2: -1}.get(region.trans_strand, 0)
        return cls(
            ctg=ctg_name,
            ctg_len=ctg_len,
            r_st=region.rs,
            r_en=region.re,
            q_st=region.qs,
            q_en=region.qe,
            strand=-1 if region.rev else 1,
            mapq=region.mapq,
            mlen=region.mlen,
            blen=region.blen,
            NM=region.blen - region.mlen + region.n_ambi,
            trans_strand=ts,
            is_primary=region.id == region.parent,
            seg_id=region.seg_id,
            cigar=tuple(_decode_cigar(region.cigar)),
        )

    @property
    def cigar_str(self) -> str:
        return "".join(f"{length}{CIGAR_CHARS[op]}" for length, op in self.cigar)