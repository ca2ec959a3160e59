"""4-bit packed nucleotide storage and a fast approximate log2."""

from __future__ import annotations

import struct
from typing import MutableSequence, Sequence

PARENT_UNSET = -1
PARENT_TMP_PRI = -2

DBG_NO_KALLOC = 0x1
DBG_PRINT_QNAME = 0x2
DBG_PRINT_SEED = 0x4
DBG_PRINT_ALN_SEQ = 0x8
DBG_PRINT_CHAIN = 0x10

SEED_LONG_JOIN = 1 << 40
SEED_IGNORE = 1 << 41
SEED_TANDEM = 1 << 42
SEED_SELF = 1 << 43

SEED_SEG_SHIFT = 48
SEED_SEG_MASK = 0xFF << SEED_SEG_SHIFT

_U32 = 0xFFFFFFFF


def _check_index(i: int) -> None:
    if i < 0:
        raise IndexError(f"negative position {i}")


def seq4_set(packed: MutableSequence[int], i: int, c: int) -> None:
    """OR the 4-bit code ``c`` into position ``i`` of a packed 32-bit word array.

    Eight codes share one word; the slot is expected to be zero beforehand.
    """
    _check_index(i)
    word = i >> 3
    packed[word] = (packed[word] | ((c & _U32) << ((i & 7) << 2))) & _U32


def seq4_get(packed: Sequence[int], i: int) -> int:
    """Return the 4-bit code stored at position ``i``."""
    _check_index(i)
    return (packed[i >> 3] >> ((i & 7) << 2)) & 0xF


def _f32(x: float) -> float:
    return struct.unpack("<f", struct.pack("<f", x))[0]


def mg_log2(x: float) -> float:
    """Approximate base-2 logarithm in single precision.

    Accurate to about 0.005 for ``x >= 2``; smaller inputs give poor results.
    """
    bits = struct.unpack("<I", struct.pack("<f", x))[0]
    log_2 = float(((bits >> 23) & 255) - 128)
    bits &= ~(255 << 23) & _U32
    bits = (bits + (127 << 23)) & _U32
    f = struct.unpack("<f", struct.pack("<I", bits))[0]
    log_2 += (-0.34484843 * f + 2.02466578) * f - 0.67487759
    return _f32(log_2)