"""Selection, heap construction and radix sorting on mutable sequences."""

from __future__ import annotations

from typing import Any, Callable, MutableSequence, Optional

_RS_MIN_SIZE = 64
_RS_MAX_BITS = 8


def ksmall(values: MutableSequence[Any], k: int) -> Any:
    """Return the k-th smallest element (0-based), partially reordering
    ``values`` in place."""
    a = values
    n = len(a)
    if not 0 <= k < n:
        raise IndexError(f"k={k} out of range for {n} values")
    low, high = 0, n - 1
    while True:
        if high <= low:
            return a[k]
        if high == low + 1:
            if a[high] < a[low]:
                a[low], a[high] = a[high], a[low]
            return a[k]
        mid = low + (high - low) // 2
        if a[high] < a[mid]:
            a[mid], a[high] = a[high], a[mid]
        if a[high] < a[low]:
            a[low], a[high] = a[high], a[low]
        if a[low] < a[mid]:
            a[mid], a[low] = a[low], a[mid]
        a[mid], a[low + 1] = a[low + 1], a[mid]
        ll, hh = low + 1, high
        while True:
            ll += 1
            while a[ll] < a[low]:
                ll += 1
            hh -= 1
            while a[low] < a[hh]:
                hh -= 1
            if hh < ll:
                break
            a[ll], a[hh] = a[hh], a[ll]
        a[low], a[hh] = a[hh], a[low]
        if hh <= k:
            low = ll
        if hh >= k:
            high = hh - 1


def _heap_down(a: MutableSequence[Any], i: int, n: int) -> None:
    tmp = a[i]
    k = i
    while (k := 2 * k + 1) < n:
        if k != n - 1 and a[k] < a[k + 1]:
            k += 1
        if a[k] < tmp:
            break
        a[i] = a[k]
        i = k
    a[i] = tmp


def heap_make(values: MutableSequence[Any]) -> None:
    """Rearrange ``values`` in place into a max-heap."""
    n = len(values)
    for i in reversed(range(n // 2)):
        _heap_down(values, i, n)


def _insertsort(a: MutableSequence[Any], beg: int, end: int, key: Callable[[Any], int]) -> None:
    for i in range(beg + 1, end):
        if key(a[i]) < key(a[i - 1]):
            tmp = a[i]
            tk = key(tmp)
            j = i
            while j > beg and tk < key(a[j - 1]):
                a[j] = a[j - 1]
                j -= 1
            a[j] = tmp


def _rs_sort(a: MutableSequence[Any], beg: int, end: int, n_bits: int, s: int,
             key: Callable[[Any], int]) -> None:
    size = 1 << n_bits
    m = size - 1
    starts = [beg] * size
    ends = [beg] * size
    for i in range(beg, end):
        ends[(key(a[i]) >> s) & m] += 1
    for k in range(1, size):
        ends[k] += ends[k - 1] - beg
        starts[k] = ends[k - 1]
    k = 0
    while k != size:
        if starts[k] != ends[k]:
            l = (key(a[starts[k]]) >> s) & m
            if l != k:
                tmp = a[starts[k]]
                while True:
                    tmp, a[starts[l]] = a[starts[l]], tmp
                    starts[l] += 1
                    l = (key(tmp) >> s) & m
                    if l == k:
                        break
                a[starts[k]] = tmp
            starts[k] += 1
        else:
            k += 1
    starts[0] = beg
    for k in range(1, size):
        starts[k] = ends[k - 1]
    if s:
        s = s - n_bits if s > n_bits else 0
        for b, e in zip(starts, ends):
            if e - b > _RS_MIN_SIZE:
                _rs_sort(a, b, e, n_bits, s, key)
            elif e - b > 1:
                _insertsort(a, b, e, key)


def radix_sort(items: MutableSequence[Any], key: Optional[Callable[[Any], int]] = None,
               key_bytes: int = 8) -> None:
    """Sort ``items`` in place by an unsigned integer key of ``key_bytes`` bytes."""
    if key_bytes < 1:
        raise ValueError("key_bytes must be positive")
    keyf: Callable[[Any], int] = key if key is not None else (lambda x: x)
    limit = 1 << (8 * key_bytes)
    for item in items:
        kv = keyf(item)
        if not 0 <= kv < limit:
            raise ValueError(f"key {kv} does not fit in {key_bytes} unsigned bytes")
    n = len(items)
    if n <= _RS_MIN_SIZE:
        _insertsort(items, 0, n, keyf)
    else:
        _rs_sort(items, 0, n, _RS_MAX_BITS, (key_bytes - 1) * _RS_MAX_BITS, keyf)