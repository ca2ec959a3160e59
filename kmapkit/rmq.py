"""Balanced search tree answering range-minimum queries over ordered items."""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterator, Optional, Tuple, TypeVar

T = TypeVar("T")


class _Node:
    __slots__ = ("item", "k", "v", "left", "right", "height", "size", "smin")

    def __init__(self, item: Any, k: Any, v: Any) -> None:
        self.item = item
        self.k = k
        self.v = v
        self.left: Optional[_Node] = None
        self.right: Optional[_Node] = None
        self.height = 1
        self.size = 1
        self.smin: _Node = self


def _height(n: Optional[_Node]) -> int:
    return n.height if n is not None else 0


def _size(n: Optional[_Node]) -> int:
    return n.size if n is not None else 0


def _fix(n: _Node) -> None:
    left, right = n.left, n.right
    n.height = 1 + max(_height(left), _height(right))
    n.size = 1 + _size(left) + _size(right)
    best = n if left is None or n.v < left.smin.v else left.smin
    if right is not None and not best.v < right.smin.v:
        best = right.smin
    n.smin = best


def _rotate_right(n: _Node) -> _Node:
    pivot = n.left
    assert pivot is not None
    n.left = pivot.right
    pivot.right = n
    _fix(n)
    _fix(pivot)
    return pivot


def _rotate_left(n: _Node) -> _Node:
    pivot = n.right
    assert pivot is not None
    n.right = pivot.left
    pivot.left = n
    _fix(n)
    _fix(pivot)
    return pivot


def _balance(n: _Node) -> _Node:
    _fix(n)
    diff = _height(n.left) - _height(n.right)
    if diff > 1:
        assert n.left is not None
        if _height(n.left.left) < _height(n.left.right):
            n.left = _rotate_left(n.left)
        return _rotate_right(n)
    if diff < -1:
        assert n.right is not None
        if _height(n.right.right) < _height(n.right.left):
            n.right = _rotate_right(n.right)
        return _rotate_left(n)
    return n


def _insert(n: Optional[_Node], node: _Node) -> _Node:
    if n is None:
        return node
    if node.k < n.k:
        n.left = _insert(n.left, node)
    else:
        n.right = _insert(n.right, node)
    return _balance(n)


def _pop_min(n: _Node) -> Tuple[Optional[_Node], _Node]:
    if n.left is None:
        return n.right, n
    n.left, smallest = _pop_min(n.left)
    return _balance(n), smallest


def _delete(n: _Node, k: Any) -> Tuple[Optional[_Node], _Node]:
    if k < n.k:
        assert n.left is not None
        n.left, removed = _delete(n.left, k)
        return _balance(n), removed
    if n.k < k:
        assert n.right is not None
        n.right, removed = _delete(n.right, k)
        return _balance(n), removed
    if n.left is None:
        return n.right, n
    if n.right is None:
        return n.left, n
    new_right, succ = _pop_min(n.right)
    succ.left = n.left
    succ.right = new_right
    return _balance(succ), n


def _better(a: Optional[_Node], b: Optional[_Node]) -> Optional[_Node]:
    if a is None:
        return b
    if b is None:
        return a
    return b if b.v < a.v else a


class RMQTree(Generic[T]):
    """An AVL tree ordered by ``key`` that finds the item of smallest ``value``
    among all items whose keys lie in a closed interval.

    Items with equal keys are treated as the same item: inserting a second
    one leaves the tree unchanged and returns the item already present.
    When ``key`` or ``value`` is None the item itself is used.
    """

    def __init__(
        self,
        key: Optional[Callable[[T], Any]] = None,
        value: Optional[Callable[[T], Any]] = None,
    ) -> None:
        self._key = key
        self._value = value
        self._root: Optional[_Node] = None

    def _key_of(self, item: T) -> Any:
        return item if self._key is None else self._key(item)

    def _value_of(self, item: T) -> Any:
        return item if self._value is None else self._value(item)

    def __len__(self) -> int:
        return _size(self._root)

    def __iter__(self) -> Iterator[T]:
        stack: list[_Node] = []
        p = self._root
        while stack or p is not None:
            while p is not None:
                stack.append(p)
                p = p.left
            p = stack.pop()
            yield p.item
            p = p.right

    def __reversed__(self) -> Iterator[T]:
        stack: list[_Node] = []
        p = self._root
        while stack or p is not None:
            while p is not None:
                stack.append(p)
                p = p.right
            p = stack.pop()
            yield p.item
            p = p.left

    def _locate(self, k: Any) -> Tuple[Optional[_Node], int]:
        """Node with key ``k`` (or None) and the number of keys <= ``k``."""
        p = self._root
        count = 0
        while p is not None:
            if k < p.k:
                p = p.left
            else:
                count += _size(p.left) + 1
                if p.k < k:
                    p = p.right
                else:
                    break
        return p, count

    def insert(self, item: T) -> Tuple[T, int]:
        """Insert ``item`` unless an item with an equal key is present.

        Returns the item now stored under that key and the number of items
        that were already in the tree with keys less than or equal to it.
        """
        k = self._key_of(item)
        found, count = self._locate(k)
        if found is not None:
            return found.item, count
        self._root = _insert(self._root, _Node(item, k, self._value_of(item)))
        return item, count

    def find(self, item: T) -> Tuple[Optional[T], int]:
        """Return the stored item equal to ``item`` (or None) and the number
        of items whose keys are less than or equal to its key."""
        found, count = self._locate(self._key_of(item))
        return (found.item if found is not None else None), count

    def interval(self, item: T) -> Tuple[Optional[T], Optional[T]]:
        """Return the largest item <= ``item`` and the smallest item >= it."""
        k = self._key_of(item)
        lower: Optional[_Node] = None
        upper: Optional[_Node] = None
        p = self._root
        while p is not None:
            if k < p.k:
                upper, p = p, p.left
            elif p.k < k:
                lower, p = p, p.right
            else:
                lower = upper = p
                break
        return (
            lower.item if lower is not None else None,
            upper.item if upper is not None else None,
        )

    def rmq(self, lo: T, hi: T) -> Optional[T]:
        """Item with the smallest value among keys in the closed range
        [key(lo), key(hi)], or None if that range holds no item."""
        lo_k, hi_k = self._key_of(lo), self._key_of(hi)
        p = self._root
        while p is not None:
            if p.k < lo_k:
                p = p.right
            elif hi_k < p.k:
                p = p.left
            else:
                break
        if p is None:
            return None
        best: Optional[_Node] = p
        q = p.left
        while q is not None:  # keys >= lo_k in the left branch
            if q.k < lo_k:
                q = q.right
            else:
                best = _better(best, q)
                if q.right is not None:
                    best = _better(best, q.right.smin)
                q = q.left
        q = p.right
        while q is not None:  # keys <= hi_k in the right branch
            if hi_k < q.k:
                q = q.left
            else:
                best = _better(best, q)
                if q.left is not None:
                    best = _better(best, q.left.smin)
                q = q.right
        assert best is not None
        return best.item

    def erase(self, item: T) -> Tuple[Optional[T], int]:
        """Remove the item equal to ``item``.

        Returns the removed item and the number of items with keys less than
        or equal to it before removal, or ``(None, 0)`` if absent.
        """
        k = self._key_of(item)
        found, count = self._locate(k)
        if found is None:
            return None, 0
        assert self._root is not None
        self._root, removed = _delete(self._root, k)
        removed.left = removed.right = None
        return removed.item, count

    def erase_first(self) -> Optional[T]:
        """Remove and return the smallest item, or None if the tree is empty."""
        if self._root is None:
            return None
        self._root, removed = _pop_min(self._root)
        removed.left = removed.right = None
        return removed.item

    def iter_from(self, item: T) -> Iterator[T]:
        """Iterate in order over the items whose keys are >= key(item)."""
        k = self._key_of(item)
        stack: list[_Node] = []
        p = self._root
        while p is not None:
            if p.k < k:
                p = p.right
            else:
                stack.append(p)
                p = p.left
        while stack:
            p = stack.pop()
            yield p.item
            q = p.right
            while q is not None:
                stack.append(q)
                q = q.left