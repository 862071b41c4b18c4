from __future__ import annotations
import typing
import math
import logging
from functools import reduce
import numpy as np
import pandas as pd
from ..types import *
from ..types import _EXHAUSTED

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable

logger = logging.getLogger(__name__)


# --- successor algorithms ---

def _increment_mask(bits: np.ndarray) -> None:
    """ripple-carry increment of a boolean vector, bit 0 least significant."""
    for i in range(len(bits)):
        bits[i] = not bits[i]
        # a 0 -> 1 flip absorbs the carry
        if bits[i]:
            break


def _next_combination(idx: List[int], n: int) -> bool:
    """
    advance an ascending index list to its lexicographic successor in place.
    returns false when idx was the last combination.
    """
    k = len(idx)
    i = k - 1
    while i >= 0 and idx[i] == n - k + i:
        i -= 1
    if i < 0:
        return False
    idx[i] += 1
    for j in range(i + 1, k):
        idx[j] = idx[i] + j - i
    return True


def _advance_fixed(idx: Tuple[int, ...], n: int, k: int) -> Tuple[int, ...]:
    """
    successor of an ascending index tuple of a fixed-size combination.
    idx may be a prefix of the full k-tuple while recursing.
    """
    if len(idx) == 1:
        return (idx[0] + 1,)
    head, last = idx[:-1], idx[-1] + 1
    if last > n - k + len(idx) - 1:
        head = _advance_fixed(head, n, k)
        last = head[-1] + 1
    return head + (last,)


# --- iterators ---

class Product(Generic[T]):
    """cartesian product of n sources as n-tuples, the first source varying fastest."""

    def __init__(self, *sources: Iterable[Any]):
        memo: Dict[int, MemoizedEnumerable] = {}
        prepared = []
        last = len(sources) - 1
        for position, source in enumerate(sources):
            # one-shot iterators are cached so they can be restarted on carry,
            # the last position never restarts unless the same iterator occurs earlier
            is_one_shot = iter(source) is source or getattr(source, "is_one_shot", False)
            if is_one_shot and (position < last or id(source) in memo):
                if id(source) not in memo:
                    memo[id(source)] = MemoizedEnumerable(lambda s=source: s)
                source = memo[id(source)]
            prepared.append(source)
        self._sources: Tuple[Iterable[Any], ...] = tuple(prepared)
        logger.debug("product over %d sources", len(self._sources))

    @property
    def size_class(self) -> SizeClass:
        return reduce(longest, (size_class_of(s) for s in self._sources), SizeClass.HAS_LENGTH)

    @property
    def eltype_class(self) -> EltypeClass:
        return reduce(promote_eltype, (eltype_class_of(s) for s in self._sources), EltypeClass.HAS_ELTYPE)

    def __len__(self) -> int:
        if not all(has_length(s) for s in self._sources):
            raise TypeError("product length is unknown: some sources have no length")
        return math.prod(len(s) for s in self._sources)

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        sources = self._sources
        if not sources:
            yield ()
            return

        cursors = [iter(s) for s in sources]
        values = []
        for cursor in cursors:
            value = next(cursor, _EXHAUSTED)
            if value is _EXHAUSTED:
                return
            values.append(value)

        last = len(sources) - 1
        while True:
            yield tuple(values)
            for i in range(len(sources)):
                value = next(cursors[i], _EXHAUSTED)
                if value is not _EXHAUSTED:
                    values[i] = value
                    break
                if i == last:
                    return
                # carry: restart this position and move on to the next one
                cursors[i] = iter(sources[i])
                value = next(cursors[i], _EXHAUSTED)
                if value is _EXHAUSTED:
                    # a source that cannot be replayed ends the product
                    return
                values[i] = value

    def __repr__(self) -> str:
        return f"Product(sources={len(self._sources)})"


class _IndexableEnumerator(Generic[T]):
    """shared plumbing for enumerators that jump around an indexable collection."""

    def __init__(self, collection: typing.Sequence[T]):
        if not is_indexable(collection):
            raise TypeError(f"{type(self).__name__} requires an indexable collection with a length, "
                            f"got {type(collection).__name__}")
        self._collection = collection
        # pandas indexes by label, the enumerators need positions
        self._items = collection.iloc if isinstance(collection, (pd.Series, pd.DataFrame)) else collection

    @property
    def eltype_class(self) -> EltypeClass:
        return eltype_class_of(self._collection)

    def _select(self, idx: Iterable[int]) -> List[T]:
        return [self._items[i] for i in idx]


class Subsets(_IndexableEnumerator[T]):
    """every subset of a collection, in binary-counter order of the inclusion mask."""

    @property
    def size_class(self) -> SizeClass:
        return longest(SizeClass.HAS_LENGTH, size_class_of(self._collection))

    def __len__(self) -> int:
        return 1 << len(self._collection)

    def __iter__(self) -> Iterator[List[T]]:
        n = len(self._collection)
        # one extra bit marks the end
        bits = np.zeros(n + 1, dtype=bool)
        while not bits[n]:
            yield self._select(np.flatnonzero(bits[:n]).tolist())
            _increment_mask(bits)

    def __repr__(self) -> str:
        return f"Subsets(n={len(self._collection)})"


class Binomial(_IndexableEnumerator[T]):
    """all k-subsets of a collection as lists, in lexicographic index order."""

    size_class = SizeClass.HAS_LENGTH

    def __init__(self, collection: typing.Sequence[T], k: int):
        super().__init__(collection)
        self._k = k
        if k < 0 or k > len(collection):
            logger.debug("binomial with k=%d over n=%d is empty", k, len(collection))

    @property
    def k(self) -> int:
        return self._k

    def __len__(self) -> int:
        # math.comb raises for negative k; an empty enumeration is returned instead
        if self._k < 0:
            return 0
        return math.comb(len(self._collection), self._k)

    def __iter__(self) -> Iterator[List[T]]:
        n, k = len(self._collection), self._k
        if k < 0 or k > n:
            return
        idx = list(range(k))
        while True:
            yield self._select(idx)
            if not _next_combination(idx, n):
                return

    def __repr__(self) -> str:
        return f"Binomial(n={len(self._collection)}, k={self._k})"


class StaticSizeBinomial(_IndexableEnumerator[T]):
    """all k-subsets as k-tuples, with k fixed when the enumerator is built."""

    size_class = SizeClass.HAS_LENGTH

    def __init__(self, collection: typing.Sequence[T], size: Fixed):
        super().__init__(collection)
        self._k = size.k
        logger.debug("fixed-size binomial with k=%d over n=%d", self._k, len(collection))

    @property
    def k(self) -> int:
        return self._k

    def __len__(self) -> int:
        return math.comb(len(self._collection), self._k)

    def __iter__(self) -> Iterator[Tuple[T, ...]]:
        n, k = len(self._collection), self._k
        if k == 0:
            yield ()
            return
        idx = tuple(range(k))
        while idx[-1] < n:
            yield tuple(self._items[i] for i in idx)
            idx = _advance_fixed(idx, n, k)

    def __repr__(self) -> str:
        return f"StaticSizeBinomial(n={len(self._collection)}, k={self._k})"


def subsets(collection: typing.Sequence[T],
            k: Union[None, int, Fixed] = None) -> Union[Subsets[T], Binomial[T], StaticSizeBinomial[T]]:
    """
    subsets(xs) -> every subset of xs (power set), starting with the empty one.
    subsets(xs, k) -> every k-subset as a list, empty when k > len(xs).
    subsets(xs, Fixed(k)) -> every k-subset as a k-tuple.
    """
    if k is None:
        return Subsets(collection)
    if isinstance(k, Fixed):
        return StaticSizeBinomial(collection, k)
    return Binomial(collection, k)


def product(*sources: Iterable[Any]) -> Product[Any]:
    """iterate over every combination in the cartesian product of the sources."""
    return Product(*sources)


def _subset_count(n: int, k: Union[None, int, Fixed]) -> int:
    if k is None:
        return 1 << n
    if isinstance(k, Fixed):
        k = k.k
    return math.comb(n, k) if k >= 0 else 0


# --- accessor ---

class CombinatoricsAccessor(Generic[T]):
    def __init__(self, enumerable_instance: 'Enumerable[T]'):
        self._enumerable = enumerable_instance

    def binomial_coefficient(self, r: int) -> int:
        """binomial coefficient n choose r, using python's optimized math.comb"""
        n = self._enumerable.to.count()
        # math.comb raises valueerror for r < 0. return 0 for consistency.
        if r < 0:
            return 0
        return math.comb(n, r)

    def subsets(self, k: Union[None, int, Fixed] = None) -> 'Enumerable[Any]':
        """
        power set, k-subsets or fixed-size k-subsets of the sequence.
        the sequence is materialized once per iteration, since the enumerators need random access.
        """
        if not has_length(self._enumerable):
            # counting would pull the source, so the length stays unknown
            return self._enumerable._derive(lambda: subsets(self._enumerable.to.list(), k), SizeClass.UNKNOWN)
        return self._enumerable._derive(lambda: subsets(self._enumerable.to.list(), k), SizeClass.HAS_LENGTH,
                                        lambda: _subset_count(len(self._enumerable), k))

    def power_set(self) -> 'Enumerable[List[T]]':
        """the set of all subsets, in binary-counter order"""
        return self.subsets()

    def combinations(self, r: int) -> 'Enumerable[List[T]]':
        """every r-subset in lexicographic position order"""
        return self.subsets(r)

    def cartesian_product(self, *others: Iterable[Any]) -> 'Enumerable[Tuple[Any, ...]]':
        """
        cartesian product with other iterables. this sequence varies fastest.
        returns an enumerable of tuples.
        """
        product_iter = Product(self._enumerable, *others)
        return self._enumerable._derive(lambda: product_iter, product_iter.size_class)
