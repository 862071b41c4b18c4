import itertools
from dataclasses import dataclass
from enum import Enum
from typing import (
    TypeVar, Generic, Callable, Iterator, Iterable, Any, Optional, Union,
    Dict, List, Tuple, Set, Type
)

import numpy as np
import pandas as pd

T = TypeVar('T')
U = TypeVar('U')
K = TypeVar('K')
V = TypeVar('V')

Predicate = Callable[[T], bool]
Selector = Callable[[T], U]
KeySelector = Callable[[T], K]

# marks exhaustion when pulling with next(cursor, _EXHAUSTED)
_EXHAUSTED = object()


class ConfigurationError(ValueError):
    """raised eagerly at construction when an adapter is configured with invalid arguments."""
    pass


# --- size and element-type classes ---

class SizeClass(Enum):
    """what a source can tell about its length before it is iterated."""
    UNKNOWN = 'unknown'
    HAS_LENGTH = 'has_length'
    HAS_SHAPE = 'has_shape'
    INFINITE = 'infinite'


class EltypeClass(Enum):
    """whether a source advertises the type of its elements."""
    HAS_ELTYPE = 'has_eltype'
    UNKNOWN = 'unknown'


_LONGEST = {
    frozenset({SizeClass.HAS_SHAPE}): SizeClass.HAS_LENGTH,
    frozenset({SizeClass.HAS_LENGTH, SizeClass.HAS_SHAPE}): SizeClass.HAS_LENGTH,
    frozenset({SizeClass.UNKNOWN, SizeClass.HAS_SHAPE}): SizeClass.UNKNOWN,
    frozenset({SizeClass.UNKNOWN, SizeClass.HAS_LENGTH}): SizeClass.UNKNOWN,
    frozenset({SizeClass.INFINITE, SizeClass.HAS_SHAPE}): SizeClass.INFINITE,
    frozenset({SizeClass.INFINITE, SizeClass.HAS_LENGTH}): SizeClass.INFINITE,
    frozenset({SizeClass.INFINITE, SizeClass.UNKNOWN}): SizeClass.INFINITE,
}

_SHORTEST = {
    frozenset({SizeClass.HAS_SHAPE}): SizeClass.HAS_LENGTH,
    frozenset({SizeClass.HAS_LENGTH, SizeClass.HAS_SHAPE}): SizeClass.HAS_LENGTH,
    frozenset({SizeClass.INFINITE, SizeClass.HAS_SHAPE}): SizeClass.HAS_LENGTH,
    frozenset({SizeClass.INFINITE, SizeClass.HAS_LENGTH}): SizeClass.HAS_LENGTH,
    frozenset({SizeClass.UNKNOWN, SizeClass.HAS_SHAPE}): SizeClass.UNKNOWN,
    frozenset({SizeClass.UNKNOWN, SizeClass.HAS_LENGTH}): SizeClass.UNKNOWN,
    frozenset({SizeClass.UNKNOWN, SizeClass.INFINITE}): SizeClass.UNKNOWN,
}


def longest(a: SizeClass, b: SizeClass) -> SizeClass:
    """size class of a result that runs as long as its longest input (e.g. chain)."""
    return _LONGEST.get(frozenset({a, b}), a)


def shortest(a: SizeClass, b: SizeClass) -> SizeClass:
    """size class of a result bounded by its shortest input (e.g. imap)."""
    return _SHORTEST.get(frozenset({a, b}), a)


def promote_eltype(a: EltypeClass, b: EltypeClass) -> EltypeClass:
    """element type is only known when both sides know it."""
    if a is EltypeClass.HAS_ELTYPE and b is EltypeClass.HAS_ELTYPE:
        return EltypeClass.HAS_ELTYPE
    return EltypeClass.UNKNOWN


def size_class_of(source: Any) -> SizeClass:
    """infer the size class of an arbitrary iterable."""
    declared = getattr(source, 'size_class', None)
    if isinstance(declared, SizeClass):
        return declared
    if isinstance(source, np.ndarray):
        return SizeClass.HAS_SHAPE if source.ndim > 1 else SizeClass.HAS_LENGTH
    if isinstance(source, pd.DataFrame):
        return SizeClass.HAS_SHAPE
    if isinstance(source, (itertools.count, itertools.cycle)):
        return SizeClass.INFINITE
    if hasattr(source, '__len__'):
        return SizeClass.HAS_LENGTH
    return SizeClass.UNKNOWN


def eltype_class_of(source: Any) -> EltypeClass:
    """infer whether a source advertises its element type (numpy/pandas dtypes do)."""
    declared = getattr(source, 'eltype_class', None)
    if isinstance(declared, EltypeClass):
        return declared
    if isinstance(source, (np.ndarray, pd.Series, pd.DataFrame)):
        return EltypeClass.HAS_ELTYPE
    return EltypeClass.UNKNOWN


def has_length(source: Any) -> bool:
    return size_class_of(source) in (SizeClass.HAS_LENGTH, SizeClass.HAS_SHAPE)


def is_indexable(source: Any) -> bool:
    return hasattr(source, '__getitem__') and hasattr(source, '__len__')


@dataclass(frozen=True)
class Fixed:
    """
    a subset size fixed when the enumerator is built.
    subsets(xs, Fixed(2)) yields 2-tuples instead of lists.
    """
    k: int

    def __post_init__(self):
        if not isinstance(self.k, int) or self.k < 0:
            raise ConfigurationError(f"fixed subset size must be a non-negative integer, got {self.k!r}")


class MemoizedEnumerable(Generic[T]):
    """
    caches a one-shot iterator as it is pulled so it can be iterated again.
    every __iter__ is an independent cursor over the shared cache.
    """

    def __init__(self, data_func: Callable[[], Iterable[T]]):
        self._source_func = data_func
        self._cache: List[T] = []
        self._source_iterator: Optional[Iterator[T]] = None
        self._is_fully_enumerated = False

    @property
    def size_class(self) -> SizeClass:
        return SizeClass.HAS_LENGTH if self._is_fully_enumerated else SizeClass.UNKNOWN

    def _get_iterator(self) -> Iterator[T]:
        """get or create the source iterator"""
        if self._source_iterator is None:
            self._source_iterator = iter(self._source_func())
        return self._source_iterator

    def _materialize_to_index(self, target_index: int) -> bool:
        """pull until the cache holds target_index. false if the source ran out first."""
        iterator = self._get_iterator()
        while len(self._cache) <= target_index and not self._is_fully_enumerated:
            item = next(iterator, _EXHAUSTED)
            if item is _EXHAUSTED:
                self._is_fully_enumerated = True
            else:
                self._cache.append(item)
        return target_index < len(self._cache)

    def __iter__(self) -> Iterator[T]:
        # index-based so interleaved cursors never skip an element pulled by another
        index = 0
        while index < len(self._cache) or self._materialize_to_index(index):
            yield self._cache[index]
            index += 1

    def __getitem__(self, index: int) -> T:
        if index < 0:
            raise IndexError("negative indices are not supported on a memoized source")
        if not self._materialize_to_index(index):
            raise IndexError("index out of range")
        return self._cache[index]

    def __repr__(self) -> str:
        state = 'complete' if self._is_fully_enumerated else 'partial'
        return f"MemoizedEnumerable(cached={len(self._cache)}, {state})"
