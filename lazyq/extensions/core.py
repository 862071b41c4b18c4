from __future__ import annotations
import typing
from itertools import islice
from ..types import *

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable

class _CoreOperations(Generic[T]):
    def where(self: 'Enumerable[T]', predicate: Predicate[T]) -> 'Enumerable[T]':
        """filter elements based on a predicate"""
        return self._derive(lambda: (x for x in self if predicate(x)), SizeClass.UNKNOWN)

    def select(self: 'Enumerable[T]', selector: Selector[T, U]) -> 'Enumerable[U]':
        """project each element to a new form"""
        size_class = self.size_class
        length_func = (lambda: len(self)) if has_length(self) else None
        return self._derive(lambda: (selector(x) for x in self), size_class, length_func)

    def take(self: 'Enumerable[T]', count: int) -> 'Enumerable[T]':
        """take at most the first 'count' elements"""
        count = max(0, count)
        parent_size = self.size_class
        if parent_size is SizeClass.INFINITE:
            length_func = lambda: count
        elif has_length(self):
            length_func = lambda: min(count, len(self))
        else:
            length_func = None
        # islice is lazy, so this is safe on infinite sources
        return self._derive(lambda: islice(self, count), shortest(SizeClass.HAS_LENGTH, parent_size), length_func)

    def skip(self: 'Enumerable[T]', count: int) -> 'Enumerable[T]':
        """skip the first 'count' elements"""
        count = max(0, count)
        length_func = (lambda: max(0, len(self) - count)) if has_length(self) else None
        return self._derive(lambda: islice(self, count, None),
                            longest(SizeClass.HAS_LENGTH, self.size_class), length_func)
