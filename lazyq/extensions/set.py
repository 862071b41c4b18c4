from __future__ import annotations
import typing
import logging
from ..types import *

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable

logger = logging.getLogger(__name__)


class Distinct(Generic[T]):
    """
    yields each value of a source once, at the position where it first occurs.

    every cursor keeps its own map from value (or key) to the index it was first
    seen at; an element is emitted only when its own index is the recorded one.
    """

    size_class = SizeClass.UNKNOWN

    def __init__(self, source: Iterable[T], key_selector: Optional[KeySelector[T, K]] = None):
        self._source = source
        self._key_selector = key_selector
        logger.debug("distinct configured (keyed=%s)", key_selector is not None)

    @property
    def eltype_class(self) -> EltypeClass:
        return eltype_class_of(self._source)

    def __iter__(self) -> Iterator[T]:
        seen: Dict[Any, int] = {}
        key_selector = self._key_selector
        for index, item in enumerate(self._source):
            key = item if key_selector is None else key_selector(item)
            # setdefault keeps the first index, so duplicates compare unequal and are skipped
            if seen.setdefault(key, index) == index:
                yield item

    def __repr__(self) -> str:
        return f"Distinct(keyed={self._key_selector is not None})"


def distinct(source: Iterable[T], key_selector: Optional[KeySelector[T, K]] = None) -> Distinct[T]:
    """iterate through values skipping over those already encountered."""
    return Distinct(source, key_selector)


class SetAccessor(Generic[T]):
    """
    order-preserving set operations over a lazy sequence.
    membership is tracked per iteration, so nothing is shared between passes.
    """
    def __init__(self, enumerable_instance: 'Enumerable[T]'):
        self._enumerable = enumerable_instance

    def distinct(self, key_selector: Optional[KeySelector[T, K]] = None) -> 'Enumerable[T]':
        """return distinct elements. preserves order of first appearance."""
        unique = Distinct(self._enumerable, key_selector)
        return self._enumerable._derive(lambda: unique, SizeClass.UNKNOWN)

    def union(self, other: Iterable[T]) -> 'Enumerable[T]':
        """return the order-preserving union of two sequences (distinct elements)."""
        from .utility import Chain
        unique = Distinct(Chain(self._enumerable, other))
        return self._enumerable._derive(lambda: unique, SizeClass.UNKNOWN)
