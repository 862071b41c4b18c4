from __future__ import annotations
import typing
import logging
from collections import deque
from itertools import islice
from ..types import *
from ..types import _EXHAUSTED

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable

logger = logging.getLogger(__name__)


class Partition(Generic[T]):
    """
    groups a source into n-tuples, starting a new window every `step` elements.
    step < n overlaps consecutive windows, step > n skips elements between them.
    a trailing window that cannot be filled is dropped.
    """

    size_class = SizeClass.UNKNOWN

    def __init__(self, source: Iterable[T], n: int, step: Optional[int] = None):
        step = n if step is None else step
        if n < 1:
            raise ConfigurationError(f"partition size must be at least 1, got {n}")
        if step < 1:
            raise ConfigurationError(f"partition step must be at least 1, got {step}")
        self._source = source
        self._n = n
        self._step = step
        logger.debug("partition configured with n=%d step=%d", n, step)

    @property
    def n(self) -> int:
        return self._n

    @property
    def step(self) -> int:
        return self._step

    @property
    def eltype_class(self) -> EltypeClass:
        return eltype_class_of(self._source)

    def __iter__(self) -> Iterator[Tuple[T, ...]]:
        n, step = self._n, self._step
        overlap = max(0, n - step)
        skip = max(0, step - n)

        cursor = iter(self._source)
        window: deque = deque(islice(cursor, n), maxlen=n)
        if len(window) < n:
            return

        while True:
            yield tuple(window)
            for _ in range(n - overlap):
                window.popleft()
            for _ in range(skip):
                if next(cursor, _EXHAUSTED) is _EXHAUSTED:
                    return
            window.extend(islice(cursor, n - overlap))
            if len(window) < n:
                return

    def __repr__(self) -> str:
        return f"Partition(n={self._n}, step={self._step})"


class GroupBy(Generic[T, K]):
    """
    groups consecutive elements that share the same key into lists.
    the element that closes a run is held over to open the next one.
    """

    size_class = SizeClass.UNKNOWN

    def __init__(self, key_selector: KeySelector[T, K], source: Iterable[T]):
        if not callable(key_selector):
            raise TypeError(f"group_by key must be callable, got {type(key_selector).__name__}")
        self._key_selector = key_selector
        self._source = source
        logger.debug("group_by configured with key %r", getattr(key_selector, "__name__", key_selector))

    @property
    def eltype_class(self) -> EltypeClass:
        return eltype_class_of(self._source)

    def __iter__(self) -> Iterator[List[T]]:
        key_selector = self._key_selector
        cursor = iter(self._source)

        first = next(cursor, _EXHAUSTED)
        if first is _EXHAUSTED:
            return
        held_key, held_value = key_selector(first), first

        while True:
            run = [held_value]
            run_key = held_key
            held_value = _EXHAUSTED
            for item in cursor:
                key = key_selector(item)
                if key != run_key:
                    held_key, held_value = key, item
                    break
                run.append(item)
            yield run
            # nothing held over means the source ran out while filling the run
            if held_value is _EXHAUSTED:
                return

    def __repr__(self) -> str:
        return f"GroupBy(key={getattr(self._key_selector, '__name__', self._key_selector)!r})"


def partition(source: Iterable[T], n: int, step: Optional[int] = None) -> Partition[T]:
    """group values into n-tuples, advancing `step` elements between windows (default n)."""
    return Partition(source, n, step)


def group_by(key_selector: KeySelector[T, K], source: Iterable[T]) -> GroupBy[T, K]:
    """group consecutive values that share the same result of key_selector."""
    return GroupBy(key_selector, source)


class GroupingAccessor(Generic[T]):
    def __init__(self, enumerable_instance: 'Enumerable[T]'):
        self._enumerable = enumerable_instance

    def partition(self, n: int, step: Optional[int] = None) -> 'Enumerable[Tuple[T, ...]]':
        """split into n-tuples, optionally overlapping (step < n) or skipping (step > n)"""
        # built eagerly so a bad step fails here, not on first iteration
        windows = Partition(self._enumerable, n, step)
        return self._enumerable._derive(lambda: windows, SizeClass.UNKNOWN)

    def chunk(self, size: int) -> 'Enumerable[Tuple[T, ...]]':
        """split into consecutive non-overlapping chunks; a short tail is dropped"""
        return self.partition(size)

    def window(self, size: int) -> 'Enumerable[Tuple[T, ...]]':
        """create sliding windows of specified size"""
        return self.partition(size, 1)

    def pairwise(self) -> 'Enumerable[Tuple[T, T]]':
        """return consecutive pairs"""
        return self.partition(2, 1)

    def group_by(self, key_selector: KeySelector[T, K]) -> 'Enumerable[List[T]]':
        """batch consecutive elements with same key"""
        runs = GroupBy(key_selector, self._enumerable)
        return self._enumerable._derive(lambda: runs, SizeClass.UNKNOWN)

    def run_length_encode(self) -> 'Enumerable[Tuple[T, int]]':
        """
        consecutive identical elements are grouped into (element, count) tuples.
        """
        runs = GroupBy(lambda item: item, self._enumerable)
        return self._enumerable._derive(lambda: ((run[0], len(run)) for run in runs), SizeClass.UNKNOWN)
