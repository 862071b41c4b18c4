from __future__ import annotations
import typing
import logging
from functools import reduce
from itertools import islice
from ..types import *
from ..types import _EXHAUSTED

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable

logger = logging.getLogger(__name__)


class TakeStrict(Generic[T]):
    """the first n elements of a source; running short is an error, not a truncation."""

    size_class = SizeClass.HAS_LENGTH

    def __init__(self, source: Iterable[T], n: int):
        self._source = source
        self._n = n

    @property
    def eltype_class(self) -> EltypeClass:
        return eltype_class_of(self._source)

    def __len__(self) -> int:
        return max(0, self._n)

    def __iter__(self) -> Iterator[T]:
        if self._n <= 0:
            return
        cursor = iter(self._source)
        for _ in range(self._n):
            item = next(cursor, _EXHAUSTED)
            if item is _EXHAUSTED:
                raise ValueError(f"take_strict expected {self._n} items but the source had fewer")
            yield item


class RepeatCall(Generic[T]):
    """calls a function n times, or forever when n is None."""

    eltype_class = EltypeClass.UNKNOWN

    def __init__(self, func: Callable[[], T], n: Optional[int] = None):
        self._func = func
        self._n = n

    @property
    def size_class(self) -> SizeClass:
        return SizeClass.INFINITE if self._n is None else SizeClass.HAS_LENGTH

    def __len__(self) -> int:
        if self._n is None:
            raise TypeError("repeatedly without a count has no length")
        return max(0, self._n)

    def __iter__(self) -> Iterator[T]:
        if self._n is None:
            while True:
                yield self._func()
        for _ in range(self._n):
            yield self._func()


class Chain(Generic[T]):
    """iterates through any number of sources in sequence."""

    def __init__(self, *sources: Iterable[T]):
        self._sources = sources

    @property
    def size_class(self) -> SizeClass:
        return reduce(longest, (size_class_of(s) for s in self._sources), SizeClass.HAS_LENGTH)

    @property
    def eltype_class(self) -> EltypeClass:
        return reduce(promote_eltype, (eltype_class_of(s) for s in self._sources), EltypeClass.HAS_ELTYPE)

    def __len__(self) -> int:
        if not all(has_length(s) for s in self._sources):
            raise TypeError("chain length is unknown: some sources have no length")
        return sum(len(s) for s in self._sources)

    def __iter__(self) -> Iterator[T]:
        for source in self._sources:
            yield from source


class IMap(Generic[U]):
    """applies a function to successive values of one or more sources, stopping with the shortest."""

    eltype_class = EltypeClass.UNKNOWN

    def __init__(self, func: Callable[..., U], *sources: Iterable[Any]):
        if not sources:
            raise ConfigurationError("imap needs at least one source")
        self._func = func
        self._sources = sources

    @property
    def size_class(self) -> SizeClass:
        return reduce(shortest, (size_class_of(s) for s in self._sources), SizeClass.HAS_LENGTH)

    def __len__(self) -> int:
        lengths = [len(s) for s in self._sources if has_length(s)]
        if not lengths:
            raise TypeError("imap length is unknown: no source has a length")
        return min(lengths)

    def __iter__(self) -> Iterator[U]:
        for values in zip(*self._sources):
            yield self._func(*values)


class Iterated(Generic[T]):
    """seed, f(seed), f(f(seed)), ..."""

    size_class = SizeClass.INFINITE
    eltype_class = EltypeClass.UNKNOWN

    def __init__(self, func: Callable[[T], T], seed: T):
        self._func = func
        self._seed = seed

    def __iter__(self) -> Iterator[T]:
        value = self._seed
        while True:
            yield value
            value = self._func(value)


class TakeNth(Generic[T]):
    """every interval-th element of a source."""

    def __init__(self, source: Iterable[T], interval: int):
        if interval < 1:
            raise ConfigurationError(f"expected interval to be 1 or more, got {interval}")
        self._source = source
        self._interval = interval

    @property
    def size_class(self) -> SizeClass:
        return longest(SizeClass.HAS_LENGTH, size_class_of(self._source))

    @property
    def eltype_class(self) -> EltypeClass:
        return eltype_class_of(self._source)

    def __len__(self) -> int:
        if not has_length(self._source):
            raise TypeError("take_nth length is unknown: the source has no length")
        return len(self._source) // self._interval

    def __iter__(self) -> Iterator[T]:
        return islice(self._source, self._interval - 1, None, self._interval)


class PeekIter(Generic[T]):
    """
    an iterator that can look at its head element without consuming it.
    unlike the other adapters this is a single cursor, not a re-iterable description.
    """

    def __init__(self, source: Iterable[T]):
        self._size_class = size_class_of(source)
        self._eltype_class = eltype_class_of(source)
        self._cursor = iter(source)
        self._head: Any = _EXHAUSTED
        self._has_head = False

    @property
    def size_class(self) -> SizeClass:
        return self._size_class

    @property
    def eltype_class(self) -> EltypeClass:
        return self._eltype_class

    def _fill(self) -> None:
        if not self._has_head:
            self._head = next(self._cursor, _EXHAUSTED)
            self._has_head = True

    def peek(self, default: Any = _EXHAUSTED) -> T:
        """return the next element without advancing. raises stopiteration when empty and no default is given."""
        self._fill()
        if self._head is _EXHAUSTED:
            if default is _EXHAUSTED:
                raise StopIteration
            return default
        return self._head

    def __bool__(self) -> bool:
        self._fill()
        return self._head is not _EXHAUSTED

    def __iter__(self) -> 'PeekIter[T]':
        return self

    def __next__(self) -> T:
        self._fill()
        head = self._head
        if head is _EXHAUSTED:
            raise StopIteration
        self._has_head = False
        self._head = _EXHAUSTED
        return head


class NCycle(Generic[T]):
    """cycles through a source n times."""

    def __init__(self, source: Iterable[T], n: int):
        self._source = source
        self._n = n

    @property
    def size_class(self) -> SizeClass:
        return longest(SizeClass.HAS_LENGTH, size_class_of(self._source))

    @property
    def eltype_class(self) -> EltypeClass:
        return eltype_class_of(self._source)

    def __len__(self) -> int:
        if not has_length(self._source):
            raise TypeError("ncycle length is unknown: the source has no length")
        return max(0, self._n) * len(self._source)

    def __iter__(self) -> Iterator[T]:
        for _ in range(self._n):
            yield from self._source


# --- constructors ---

def take_strict(source: Iterable[T], n: int) -> TakeStrict[T]:
    """like take, but raises valueerror if fewer than n items are encountered."""
    return TakeStrict(source, n)


def repeatedly(func: Callable[[], T], n: Optional[int] = None) -> RepeatCall[T]:
    """call func n times, or infinitely if n is omitted."""
    return RepeatCall(func, n)


def chain(*sources: Iterable[T]) -> Chain[T]:
    """iterate through any number of sources in sequence."""
    return Chain(*sources)


def imap(func: Callable[..., U], *sources: Iterable[Any]) -> IMap[U]:
    """iterate over values of func applied to successive values from the sources."""
    return IMap(func, *sources)


def iterated(func: Callable[[T], T], seed: T) -> Iterated[T]:
    """iterate over successive applications of func, starting with seed itself."""
    return Iterated(func, seed)


def take_nth(source: Iterable[T], interval: int) -> TakeNth[T]:
    """iterate through every interval-th element of source."""
    return TakeNth(source, interval)


def peek_iter(source: Iterable[T]) -> PeekIter[T]:
    """wrap source so its head can be peeked at."""
    return PeekIter(source)


def ncycle(source: Iterable[T], n: int) -> NCycle[T]:
    """cycle through source n times."""
    return NCycle(source, n)


def nth(source: Iterable[T], n: int) -> T:
    """
    return the element at zero-based position n.
    mostly useful for sources that cannot be indexed.
    """
    if n < 0:
        raise IndexError(f"nth expects a non-negative position, got {n}")
    if has_length(source) and n >= len(source):
        raise IndexError("index out of range")
    if isinstance(source, (list, tuple, range)):
        return source[n]
    item = next(islice(source, n, None), _EXHAUSTED)
    if item is _EXHAUSTED:
        # sources without a length that turn out to be too short
        raise IndexError("index out of range")
    return item


class UtilityAccessor(Generic[T]):
    def __init__(self, enumerable_instance: 'Enumerable[T]'):
        self._enumerable = enumerable_instance

    def take_strict(self, n: int) -> 'Enumerable[T]':
        """the first n elements; iteration raises valueerror if there are fewer"""
        taken = TakeStrict(self._enumerable, n)
        return self._enumerable._derive(lambda: taken, SizeClass.HAS_LENGTH)

    def take_nth(self, interval: int) -> 'Enumerable[T]':
        """every interval-th element"""
        stepped = TakeNth(self._enumerable, interval)
        return self._enumerable._derive(lambda: stepped, longest(SizeClass.HAS_LENGTH, self._enumerable.size_class))

    def nth(self, n: int) -> T:
        """
        the element at zero-based position n.
        this is an EAGER operation that pulls up to n + 1 elements.
        """
        return nth(self._enumerable, n)

    def ncycle(self, n: int) -> 'Enumerable[T]':
        """the whole sequence repeated n times"""
        cycled = NCycle(self._enumerable, n)
        return self._enumerable._derive(lambda: cycled, longest(SizeClass.HAS_LENGTH, self._enumerable.size_class))

    def chain(self, *others: Iterable[T]) -> 'Enumerable[T]':
        """this sequence followed by the others"""
        chained = Chain(self._enumerable, *others)
        return self._enumerable._derive(lambda: chained, chained.size_class)

    def imap(self, func: Callable[..., U], *others: Iterable[Any]) -> 'Enumerable[U]':
        """func applied element-wise across this sequence and the others, stopping with the shortest"""
        mapped = IMap(func, self._enumerable, *others)
        return self._enumerable._derive(lambda: mapped, mapped.size_class)

    def peek(self) -> PeekIter[T]:
        """start a cursor over the sequence that supports peek()"""
        return PeekIter(self._enumerable)
