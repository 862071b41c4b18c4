from __future__ import annotations

from abc import ABC, abstractmethod
from .types import *

# --- core functionality ---
from .extensions.core import _CoreOperations

# --- accessors ---
from .extensions.set import SetAccessor
from .extensions.grouping import GroupingAccessor
from .extensions.combinatorics import CombinatoricsAccessor
from .extensions.utility import UtilityAccessor
from .extensions.terminal import TerminalAccessor

# --- abstract base class ---

class IEnumerable(ABC, Generic[T]):
    @abstractmethod
    def source(self) -> Iterable[T]:
        """get the underlying iterable without pulling from it"""
        pass

# --- base enumerable implementation ---

class _BaseEnumerable(IEnumerable[T]):
    def __init__(self, data_func: Callable[[], Iterable[T]], size_class: Optional[SizeClass] = None,
                 length_func: Optional[Callable[[], int]] = None,
                 parent: Optional['_BaseEnumerable[Any]'] = None):
        """
        init with a function that returns the source when called.
        nothing is pulled until the enumerable is iterated.
        a derived enumerable names its parent, and can report its length through length_func.
        """
        self._data_func = data_func
        self._size_class = size_class
        self._length_func = length_func
        self._parent = parent

    def source(self) -> Iterable[T]:
        return self._data_func()

    def _derive(self, data_func: Callable[[], Iterable[U]], size_class: SizeClass,
                length_func: Optional[Callable[[], int]] = None) -> 'Enumerable[U]':
        """an enumerable computed from this one; it is one-shot exactly when this one is"""
        return Enumerable(data_func, size_class=size_class, length_func=length_func, parent=self)

    @property
    def size_class(self) -> SizeClass:
        if self._size_class is None:
            return size_class_of(self.source())
        return self._size_class

    @property
    def eltype_class(self) -> EltypeClass:
        return eltype_class_of(self.source())

    @property
    def is_one_shot(self) -> bool:
        """true when the root source is a single iterator, so a second pass would see nothing"""
        if self._parent is not None:
            return self._parent.is_one_shot
        src = self.source()
        # a data function that builds a fresh iterator per call is re-iterable
        return iter(src) is src and self.source() is src

    def __iter__(self) -> Iterator[T]:
        # every call opens a new cursor on the source
        return iter(self._data_func())

    def __len__(self) -> int:
        if self._length_func is not None:
            return self._length_func()
        if self._parent is not None and not has_length(self):
            # a derived source may pull its parent when it is built
            raise TypeError(f"{type(self).__name__} has no length until it is enumerated")
        source = self.source()
        if not has_length(source):
            raise TypeError(f"{type(self).__name__} over {type(source).__name__} has no length until it is enumerated")
        return len(source)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size_class={self.size_class.value})"

# --- main enumerable class ---

class Enumerable(
    _BaseEnumerable[T],
    _CoreOperations[T]
):
    """
    a lazy, linq-inspired sequence over any python iterable.

    an enumerable is a description, not a cursor: each iteration calls the
    data function again and pulls from a fresh cursor, so re-iterable sources
    can be traversed any number of times. wrapping a one-shot iterator gives a
    single-use enumerable.

    a cursor is owned by one consumer. pulling the same cursor from several
    threads is not synchronized and is the caller's responsibility.
    """
    def __init__(self, data_func: Callable[[], Iterable[T]], size_class: Optional[SizeClass] = None,
                 length_func: Optional[Callable[[], int]] = None,
                 parent: Optional[_BaseEnumerable[Any]] = None):
        super().__init__(data_func, size_class, length_func, parent)
        # --- initialize accessors ---
        self.set = SetAccessor(self)
        self.group = GroupingAccessor(self)
        self.comb = CombinatoricsAccessor(self)
        self.util = UtilityAccessor(self)
        self.to = TerminalAccessor(self)
