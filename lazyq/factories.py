import typing
from .types import *

# --- module-level adapters ---
from .extensions.combinatorics import product, subsets
from .extensions.grouping import partition, group_by
from .extensions.set import distinct
from .extensions.utility import (
    take_strict, repeatedly, chain, imap, iterated, nth, take_nth, peek_iter, ncycle
)

if typing.TYPE_CHECKING:
    from .enumerable import Enumerable

def from_iterable(data: Iterable[T]) -> 'Enumerable[T]':
    """create enumerable from iterable"""
    from .enumerable import Enumerable
    return Enumerable(lambda: data)

def from_range(start: int, count: int) -> 'Enumerable[int]':
    """create enumerable from range"""
    from .enumerable import Enumerable
    return Enumerable(lambda: range(start, start + count))

def empty() -> 'Enumerable[Any]':
    """create empty enumerable"""
    from .enumerable import Enumerable
    return Enumerable(lambda: ())

def generate(generator_func: Callable[[], T], count: Optional[int] = None) -> 'Enumerable[T]':
    """generate a sequence by calling a function, count times or forever"""
    return from_iterable(repeatedly(generator_func, count))

# --- aliases ---
lazyq = from_iterable
P = from_iterable
