r"""
  _
 | |    __ _  ____ _   _   __ _
 | |   / _` ||_  /| | | | / _` |
 | |__| (_| | / / | |_| || (_| |
 |_____\__,_|/___| \__, | \__, |
                   |___/     |_|
"""

import logging

# expose the main classes
from .enumerable import Enumerable

# expose the factory functions and adapters
from .factories import (
    from_iterable,
    from_range,
    empty,
    generate,
    lazyq,
    P,
    # combinators
    product,
    distinct,
    partition,
    group_by,
    subsets,
    # collaborators
    take_strict,
    repeatedly,
    chain,
    imap,
    iterated,
    nth,
    take_nth,
    peek_iter,
    ncycle
)

# expose supporting types
from .types import (
    ConfigurationError,
    Fixed,
    SizeClass,
    EltypeClass,
    longest,
    shortest,
    promote_eltype,
    size_class_of,
    eltype_class_of,
    MemoizedEnumerable
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

# define what `import *` does
__all__ = [
    "Enumerable",
    "from_iterable",
    "from_range",
    "empty",
    "generate",
    "lazyq",
    "P",
    "product",
    "distinct",
    "partition",
    "group_by",
    "subsets",
    "take_strict",
    "repeatedly",
    "chain",
    "imap",
    "iterated",
    "nth",
    "take_nth",
    "peek_iter",
    "ncycle",
    "ConfigurationError",
    "Fixed",
    "SizeClass",
    "EltypeClass",
    "longest",
    "shortest",
    "promote_eltype",
    "size_class_of",
    "eltype_class_of",
    "MemoizedEnumerable"
]
