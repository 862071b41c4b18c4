import logging
import itertools
import numpy as np
import pandas as pd
import suite
from lazyq import (
    P, empty, from_range, chain, imap, nth, partition, Enumerable, MemoizedEnumerable, Fixed,
    ConfigurationError, SizeClass, EltypeClass, longest, shortest, promote_eltype,
    size_class_of, eltype_class_of
)

test = suite.test
assert_that = suite.assert_that
assert_raises = suite.assert_raises

ALL_SIZES = list(SizeClass)


# --- size and element-type classes ---

@test("longest and shortest merge size classes")
def test_size_class_merges():
    assert_that(longest(SizeClass.HAS_LENGTH, SizeClass.INFINITE) is SizeClass.INFINITE, "infinite wins the longest")
    assert_that(longest(SizeClass.HAS_LENGTH, SizeClass.UNKNOWN) is SizeClass.UNKNOWN, "unknown beats a length")
    assert_that(longest(SizeClass.HAS_SHAPE, SizeClass.HAS_SHAPE) is SizeClass.HAS_LENGTH, "shapes flatten to lengths")
    assert_that(shortest(SizeClass.INFINITE, SizeClass.HAS_LENGTH) is SizeClass.HAS_LENGTH, "a length bounds infinity")
    assert_that(shortest(SizeClass.INFINITE, SizeClass.UNKNOWN) is SizeClass.UNKNOWN, "unknown bounds infinity")
    assert_that(shortest(SizeClass.INFINITE, SizeClass.INFINITE) is SizeClass.INFINITE, "two infinities stay infinite")
    assert_that(longest(SizeClass.UNKNOWN, SizeClass.UNKNOWN) is SizeClass.UNKNOWN, "unknown stays unknown")


@test("size class merges are symmetric")
def test_size_class_symmetry():
    for a, b in itertools.product(ALL_SIZES, ALL_SIZES):
        assert_that(longest(a, b) is longest(b, a), f"longest({a}, {b}) is not symmetric")
        assert_that(shortest(a, b) is shortest(b, a), f"shortest({a}, {b}) is not symmetric")


@test("element types are known only when both sides know them")
def test_promote_eltype():
    known, unknown = EltypeClass.HAS_ELTYPE, EltypeClass.UNKNOWN
    assert_that(promote_eltype(known, known) is known, "both known")
    assert_that(promote_eltype(known, unknown) is unknown, "one unknown")
    assert_that(promote_eltype(unknown, known) is unknown, "order does not matter")


@test("size_class_of inspects python, numpy and pandas sources")
def test_size_class_of():
    assert_that(size_class_of([1, 2]) is SizeClass.HAS_LENGTH, "lists have a length")
    assert_that(size_class_of(range(3)) is SizeClass.HAS_LENGTH, "ranges have a length")
    assert_that(size_class_of(np.zeros(3)) is SizeClass.HAS_LENGTH, "1d arrays have a length")
    assert_that(size_class_of(np.zeros((2, 2))) is SizeClass.HAS_SHAPE, "2d arrays have a shape")
    assert_that(size_class_of(pd.DataFrame({'a': [1]})) is SizeClass.HAS_SHAPE, "dataframes have a shape")
    assert_that(size_class_of(pd.Series([1, 2])) is SizeClass.HAS_LENGTH, "series have a length")
    assert_that(size_class_of(itertools.count()) is SizeClass.INFINITE, "count never ends")
    assert_that(size_class_of(itertools.cycle([1])) is SizeClass.INFINITE, "cycle never ends")
    assert_that(size_class_of(x for x in []) is SizeClass.UNKNOWN, "generators are unknown")


@test("eltype_class_of recognizes dtype-carrying sources")
def test_eltype_class_of():
    assert_that(eltype_class_of(np.array([1, 2])) is EltypeClass.HAS_ELTYPE, "arrays have a dtype")
    assert_that(eltype_class_of(pd.Series([1.0])) is EltypeClass.HAS_ELTYPE, "series have a dtype")
    assert_that(eltype_class_of([1, 2]) is EltypeClass.UNKNOWN, "lists do not")


@test("adapters propagate size classes from their inputs")
def test_size_class_propagation():
    assert_that(size_class_of(chain([1], [2])) is SizeClass.HAS_LENGTH, "chain of lists")
    assert_that(size_class_of(chain([1], itertools.count())) is SizeClass.INFINITE, "chain with an infinite part")
    assert_that(size_class_of(imap(abs, itertools.count(), [1])) is SizeClass.HAS_LENGTH, "imap is bounded")
    assert_that(size_class_of(partition([1, 2], 1)) is SizeClass.UNKNOWN, "partition is unknown")
    assert_that(P(itertools.count()).take(3).size_class is SizeClass.HAS_LENGTH, "take bounds infinity")
    assert_that(P(itertools.count()).skip(3).size_class is SizeClass.INFINITE, "skip keeps infinity")
    assert_that(P([1, 2]).where(bool).size_class is SizeClass.UNKNOWN, "filtering loses the length")


# --- fixed sizes ---

@test("fixed subset sizes validate eagerly")
def test_fixed():
    assert_that(Fixed(2).k == 2, "k is kept")
    assert_that(Fixed(2) == Fixed(2), "fixed sizes compare by value")
    with assert_raises(ConfigurationError, "negative sizes are rejected"):
        Fixed(-1)
    with assert_raises(ConfigurationError, "fractional sizes are rejected"):
        Fixed(1.5)


# --- memoized enumerable ---

@test("memoized enumerable replays a one-shot source to interleaved cursors")
def test_memoized_interleaved():
    pulled = []

    def source():
        for i in range(3):
            pulled.append(i)
            yield i

    memo = MemoizedEnumerable(source)
    a, b = iter(memo), iter(memo)
    assert_that([next(a), next(a)] == [0, 1], "first cursor pulls two")
    assert_that([next(b), next(b), next(b)] == [0, 1, 2], "second cursor replays then pulls")
    assert_that(next(a) == 2, "first cursor picks up the element pulled by the second")
    assert_that(pulled == [0, 1, 2], "each element is pulled from the source once")
    assert_that(list(memo) == [0, 1, 2] and list(memo) == [0, 1, 2], "full passes repeat")


@test("memoized enumerable supports positive indexing and reports completion")
def test_memoized_indexing():
    memo = MemoizedEnumerable(lambda: iter('abc'))
    assert_that(memo.size_class is SizeClass.UNKNOWN, "unknown before enumeration")
    assert_that(memo[1] == 'b', "indexing pulls just enough")
    with assert_raises(IndexError, "past the end"):
        memo[10]
    with assert_raises(IndexError, "negative indices"):
        memo[-1]
    assert_that(memo.size_class is SizeClass.HAS_LENGTH, "known once the source ran out")
    assert_that('complete' in repr(memo), "repr shows completion")


# --- enumerable ---

@test("an enumerable over a collection can be iterated repeatedly")
def test_enumerable_reiteration():
    data = P([1, 2, 3])
    assert_that(data.to.list() == [1, 2, 3] and data.to.list() == [1, 2, 3], "two full passes")
    assert_that(not data.is_one_shot, "lists are re-iterable")
    assert_that(len(data) == 3, "the source length is reported")
    assert_that(repr(data) == "Enumerable(size_class=has_length)", "repr shows the size class")


@test("an enumerable over an iterator is single-use")
def test_enumerable_one_shot():
    data = P(iter([1, 2]))
    assert_that(data.is_one_shot, "iterators are one-shot")
    assert_that(data.to.list() == [1, 2], "the first pass sees everything")
    assert_that(data.to.list() == [], "the second pass sees nothing")
    with assert_raises(TypeError, "an iterator has no length"):
        len(P(x for x in range(3)))


@test("core operations are lazy and composable")
def test_core_operations():
    result = from_range(0, 10).where(lambda x: x % 2 == 0).select(lambda x: x * x).take(3).to.list()
    assert_that(result == [0, 4, 16], f"where/select/take chain is incorrect: {result}")
    assert_that(from_range(0, 10).skip(7).to.list() == [7, 8, 9], "skip")
    assert_that(P(itertools.count()).select(lambda x: -x).take(3).to.list() == [0, -1, -2], "infinite sources stream")
    assert_that(P([1]).take(-2).to.list() == [] and P([1]).skip(-2).to.list() == [1], "negative counts clamp to zero")


@test("terminal operations produce concrete values")
def test_terminal_operations():
    data = P([3, 1, 2])
    assert_that(np.array_equal(data.to.array(), np.array([3, 1, 2])), "numpy array")
    assert_that(data.to.pandas().tolist() == [3, 1, 2], "pandas series")
    frame = P([{'a': 1, 'b': 2}, {'a': 3, 'b': 4}]).to.df()
    assert_that(list(frame.columns) == ['a', 'b'] and len(frame) == 2, "dataframe from records")
    assert_that(data.to.tuple() == (3, 1, 2) and data.to.set() == {1, 2, 3}, "tuple and set")
    assert_that(data.to.count() == 3 and data.to.count(lambda x: x > 1) == 2, "counts")
    assert_that(P(x for x in range(4)).to.count() == 4, "counting a generator walks it")
    assert_that(data.to.first() == 3 and data.to.first(lambda x: x < 3) == 1, "first")
    assert_that(empty().to.first_or_default(default='none') == 'none', "first_or_default on nothing")
    assert_that(data.to.any() and not empty().to.any(), "any")
    with assert_raises(ValueError, "first on an empty sequence"):
        empty().to.first()


# --- derived lengths and one-shot status ---

@test("derived enumerables report a length exactly when their size class promises one")
def test_derived_lengths():
    data = P([1, 2, 3])
    assert_that(len(data.select(lambda x: x * 10)) == 3, "select keeps the parent length")
    assert_that(len(data.take(2)) == 2 and len(data.take(10)) == 3, "take is bounded by the parent")
    assert_that(len(data.skip(1)) == 2 and len(data.skip(5)) == 0, "skip subtracts from the parent")
    assert_that(len(P(itertools.count()).take(4)) == 4, "take over an infinite source has the requested length")
    with assert_raises(TypeError, "a filtered sequence has no length up front"):
        len(data.where(bool))
    derived = [data.select(str), data.take(2), data.skip(1), data.where(bool), data.set.distinct(),
               data.util.ncycle(2), data.util.chain([4]), P(x for x in range(3)).select(str)]
    for enumerable in derived:
        if enumerable.size_class in (SizeClass.HAS_LENGTH, SizeClass.HAS_SHAPE):
            assert_that(len(enumerable) == len(enumerable.to.list()), f"length disagrees with contents for {enumerable!r}")


@test("nth works after select and take, directly and through chain")
def test_nth_after_core_operations():
    assert_that(P([1, 2, 3]).select(lambda x: x * 10).util.nth(1) == 20, "nth after select")
    assert_that(P([1, 2, 3]).take(2).util.nth(0) == 1, "nth after take")
    assert_that(nth(chain(P([1, 2]).select(lambda x: x), [3]), 2) == 3, "nth through a chain of a projection")
    with assert_raises(IndexError, "the promised length bounds nth"):
        P([1, 2, 3]).take(2).util.nth(2)


@test("one-shot status comes from the root source, not from the derived generator")
def test_one_shot_status():
    projected = P([1, 2, 3]).select(lambda x: x)
    assert_that(not projected.is_one_shot, "a projection of a list is re-iterable")
    assert_that(projected.to.list() == projected.to.list() == [1, 2, 3], "and really iterates twice")
    assert_that(not P([1, 2]).where(bool).take(1).is_one_shot, "long chains forward to the root")
    assert_that(P(iter([1, 2])).select(lambda x: x).is_one_shot, "a projection of an iterator is one-shot")
    assert_that(not Enumerable(lambda: (x for x in range(3))).is_one_shot, "a fresh generator per call is re-iterable")


# --- logging ---

class _CollectingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


@test("the package logs quietly through the standard logging tree")
def test_logging():
    root = logging.getLogger('lazyq')
    assert_that(any(isinstance(h, logging.NullHandler) for h in root.handlers), "a null handler is installed")

    handler = _CollectingHandler()
    previous_level = root.level
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    try:
        partition([1, 2, 3], 2, 1)
    finally:
        root.removeHandler(handler)
        root.setLevel(previous_level)
    assert_that("partition configured with n=2 step=1" in handler.messages, f"debug record missing: {handler.messages}")


@test("enumerables can be built directly from a data function")
def test_enumerable_constructor():
    data = Enumerable(lambda: range(3), size_class=SizeClass.HAS_LENGTH)
    assert_that(data.to.list() == [0, 1, 2], "a custom data function")
    assert_that(data.size_class is SizeClass.HAS_LENGTH, "a declared size class is kept")


# --- run the suite ---
if __name__ == "__main__":
    suite.run(title="lazyq types test")
