'''
minimal test registry for the lazyq test modules.
tests register with @test("..."), run as plain functions under pytest,
or all together through run() when a module is executed directly.
'''

import time
import traceback
from contextlib import contextmanager
from functools import wraps
from typing import List, Dict, Any, Callable, Iterator, Optional, Type

_registered: List[Dict[str, Any]] = []

_COLORS = {
    'pass': '\033[92m',
    'fail': '\033[91m',
    'time': '\033[93m',
    'head': '\033[94m',
    'dim': '\033[90m',
    'end': '\033[0m',
}


def _paint(kind: str, text: str) -> str:
    return f"{_COLORS[kind]}{text}{_COLORS['end']}"


class SuiteAssertionError(AssertionError):
    """a failed assert_that or assert_raises, as opposed to an unexpected error."""
    pass


def test(description: str) -> Callable:
    """register a test under a readable description."""

    def decorator(func: Callable) -> Callable:
        _registered.append({'func': func, 'description': description})

        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        return wrapper

    return decorator


def assert_that(condition: Any, message: str = "assertion failed") -> None:
    if not condition:
        raise SuiteAssertionError(message)


@contextmanager
def assert_raises(exc_type: Type[BaseException], message: str = "expected an exception") -> Iterator[None]:
    """the block must raise exc_type or a subclass of it."""
    try:
        yield
    except exc_type:
        return
    raise SuiteAssertionError(f"{message}: {exc_type.__name__} was not raised")


def _outcome(func: Callable, verbose: bool) -> Optional[str]:
    """none on success, otherwise a one-line reason."""
    try:
        func()
    except SuiteAssertionError as e:
        return f"assertion failed: {e}"
    except Exception as e:
        if verbose:
            traceback.print_exc()
        return f"{type(e).__name__}: {e}"
    return None


def run(title: str = "test run", verbose: bool = False) -> bool:
    """run every registered test, print a report and return whether all passed."""
    print(_paint('head', f"\n== {title} =="))
    started = time.perf_counter()

    failures = 0
    for case in _registered:
        reason = _outcome(case['func'], verbose)
        if reason is None:
            print(f"  {_paint('pass', 'ok  ')} {case['description']}")
            continue
        failures += 1
        print(f"  {_paint('fail', 'FAIL')} {case['description']}")
        print(_paint('dim', f"       {reason}"))

    elapsed_ms = (time.perf_counter() - started) * 1000
    total = len(_registered)
    summary = 'pass' if failures == 0 else 'fail'
    print(_paint(summary, f"\n{total - failures}/{total} passed") + " in " + _paint('time', f"{elapsed_ms:.1f}ms\n"))

    # a module run twice in one process should not report its tests twice
    _registered.clear()
    return failures == 0
