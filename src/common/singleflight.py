"""
Thread Safety Utilities

Provides lazily resolved values and duplicate call suppression for
work that must run at most once per key at a time.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Generic, Hashable, Optional, TypeVar

T = TypeVar('T')

_UNRESOLVED = object()


class Memo(Generic[T]):
    """
    A value that is either unresolved or resolved exactly once.

    Example:
        version = Memo()
        version.get(lambda: read_version())  # computes
        version.get(lambda: read_version())  # cached
    """

    def __init__(self):
        self._value: Any = _UNRESOLVED
        self._lock = threading.Lock()

    @property
    def resolved(self) -> bool:
        return self._value is not _UNRESOLVED

    def get(self, compute: Callable[[], T]) -> T:
        """Return the resolved value, computing it on first use."""
        if self._value is _UNRESOLVED:
            with self._lock:
                # Double-check locking pattern
                if self._value is _UNRESOLVED:
                    self._value = compute()
        return self._value


class _Call:
    def __init__(self):
        self.done = threading.Event()
        self.result: Any = None
        self.error: Optional[BaseException] = None


class SingleFlight:
    """
    Suppresses duplicate concurrent calls sharing a key.

    The first caller for a key runs the function; callers arriving while
    it is in flight wait and receive the same result or exception.
    Once the call finishes the key is forgotten, so a later call runs again.

    Example:
        group = SingleFlight()
        icon = group.do(("icon", path), lambda: extract_icon(path))
    """

    def __init__(self):
        self._calls: Dict[Hashable, _Call] = {}
        self._lock = threading.Lock()

    def do(self, key: Hashable, fn: Callable[[], T]) -> T:
        with self._lock:
            call = self._calls.get(key)
            leader = call is None
            if leader:
                call = _Call()
                self._calls[key] = call

        if not leader:
            call.done.wait()
            if call.error is not None:
                raise call.error
            return call.result

        try:
            call.result = fn()
        except BaseException as e:
            call.error = e
            raise
        finally:
            with self._lock:
                del self._calls[key]
            call.done.set()
        return call.result


# Process-wide group for archive extraction work
_extractions = SingleFlight()


def extraction_group() -> SingleFlight:
    """Get the global extraction group."""
    return _extractions
