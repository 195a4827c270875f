"""Application layer - Deferred, memoised construction."""

import threading
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class Lazy(Generic[T]):
    """Zero-argument handle that builds its value on first call.

    ``Lazy[T]`` is also the annotation a factory uses to ask for a deferred
    dependency. The supplier runs at most once even when the first calls
    race from several threads; every later call returns the memoised value.

    Attributes:
        _supplier: Builds the value; released once it succeeded.
        _lock: Guards the first evaluation. Handles built by the container
            share its construction lock.

    Example:
        >>> def new_report(store: Lazy[ReportStore]) -> Report:
        ...     return Report(store)
        >>>
        >>> container.register(new_store, lazy_out())
        >>> container.register(new_report)
    """

    def __init__(self, supplier: Callable[[], T], lock: Optional[Any] = None) -> None:
        self._supplier: Optional[Callable[[], T]] = supplier
        self._lock = lock if lock is not None else threading.Lock()
        self._evaluated = False
        self._value: Any = None

    @property
    def is_evaluated(self) -> bool:
        return self._evaluated

    def __call__(self) -> T:
        if not self._evaluated:
            with self._lock:
                if not self._evaluated:
                    self._value = self._supplier()
                    self._evaluated = True
                    self._supplier = None
        return self._value

    def __repr__(self) -> str:
        state = "evaluated" if self._evaluated else "pending"
        return f"Lazy({state})"
