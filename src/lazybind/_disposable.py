from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Callable


class DisposedError(RuntimeError):
    pass


class Disposable:
    """Base for objects with an explicit end of life.

    Subclasses append teardown callbacks to `_disposers`; they run once, in
    order, on the first `dispose()` call. Every later call to a guarded method
    raises `DisposedError`, including a second `dispose()`.
    """

    def __init__(self) -> None:
        self._disposed = False
        self._disposers: list[Callable[[], None]] = []

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        self._validate_disposed()
        self._disposed = True
        for disposer in self._disposers:
            disposer()
        self._disposers.clear()

    def _validate_disposed(self) -> None:
        if self._disposed:
            msg = f"{type(self).__name__} instance is disposed"
            raise DisposedError(msg)
