from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ._disposable import Disposable


if TYPE_CHECKING:
    from collections.abc import Callable

    from ._container import ErrorKind

A = TypeVar("A")


@dataclass(frozen=True)
class ErrorEventArgs:
    identifier: object
    kind: ErrorKind


@dataclass(frozen=True)
class InstanceEventArgs:
    identifier: object
    instance: object


class Event(Generic[A]):
    """Subscription side of an `EventHandler`.

    Handlers are stored under a name so they can be removed again; subscribing
    a second handler under an existing name replaces the first one.
    """

    def __init__(self, handler: EventHandler[A]) -> None:
        self._handler = handler

    def subscribe(self, name: str, callback: Callable[[Any, A], None]) -> None:
        self._handler._validate_disposed()  # noqa: SLF001
        self._handler._subscribers[name] = callback  # noqa: SLF001

    def unsubscribe(self, name: str) -> bool:
        self._handler._validate_disposed()  # noqa: SLF001
        return self._handler._subscribers.pop(name, None) is not None  # noqa: SLF001

    def has(self, name: str) -> bool:
        self._handler._validate_disposed()  # noqa: SLF001
        return name in self._handler._subscribers  # noqa: SLF001


class EventHandler(Disposable, Generic[A]):
    """Publishing side: `invoke(sender, args)` calls every subscriber in subscription order."""

    def __init__(self) -> None:
        super().__init__()
        self._subscribers: dict[str, Callable[[Any, A], None]] = {}
        self.event: Event[A] = Event(self)
        self._disposers.append(self._subscribers.clear)

    def invoke(self, sender: object, args: A) -> None:
        self._validate_disposed()
        for callback in list(self._subscribers.values()):
            callback(sender, args)
