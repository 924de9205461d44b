from __future__ import annotations

import inspect
from typing import Any, Generic, TypeVar


T = TypeVar("T")


class InjectionKey(Generic[T]):
    """Opaque identifier for values that have no concrete type of their own.

    Keys compare by identity: two keys created with the same type and label are
    still different identifiers. `T` only exists for static type checkers.
    """

    def __init__(self, name: str | None = None) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"InjectionKey({self.name or 'unnamed'!r})"


def injection_key(name: str | None = None) -> InjectionKey[Any]:
    """Create a new injection key.

    Example:
      settings_key: InjectionKey[Settings] = injection_key("settings")

    """
    return InjectionKey(name)


def is_injection_key(value: object) -> bool:
    return isinstance(value, InjectionKey)


def is_identifier(value: object) -> bool:
    """True for values that get resolved instead of passed through: classes and injection keys."""
    return inspect.isclass(value) or isinstance(value, InjectionKey)


def display_name(identifier: object) -> str:
    if isinstance(identifier, InjectionKey):
        return identifier.name or "unnamed"
    return getattr(identifier, "__name__", repr(identifier))
