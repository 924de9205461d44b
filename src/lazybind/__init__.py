"""Lazy instance container with resolution modes and scopes.

This package lets you describe how to build a value for an identifier (a class
or an injection key) and builds it only when it is first asked for.

Exports:
- `Container`: registers bindings (`provide`, `define`) and resolves them
  (`resolve`, `inject`) in singleton, unique or deep-unique `Mode`.
- `ContainerScope`: named pair of child containers, `isolated` (no access to
  the parent) and `inherited` (falls back to the parent).
- `injection_key`: creates an `InjectionKey` for values without a class of their own.
- `ResolutionError`: raised with an `ErrorKind` for duplicate or missing bindings.
- `DisposedError`: raised by any call on a disposed container.
"""

from ._container import Container, ErrorKind, Mode, ResolutionError
from ._disposable import Disposable, DisposedError
from ._events import ErrorEventArgs, Event, EventHandler, InstanceEventArgs
from ._keys import InjectionKey, display_name, injection_key, is_identifier, is_injection_key
from ._scope import ContainerScope, ScopeShape


__all__ = [
    "Container",
    "ContainerScope",
    "Disposable",
    "DisposedError",
    "ErrorEventArgs",
    "ErrorKind",
    "Event",
    "EventHandler",
    "InjectionKey",
    "InstanceEventArgs",
    "Mode",
    "ResolutionError",
    "ScopeShape",
    "display_name",
    "injection_key",
    "is_identifier",
    "is_injection_key",
]
