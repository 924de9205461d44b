from __future__ import annotations

import inspect
import logging
import threading
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    NoReturn,
    TypeVar,
    overload,
)

from ._disposable import Disposable
from ._events import ErrorEventArgs, Event, EventHandler, InstanceEventArgs
from ._keys import InjectionKey, display_name, is_identifier
from ._scope import ContainerScope, ScopeShape


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterator

    T = TypeVar("T")

    Identifier = type[T] | InjectionKey[T]
    # Binding: produces an instance for the mode it is invoked with
    Resolver = Callable[["Mode"], object]
    Fallback = Callable[[object, "Mode"], object]

# Marks "no binding found" without raising, so fallbacks can be chained
_MISSING = object()


class Mode(Enum):
    SINGLETON = "singleton"
    UNIQUE = "unique"
    DEEP_UNIQUE = "deep-unique"


class ErrorKind(Enum):
    DUPLICATE = "duplicate"
    MISSING = "missing"


class ResolutionError(RuntimeError):
    def __init__(self, message: str, identifier: object, kind: ErrorKind) -> None:
        super().__init__(message)
        self.identifier = identifier
        self.kind = kind


class Container(Disposable):
    """Lazy instance container.

    - `provide` a class with its constructor arguments, or `define` a builder/alias
    - `resolve` with one of three modes: singleton / unique / deep-unique
    - isolated and inherited child containers via `scope(key)`
    - error / created / resolved notifications.
    """

    def __init__(self, name: str | None = None, *, _fallback: Fallback | None = None) -> None:
        super().__init__()
        self.name = name
        self._bindings: dict[Any, Resolver] = {}
        self._singletons: dict[Any, object] = {}
        self._scopes: dict[Hashable, ContainerScope[Container]] = {}
        self._fallback = _fallback
        self._lock = threading.RLock()
        self._error_handler: EventHandler[ErrorEventArgs] = EventHandler()
        self._created_handler: EventHandler[InstanceEventArgs] = EventHandler()
        self._resolved_handler: EventHandler[InstanceEventArgs] = EventHandler()
        self._disposers.append(self._teardown)

    def __repr__(self) -> str:
        return f"Container(name={self.name!r}, bindings={len(self._bindings)})"

    def __contains__(self, identifier: object) -> bool:
        """Whether `identifier` has a binding in this container (parents are not consulted)."""
        self._validate_disposed()
        with self._lock:
            return identifier in self._bindings

    @property
    def on_error(self) -> Event[ErrorEventArgs]:
        self._validate_disposed()
        return self._error_handler.event

    @property
    def on_created(self) -> Event[InstanceEventArgs]:
        self._validate_disposed()
        return self._created_handler.event

    @property
    def on_resolved(self) -> Event[InstanceEventArgs]:
        self._validate_disposed()
        return self._resolved_handler.event

    def provide(self, cls: type[T], *args: Any, **kwargs: Any) -> None:
        """Bind `cls` to a call of its own constructor.

        Classes and injection keys among the arguments are resolved when the
        instance is built; every other argument is passed through as is.

        Example:
          container.provide(Repo, DB, "users", retries=3)

        """
        self._validate_disposed()
        if not inspect.isclass(cls):
            msg = f"provide() expects a class, got {cls!r}. Use define() for injection keys."
            raise TypeError(msg)

        with self._lock:
            self._validate_known(cls)
            self._check_parameters(cls, args, kwargs)

            def build(mode: Mode) -> T:
                # bindings only ever run as singleton or deep-unique, see _lookup
                call_args = [self._resolve_parameter(value, mode) for value in args]
                call_kwargs = {name: self._resolve_parameter(value, mode) for name, value in kwargs.items()}
                return cls(*call_args, **call_kwargs)

            self._bindings[cls] = build
            logger.debug("%r: provided %s", self, cls.__name__)

    def define(self, identifier: Identifier[T], target: Callable[[Container], T] | Identifier[T]) -> None:
        """Bind `identifier` to a builder or to another identifier.

        Example:
          container.define(settings_key, lambda c: Settings.from_file("app.toml"))
          container.define(Storage, DiskStorage)  # alias

        A builder receives this container so it can resolve its own dependencies.
        """
        self._validate_disposed()
        if not is_identifier(identifier):
            msg = f"Identifier must be a class or an injection key, got {identifier!r}"
            raise TypeError(msg)

        if is_identifier(target):

            def build(mode: Mode) -> object:
                return self.resolve(target, mode)

        elif callable(target):

            def build(mode: Mode) -> object:  # noqa: ARG001
                return target(self)

        else:
            msg = f"Target must be a callable or an identifier, got {target!r}"
            raise TypeError(msg)

        with self._lock:
            self._validate_known(identifier)
            self._bindings[identifier] = build
            logger.debug("%r: defined %s", self, display_name(identifier))

    @overload
    def resolve(self, identifier: type[T], mode: Mode | str = ...) -> T: ...

    @overload
    def resolve(self, identifier: InjectionKey[T], mode: Mode | str = ...) -> T: ...

    def resolve(self, identifier: Identifier[T], mode: Mode | str = Mode.SINGLETON) -> Any:
        """Return an instance for `identifier`, building it if needed.

        - singleton: built once, then served from this container's cache.
        - unique: freshly built; its dependencies are resolved as singletons.
        - deep-unique: freshly built, and so is every dependency below it.

        Identifiers unknown here are looked up in the parent when this is an
        inherited scope. Raises `ResolutionError` when nothing is found.
        """
        self._validate_disposed()
        mode = Mode(mode)

        with self._lock:
            instance = self._lookup(identifier, mode)

        if instance is _MISSING:
            self._fail(identifier, ErrorKind.MISSING, f'"{display_name(identifier)}" could not be resolved')

        self._resolved_handler.invoke(self, InstanceEventArgs(identifier, instance))
        return instance

    @overload
    def inject(self, identifier: type[T], mode: Mode | str = ...) -> T: ...

    @overload
    def inject(self, identifier: InjectionKey[T], mode: Mode | str = ...) -> T: ...

    def inject(self, identifier: Identifier[T], mode: Mode | str = Mode.SINGLETON) -> Any:
        """Alias of `resolve`."""
        return self.resolve(identifier, mode)

    def scope(self, key: Hashable) -> ContainerScope[Container]:
        """Return the scope stored under `key`, creating it on first access."""
        self._validate_disposed()
        with self._lock:
            scope = self._scopes.get(key)
            if scope is None:
                scope = ContainerScope(lambda shape: self._create_scope_instance(key, shape))
                self._scopes[key] = scope
            return scope

    @property
    def scopes(self) -> list[ContainerScope[Container]]:
        self._validate_disposed()
        with self._lock:
            return list(self._scopes.values())

    def presolve(self) -> None:
        """Resolve every binding as singleton, then do the same in every child scope.

        Useful at startup to surface missing bindings early. Stops at the first
        failure; instances built before it stay cached.
        """
        self._validate_disposed()
        with self._lock:
            identifiers = list(self._bindings)

        for identifier in identifiers:
            self.resolve(identifier)

        for instance in self._scope_instances():
            instance.presolve()

    def remove_singleton(self, identifier: object, include_scopes: bool = False) -> bool:
        """Drop the cached instance for `identifier`; the binding stays.

        Returns whether this container had a cached instance.
        """
        self._validate_disposed()
        with self._lock:
            removed = self._singletons.pop(identifier, _MISSING) is not _MISSING

        if include_scopes:
            for instance in self._scope_instances():
                instance.remove_singleton(identifier, include_scopes=True)

        return removed

    def clear_singletons(self, include_scopes: bool = False) -> None:
        self._validate_disposed()
        with self._lock:
            self._singletons.clear()

        if include_scopes:
            for instance in self._scope_instances():
                instance.clear_singletons(include_scopes=True)

    def _lookup(self, identifier: object, mode: Mode) -> object:
        """Resolution without notifications or errors; returns `_MISSING` when nothing is bound.

        Inherited scopes are given this method as their fallback.
        """
        with self._lock:
            if mode is Mode.SINGLETON and identifier in self._singletons:
                return self._singletons[identifier]

            # unique renews the top level only: the binding itself runs as singleton
            build_mode = Mode.DEEP_UNIQUE if mode is Mode.DEEP_UNIQUE else Mode.SINGLETON

            resolver = self._bindings.get(identifier)
            if resolver is not None:
                return self._build(identifier, resolver, build_mode, cache=mode is Mode.SINGLETON)

            if self._fallback is not None:
                return self._fallback(identifier, build_mode)

            return _MISSING

    def _build(self, identifier: object, resolver: Resolver, mode: Mode, *, cache: bool) -> object:
        instance = resolver(mode)
        logger.debug("%r: built %s (%s)", self, display_name(identifier), mode.value)
        self._created_handler.invoke(self, InstanceEventArgs(identifier, instance))

        if cache:
            self._singletons[identifier] = instance

        return instance

    def _resolve_parameter(self, value: Any, mode: Mode) -> Any:
        if is_identifier(value):
            return self.resolve(value, mode)
        return value

    def _validate_known(self, identifier: object) -> None:
        if identifier in self._bindings:
            self._fail(identifier, ErrorKind.DUPLICATE, f'"{display_name(identifier)}" already configured')

    def _check_parameters(self, cls: type, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        try:
            sig = inspect.signature(cls)
        except ValueError:
            # Some builtins expose no signature; nothing to check against
            return

        try:
            sig.bind(*args, **kwargs)
        except TypeError as e:
            msg = f"Parameters don't match {cls.__name__} signature: {e}"
            raise TypeError(msg) from e

    def _fail(self, identifier: object, kind: ErrorKind, message: str) -> NoReturn:
        logger.debug("%r: %s", self, message)
        self._error_handler.invoke(self, ErrorEventArgs(identifier, kind))
        raise ResolutionError(message, identifier, kind)

    def _create_scope_instance(self, key: Hashable, shape: ScopeShape) -> Container:
        name = f"{self.name or 'container'}[{key!r}].{shape.value}"
        if shape is ScopeShape.INHERITED:
            return Container(name, _fallback=self._lookup)
        return Container(name)

    def _scope_instances(self) -> Iterator[Container]:
        for scope in self.scopes:
            for instance in scope.instances:
                if not instance.is_disposed:
                    yield instance

    def _teardown(self) -> None:
        logger.debug("%r: disposing", self)
        with self._lock:
            scopes = list(self._scopes.values())
            self._scopes.clear()

        # inherited children take their own lock before ours, so dispose them outside it
        for scope in scopes:
            if not scope.is_disposed:
                scope.dispose()

        with self._lock:
            self._singletons.clear()
            self._bindings.clear()

        self._error_handler.dispose()
        self._created_handler.dispose()
        self._resolved_handler.dispose()
