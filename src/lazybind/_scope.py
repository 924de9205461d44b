from __future__ import annotations

import threading
from enum import Enum
from typing import TYPE_CHECKING, Generic, TypeVar

from ._disposable import Disposable


if TYPE_CHECKING:
    from collections.abc import Callable

D = TypeVar("D", bound=Disposable)


class ScopeShape(Enum):
    ISOLATED = "isolated"
    INHERITED = "inherited"


class ContainerScope(Disposable, Generic[D]):
    """Pair of lazily created child containers living under one scope key.

    - `isolated`: cannot see the owner's bindings.
    - `inherited`: falls back to the owner for identifiers it does not bind itself.

    Disposing the scope disposes every child created so far.
    """

    def __init__(self, create: Callable[[ScopeShape], D]) -> None:
        super().__init__()
        self._create = create
        self._instances: dict[ScopeShape, D] = {}
        self._lock = threading.RLock()
        self._disposers.append(self._dispose_instances)

    @property
    def isolated(self) -> D:
        return self._get_or_create(ScopeShape.ISOLATED)

    @property
    def inherited(self) -> D:
        return self._get_or_create(ScopeShape.INHERITED)

    @property
    def instances(self) -> list[D]:
        self._validate_disposed()
        with self._lock:
            return list(self._instances.values())

    def _get_or_create(self, shape: ScopeShape) -> D:
        self._validate_disposed()
        with self._lock:
            instance = self._instances.get(shape)
            if instance is None:
                instance = self._create(shape)
                self._instances[shape] = instance
            return instance

    def _dispose_instances(self) -> None:
        with self._lock:
            for instance in self._instances.values():
                if not instance.is_disposed:
                    instance.dispose()
            self._instances.clear()
