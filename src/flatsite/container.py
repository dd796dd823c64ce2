"""Dependency injection container.

Maps types (usually protocols) to instances or factories and builds
controller classes by reading their constructor annotations.
"""

import inspect
import logging
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ContainerError(Exception):
    """Raised when a dependency cannot be resolved."""


@dataclass
class _Provider:
    factory: Callable[[], Any]
    singleton: bool


class Container:
    """Type-keyed registry with constructor autowiring.

    Registered keys always win. Unregistered concrete classes are built by
    resolving each ``__init__`` parameter from its type annotation.
    """

    def __init__(self) -> None:
        self._instances: dict[type, Any] = {}
        self._providers: dict[type, _Provider] = {}

    def register(self, key: type[T], instance: T) -> None:
        """Register a ready-made instance under ``key``."""
        self._instances[key] = instance

    def register_factory(
        self,
        key: type[T],
        factory: Callable[[], T],
        *,
        singleton: bool = True,
    ) -> None:
        """Register a zero-argument factory under ``key``.

        Singleton factories run once, on first lookup.
        """
        self._instances.pop(key, None)
        self._providers[key] = _Provider(factory=factory, singleton=singleton)

    def has(self, key: type) -> bool:
        return key in self._instances or key in self._providers

    def get(self, key: type[T]) -> T:
        """Look up a registered service.

        Raises:
            ContainerError: If nothing is registered under ``key``
        """
        if key in self._instances:
            return self._instances[key]

        provider = self._providers.get(key)
        if provider is None:
            raise ContainerError(f"No service registered for {_name(key)}")

        instance = provider.factory()
        if provider.singleton:
            self._instances[key] = instance
        return instance

    def resolve(self, cls: type[T]) -> T:
        """Return the registered service for ``cls`` or build a new one.

        Raises:
            ContainerError: If a constructor parameter cannot be satisfied
        """
        return self._resolve(cls, ())

    def _resolve(self, cls: type[T], chain: tuple[type, ...]) -> T:
        if self.has(cls):
            return self.get(cls)

        if cls in chain:
            cycle = " -> ".join(_name(c) for c in (*chain, cls))
            raise ContainerError(f"Dependency cycle: {cycle}")

        if not _is_autowirable(cls):
            raise ContainerError(f"Cannot instantiate {_name(cls)}: no service registered")

        kwargs = {}
        for name, param, annotation in _constructor_params(cls):
            if annotation is None:
                if param.default is not inspect.Parameter.empty:
                    continue
                raise ContainerError(
                    f"Cannot resolve parameter '{name}' of {_name(cls)}: missing type annotation"
                )
            try:
                kwargs[name] = self._resolve(annotation, (*chain, cls))
            except ContainerError:
                if param.default is not inspect.Parameter.empty:
                    continue
                raise

        logger.debug(f"Autowiring {_name(cls)} with {sorted(kwargs)}")
        return cls(**kwargs)


def _constructor_params(cls: type) -> list[tuple[str, inspect.Parameter, Any]]:
    """List ``(name, parameter, annotation)`` for ``cls.__init__``."""
    init = cls.__init__
    if init is object.__init__:
        return []

    try:
        hints = typing.get_type_hints(init)
    except NameError as e:
        raise ContainerError(f"Cannot read annotations of {_name(cls)}: {e}") from e

    params = []
    for name, param in inspect.signature(init).parameters.items():
        if name == "self" or param.kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        ):
            continue
        params.append((name, param, hints.get(name)))
    return params


def _is_autowirable(cls: object) -> bool:
    # Builtins (str, int, ...) are values, not services.
    return (
        inspect.isclass(cls)
        and cls.__module__ != "builtins"
        and not inspect.isabstract(cls)
        and not getattr(cls, "_is_protocol", False)
    )


def _name(obj: object) -> str:
    return getattr(obj, "__qualname__", repr(obj))
