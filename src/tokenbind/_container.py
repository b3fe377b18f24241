from __future__ import annotations

import logging
import threading
from contextlib import nullcontext
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from ._context import activated
from ._errors import (
    CircularDependencyError,
    DependencyNotFoundError,
    InvalidConstructorError,
    NotInjectableError,
    ResolutionError,
)
from ._metadata import DecoratorMetadata, Lifecycle
from ._token import Token


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from contextlib import AbstractContextManager

    from ._metadata import MetadataProvider

    T = TypeVar("T")


@dataclass(frozen=True)
class Binding:
    token: Token[Any]
    producer: Callable[..., object]
    lifecycle: Lifecycle
    dependencies: tuple[Token[Any] | None, ...] | None  # None: nothing declared


class _ResolutionPath(threading.local):
    """Tokens under construction on the current thread."""

    def __init__(self) -> None:
        self.tokens: list[Token[Any]] = []


class Container:
    """Token-based DI container.

    - register injectable producers (classes or factory functions) under tokens
    - resolve with constructor injection in declaration order
    - lifecycles: singleton / transient
    - cycle detection over the in-flight resolution path.
    """

    def __init__(self, *, metadata: MetadataProvider | None = None, ambient: bool = True) -> None:
        self._metadata: MetadataProvider = metadata if metadata is not None else DecoratorMetadata()
        self._ambient = ambient
        self._bindings: dict[Token[Any], Binding] = {}
        self._singletons: dict[Token[Any], object] = {}
        self._path = _ResolutionPath()
        self._lock = threading.RLock()

    def register(self, token: Token[T], producer: Callable[..., T]) -> None:
        """Register an injectable producer for a token.

        Lifecycle and dependency tokens are read from the metadata provider;
        the lifecycle defaults to transient.

        Example:
          container.register(Logger, ConsoleLogger)

        """
        _check_token(token)
        if not callable(producer):
            raise InvalidConstructorError(token, "producer must be a class or a callable")

        if not self._metadata.is_injectable(producer):
            raise NotInjectableError(producer)

        lifecycle = self._metadata.get_lifecycle(producer) or Lifecycle.TRANSIENT
        declared = self._metadata.get_dependency_tokens(producer)
        dependencies = None if declared is None else tuple(declared)

        self._bind(Binding(token=token, producer=producer, lifecycle=lifecycle, dependencies=dependencies))

    def register_factory(
        self,
        token: Token[T],
        factory: Callable[..., T],
        *,
        lifecycle: Lifecycle = Lifecycle.TRANSIENT,
        dependencies: Iterable[Token[Any]] = (),
    ) -> None:
        """Register a factory with an explicit lifecycle and dependency list.

        The metadata provider is not consulted, so `factory` needs no decorator.

        Example:
          container.register_factory(Database, make_db, lifecycle=Lifecycle.SINGLETON, dependencies=[Logger])

        """
        _check_token(token)
        if not callable(factory):
            raise InvalidConstructorError(token, "factory must be callable")

        if not isinstance(lifecycle, Lifecycle):
            msg = f"lifecycle must be a Lifecycle, got {lifecycle!r}"
            raise TypeError(msg)

        deps = tuple(dependencies)
        for dep in deps:
            _check_token(dep)

        self._bind(Binding(token=token, producer=factory, lifecycle=lifecycle, dependencies=deps))

    def register_instance(self, token: Token[T], instance: T) -> None:
        """Register a pre-built instance (always singleton)."""
        _check_token(token)
        self._bind(
            Binding(token=token, producer=lambda: instance, lifecycle=Lifecycle.SINGLETON, dependencies=None)
        )

    def _bind(self, binding: Binding) -> None:
        with self._lock:
            self._bindings[binding.token] = binding
            # Nothing built by a previous producer may survive re-registration
            self._singletons.pop(binding.token, None)

        logger.debug(
            "Registered %s -> %s (%s)",
            binding.token.label,
            getattr(binding.producer, "__qualname__", repr(binding.producer)),
            binding.lifecycle.value,
        )

    def is_registered(self, token: Token[Any]) -> bool:
        with self._lock:
            return token in self._bindings

    def resolve(self, token: Token[T]) -> T:
        """Resolve the token to an instance.

        - No binding: DependencyNotFoundError.
        - Token already being constructed on this thread: CircularDependencyError.
        - Cached singleton: returned as is.
        - Otherwise the declared dependencies are resolved in order and the
          producer is called with them.
        """
        _check_token(token)
        with self._lock:
            binding = self._bindings.get(token)
            if binding is None:
                raise DependencyNotFoundError(token)

            path = self._path.tokens
            if token in path:
                raise CircularDependencyError([*path, token])

            if binding.lifecycle is Lifecycle.SINGLETON and token in self._singletons:
                return self._singletons[token]  # type: ignore[return-value]

            path.append(token)
            try:
                instance = self._construct(binding)
                if binding.lifecycle is Lifecycle.SINGLETON:
                    self._cache_singleton(token, instance)
            finally:
                path.pop()

            return instance  # type: ignore[return-value]

    def _construct(self, binding: Binding) -> object:
        with self._activation():
            args = self._resolve_dependencies(binding)

            if binding.lifecycle is Lifecycle.SINGLETON:
                logger.debug("Constructing singleton %s", binding.token.label)

            try:
                return binding.producer(*args)
            except ResolutionError:
                # Container errors from nested lookups propagate unchanged
                raise
            except Exception as e:
                msg = f"failed to instantiate: {str(e) or type(e).__name__}"
                raise InvalidConstructorError(binding.token, msg) from e

    def _resolve_dependencies(self, binding: Binding) -> list[object]:
        declared = binding.dependencies
        if not declared:
            return []

        for index, dep in enumerate(declared):
            if dep is None:
                msg = f"missing dependency declaration for parameter {index}"
                raise InvalidConstructorError(binding.token, msg)

        return [self.resolve(dep) for dep in declared]  # type: ignore[arg-type]

    def _cache_singleton(self, token: Token[Any], instance: object) -> None:
        if token in self._singletons:
            # Only reachable if cycle detection let a re-entrant construction through
            msg = f"Singleton {token.label} was constructed more than once in a single resolution"
            raise ResolutionError(msg)
        self._singletons[token] = instance

    def _activation(self) -> AbstractContextManager[object]:
        return activated(self) if self._ambient else nullcontext()

    def clear(self) -> None:
        """Drop cached singletons so they are rebuilt on next resolution. Bindings are kept."""
        with self._lock:
            self._singletons.clear()
            self._path.tokens = []
        logger.debug("Cleared singleton cache")

    def reset(self) -> None:
        """Drop all bindings and cached singletons."""
        with self._lock:
            self._bindings.clear()
            self._singletons.clear()
            self._path.tokens = []
        logger.debug("Reset container")


def _check_token(token: object) -> None:
    if not isinstance(token, Token):
        msg = f"Expected a Token, got {type(token).__name__}. Create one with create_token()."
        raise TypeError(msg)
