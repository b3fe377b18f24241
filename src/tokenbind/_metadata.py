from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol, TypeVar

from ._token import Token


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    P = TypeVar("P", bound=Callable[..., object])

# Attribute holding the declaration on the decorated producer
_META_ATTR = "__tokenbind_metadata__"


class Lifecycle(Enum):
    SINGLETON = "singleton"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class InjectableMetadata:
    lifecycle: Lifecycle | None
    dependencies: tuple[Token[object] | None, ...] | None  # None: nothing declared


class MetadataProvider(Protocol):
    """Answers the three questions the container asks about a producer."""

    def is_injectable(self, producer: Callable[..., object]) -> bool: ...

    def get_lifecycle(self, producer: Callable[..., object]) -> Lifecycle | None: ...

    def get_dependency_tokens(self, producer: Callable[..., object]) -> Sequence[Token[object] | None] | None: ...


class DecoratorMetadata:
    """Metadata provider reading declarations made with the decorators below.

    Metadata is looked up in the producer's own namespace, so a subclass of a
    decorated class is not injectable until it is decorated itself.
    """

    def is_injectable(self, producer: Callable[..., object]) -> bool:
        return _lookup(producer) is not None

    def get_lifecycle(self, producer: Callable[..., object]) -> Lifecycle | None:
        meta = _lookup(producer)
        return meta.lifecycle if meta else None

    def get_dependency_tokens(self, producer: Callable[..., object]) -> Sequence[Token[object] | None] | None:
        meta = _lookup(producer)
        return meta.dependencies if meta else None


def _lookup(producer: Callable[..., object]) -> InjectableMetadata | None:
    namespace = getattr(producer, "__dict__", None) or {}
    meta = namespace.get(_META_ATTR)
    return meta if isinstance(meta, InjectableMetadata) else None


def _mark(lifecycle: Lifecycle | None, tokens: tuple[object, ...]) -> Callable[[P], P]:
    for index, token in enumerate(tokens):
        if token is not None and not isinstance(token, Token):
            msg = f"Dependency {index} must be a Token or None, got {type(token).__name__}"
            raise TypeError(msg)

    meta = InjectableMetadata(lifecycle=lifecycle, dependencies=tokens or None)  # type: ignore[arg-type]

    def decorator(producer: P) -> P:
        if not callable(producer):
            msg = f"Only classes and callables can be marked injectable, got {type(producer).__name__}"
            raise TypeError(msg)
        setattr(producer, _META_ATTR, meta)
        return producer

    return decorator


def injectable(*dependencies: Token[object] | None) -> Callable[[P], P]:
    """Mark a class or factory function as injectable, without a lifecycle.

    Positional tokens declare the constructor parameters, in order:

      @injectable(Logger, Database)
      class UserServiceImpl:
          def __init__(self, logger, database): ...

    """
    return _mark(None, dependencies)


def singleton(*dependencies: Token[object] | None) -> Callable[[P], P]:
    """Mark as injectable with one shared instance per container."""
    return _mark(Lifecycle.SINGLETON, dependencies)


def transient(*dependencies: Token[object] | None) -> Callable[[P], P]:
    """Mark as injectable with a new instance on every resolution."""
    return _mark(Lifecycle.TRANSIENT, dependencies)
