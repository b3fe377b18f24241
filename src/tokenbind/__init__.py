"""Token-based dependency injection container.

This package resolves object graphs from a registry of tokens bound to
producers, with singleton/transient lifecycles and cycle detection.

Exports:
- `Container`: registry, singleton cache and resolution engine.
- `Token`, `create_token`: unique identifiers for contracts.
- `Lifecycle`: `SINGLETON` (one shared instance) or `TRANSIENT` (new instance per resolution).
- `injectable`, `singleton`, `transient`: decorators declaring a producer's lifecycle
  and constructor dependency tokens.
- `MetadataProvider`, `DecoratorMetadata`: how the container reads those declarations.
- `set_active`, `get_active`, `get`, `activated`: ambient access to the active container.
- Errors, all subclasses of `ResolutionError`.
"""

from ._container import Binding, Container
from ._context import activated, get, get_active, set_active
from ._errors import (
    CircularDependencyError,
    DependencyNotFoundError,
    InvalidConstructorError,
    NoActiveContextError,
    NotInjectableError,
    ResolutionError,
)
from ._metadata import DecoratorMetadata, Lifecycle, MetadataProvider, injectable, singleton, transient
from ._token import Token, create_token


__all__ = [
    "Binding",
    "CircularDependencyError",
    "Container",
    "DecoratorMetadata",
    "DependencyNotFoundError",
    "InvalidConstructorError",
    "Lifecycle",
    "MetadataProvider",
    "NoActiveContextError",
    "NotInjectableError",
    "ResolutionError",
    "Token",
    "activated",
    "create_token",
    "get",
    "get_active",
    "injectable",
    "set_active",
    "singleton",
    "transient",
]
