from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ._token import Token


class ResolutionError(RuntimeError):
    pass


class DependencyNotFoundError(ResolutionError):
    """Raised when a token has no binding."""

    def __init__(self, token: Token[object]) -> None:
        super().__init__(f"Dependency not found: {token.label}")
        self.token = token


class CircularDependencyError(ResolutionError):
    """Raised when a token reappears in the in-flight resolution path.

    `chain` holds the full path in traversal order, ending with the token
    that closed the cycle.
    """

    def __init__(self, chain: Sequence[Token[object]]) -> None:
        self.chain = tuple(chain)
        super().__init__("Circular dependency detected: " + " -> ".join(t.label for t in self.chain))


class InvalidConstructorError(ResolutionError):
    def __init__(self, token: Token[object], message: str) -> None:
        super().__init__(f"Invalid constructor for {token.label}: {message}")
        self.token = token


class NotInjectableError(ResolutionError):
    def __init__(self, producer: Callable[..., object]) -> None:
        name = getattr(producer, "__qualname__", None) or repr(producer)
        super().__init__(
            f"{name} is not marked as injectable. Use @injectable(), @singleton() or @transient()."
        )
        self.producer = producer


class NoActiveContextError(ResolutionError):
    def __init__(self) -> None:
        super().__init__(
            "No active container. Call set_active() before using get(), or call get() during resolve()."
        )
