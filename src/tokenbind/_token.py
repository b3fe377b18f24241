from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar


T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class Token(Generic[T]):
    """Identity-bearing handle for a contract.

    Equality and hashing are by identity: two tokens created with the same
    label are still different tokens. The label is only used in diagnostics.
    """

    label: str

    def __repr__(self) -> str:
        return f"Token({self.label!r})"


def create_token(label: str) -> Token[T]:
    """Create a new, unique token.

    Example:
      Logger = create_token("Logger")
      container.register(Logger, ConsoleLogger)

    """
    if not isinstance(label, str):
        msg = f"Token label must be a string, got {type(label).__name__}"
        raise TypeError(msg)
    return Token(label)
