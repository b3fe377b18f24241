"""Ambient access to the active container.

Objects can call `get(token)` instead of receiving the container. Two layers
are consulted, innermost first:

- a per-thread/per-task override installed by `activated()`; the container
  installs itself this way while constructing, so nested `get()` calls resolve
  against the container doing the construction;
- the process-wide container set with `set_active()`.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, TypeVar

from ._errors import NoActiveContextError


if TYPE_CHECKING:
    from collections.abc import Iterator

    from ._container import Container
    from ._token import Token

    T = TypeVar("T")


_lock = threading.Lock()
_active: Container | None = None
_override: ContextVar[Container | None] = ContextVar("tokenbind_active_container", default=None)


def set_active(container: Container | None) -> None:
    """Set the process-wide active container. Pass None to unset it."""
    global _active  # noqa: PLW0603
    with _lock:
        _active = container


def get_active() -> Container:
    container = _override.get()
    if container is not None:
        return container

    with _lock:
        container = _active

    if container is None:
        raise NoActiveContextError
    return container


def get(token: Token[T]) -> T:
    """Resolve `token` from the active container."""
    return get_active().resolve(token)


@contextmanager
def activated(container: Container) -> Iterator[Container]:
    """Make `container` the active one for the current thread/task until exit."""
    reset_token = _override.set(container)
    try:
        yield container
    finally:
        _override.reset(reset_token)
