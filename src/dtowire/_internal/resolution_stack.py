from __future__ import annotations

from collections.abc import Generator, Hashable
from contextlib import contextmanager
from contextvars import ContextVar

# Keys of the container builds and population passes running in this context.
_resolution_stack: ContextVar[tuple[Hashable, ...]] = ContextVar(
    "dtowire_resolution_stack",
    default=(),
)


def is_active(key: Hashable) -> bool:
    """Return whether ``key`` is currently being resolved in this context."""
    return key in _resolution_stack.get()


@contextmanager
def tracking(key: Hashable) -> Generator[None, None, None]:
    """Mark ``key`` as active in this context for the duration of the block."""
    token = _resolution_stack.set((*_resolution_stack.get(), key))
    try:
        yield
    finally:
        _resolution_stack.reset(token)


__all__ = ["is_active", "tracking"]
