"""Invariant markers for vizspec."""

from __future__ import annotations

from typing import Callable, NoReturn, TypeVar

from vizspec.exceptions import NeverThrown

FuncT = TypeVar("FuncT", bound=Callable[..., object])


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The optional env payload is attached to the raised exception for
    diagnostics; it is not evaluated otherwise.
    """
    raise NeverThrown(reason or "never() marker reached", env=env)


def pure(func: FuncT) -> FuncT:
    """Marker decorator for functions that neither mutate inputs nor do I/O."""
    return func
