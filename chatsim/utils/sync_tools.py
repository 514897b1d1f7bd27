"""Helpers for running coroutines from synchronous entry points."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, ParamSpec, TypeVar

import anyio

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

P = ParamSpec("P")
R = TypeVar("R")


def run_(async_function: Callable[P, Awaitable[R]]) -> Callable[P, R]:
    """Wrap an async callable so it can be invoked from click commands."""

    @functools.wraps(async_function)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        partial_f = functools.partial(async_function, *args, **kwargs)
        return anyio.run(partial_f)  # type: ignore[arg-type]

    return wrapper
