"""Environment variable helpers used as dataclass default factories."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar, cast, get_origin

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")

TRUE_VALUES = {"true", "1", "yes", "y", "t", "on"}


def _parse_list(value: str) -> list[str]:
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        try:
            return [str(v) for v in json.loads(value)]
        except (SyntaxError, ValueError):
            msg = f"{value} is not a valid list representation."
            raise ValueError(msg) from None
    return [item.strip() for item in value.split(",") if item.strip()]


def get_config_val(key: str, default: T, type_hint: Any = None) -> T:
    """Read ``key`` from the environment and coerce it to the type of ``default``.

    Args:
        key: Environment variable name.
        default: Value returned when the variable is unset.
        type_hint: Explicit target type, for values whose default does not
            carry enough information (``list[str]`` and friends).

    Returns:
        The parsed value, or ``default``.
    """
    value = os.getenv(key)
    if value is None:
        return default

    target = type_hint if type_hint is not None else type(default)
    if get_origin(target) is list or target is list:
        return cast("T", _parse_list(value))
    if target is bool:
        return cast("T", value.strip().lower() in TRUE_VALUES)
    if target is int:
        return cast("T", int(value))
    if target is float:
        return cast("T", float(value))
    if target is Path or isinstance(default, Path):
        return cast("T", Path(value))
    return cast("T", value)


def get_env(key: str, default: T, type_hint: Any = None) -> Callable[[], T]:
    """Return a zero-argument factory reading ``key`` from the environment."""
    return lambda: get_config_val(key=key, default=default, type_hint=type_hint)
