"""
Key conversion between Python attribute names and the camelCase wire format.
"""

from __future__ import annotations

import re
from typing import Any, Callable

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_to_camel(key: str) -> str:
    head, *tail = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)


def camel_to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def convert_keys(data: Any, direction: str) -> Any:
    """
    Recursively rename dict keys in `data`.

    Args:
        data: A JSON-like value (dicts, lists and scalars).
        direction: Either "snake_to_camel" or "camel_to_snake".

    Returns:
        A new value with every dict key converted; lists are rebuilt and
        scalars are returned unchanged.
    """
    if direction == "snake_to_camel":
        convert = snake_to_camel
    elif direction == "camel_to_snake":
        convert = camel_to_snake
    else:
        raise ValueError(f"Unknown key conversion direction: {direction}")
    return _convert(data, convert)


def _convert(data: Any, convert: Callable[[str], str]) -> Any:
    if isinstance(data, dict):
        return {convert(key): _convert(value, convert) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [_convert(item, convert) for item in data]
    return data
