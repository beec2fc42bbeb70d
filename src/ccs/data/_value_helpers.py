"""Coercion helpers for loosely typed JSON values."""

from __future__ import annotations


def as_str(value: object) -> str:
    return value if isinstance(value, str) else ""


def as_id(value: object) -> str:
    """Identifiers show up as strings or bare integers depending on the writer."""
    if isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    return ""


def as_int(value: object) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value))
        except ValueError:
            return 0
    return 0


def as_bool(value: object) -> bool:
    return value if isinstance(value, bool) else False


def as_str_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]
