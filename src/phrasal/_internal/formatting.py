"""Helpers for rendering values inside diagnostics."""

from typing import Any

from phrasal.config import get_settings


def truncate(text: str, max_len: int | None = None) -> str:
    limit = max_len if max_len is not None else get_settings().max_repr_length
    return text if len(text) <= limit else text[:limit] + "..."


def inspect_value(value: Any, max_len: int | None = None) -> str:
    """``repr`` of ``value`` shortened to the configured length."""
    try:
        text = repr(value)
    except Exception as err:
        text = f"<unrepresentable {type(value).__name__}: {err!r}>"
    return truncate(text, max_len)


def inspect_args(args: tuple[Any, ...] | list[Any], max_len: int | None = None) -> str:
    return "(" + ", ".join(inspect_value(arg, max_len) for arg in args) + ")"
