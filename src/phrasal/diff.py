"""Diff generation for assertion failures.

Failures that carry both an ``actual`` and an ``expected`` value are shown
with a unified diff, the way a test runner would display them.
"""

from __future__ import annotations

import difflib
import pprint
from typing import TYPE_CHECKING, Any

from phrasal.config import get_settings


if TYPE_CHECKING:
    from phrasal.assertions._base import AssertionFailure


def should_generate_diff(actual: Any, expected: Any) -> bool:
    return actual is not expected


def _render(value: Any) -> list[str]:
    if isinstance(value, str):
        return value.splitlines() or [""]
    return pprint.pformat(value, width=80, sort_dicts=True).splitlines()


def generate_diff(expected: Any, actual: Any, *, context: int | None = None) -> str | None:
    """Unified diff of ``expected`` against ``actual``.

    Returns ``None`` when both sides are the same object or render identically.
    """
    if not should_generate_diff(actual, expected):
        return None
    n = get_settings().diff_context_lines if context is None else context
    lines = list(
        difflib.unified_diff(
            _render(expected),
            _render(actual),
            fromfile="expected",
            tofile="actual",
            n=n,
            lineterm="",
        )
    )
    if not lines:
        return None
    return "\n".join(lines)


def format_failure_diff(failure: AssertionFailure) -> str | None:
    """Diff for a failure.

    Precedence:

    1. ``failure.diff``, returned as-is
    2. ``format_actual``/``format_expected`` applied before diffing
    3. the raw ``actual``/``expected`` values
    """
    if failure.diff is not None:
        return failure.diff
    if not (failure.has_actual and failure.has_expected):
        return None

    actual = failure.format_actual(failure.actual) if failure.format_actual else failure.actual
    expected = (
        failure.format_expected(failure.expected) if failure.format_expected else failure.expected
    )
    options = failure.diff_options or {}
    return generate_diff(expected, actual, context=options.get("context"))
