from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from pydantic import BaseModel


class CheckRecord(BaseModel):
    """One settled conjunct of a ``check`` call.

    Attributes:
    ----------
    assertion_id : str
        Id of the matched registration, or ``"validator"`` for a chained validator.
    signature : str
        Rendered slot signature, or the validator's name.
    negated : bool
        Whether the call used a ``"not "`` phrase.
    passed : bool
        Whether the conjunct held after negation was applied.
    message : str | None
        Failure message when the conjunct did not hold.
    """

    assertion_id: str
    signature: str
    negated: bool = False
    passed: bool
    message: str | None = None


CHECK_RECORDS_COLLECTOR: ContextVar[list[CheckRecord] | None] = ContextVar(
    "check_records_collector", default=None
)


def collect_check_record(record: CheckRecord) -> None:
    """Append ``record`` to the bound collector, if any."""
    records = CHECK_RECORDS_COLLECTOR.get()
    if records is not None:
        records.append(record)


@contextmanager
def check_records_collector(ctx: list[CheckRecord]) -> Iterator[None]:
    token = CHECK_RECORDS_COLLECTOR.set(ctx)
    try:
        yield
    finally:
        CHECK_RECORDS_COLLECTOR.reset(token)
