import pytest

import phrasal
from phrasal import AssertionFailedError, check, create_assertion
from phrasal.context import CHECK_RECORDS_COLLECTOR, CheckRecord, check_records_collector


def test_check_records_collected_in_scope():
    records: list[CheckRecord] = []

    with check_records_collector(records):
        check(5, "to be greater than", 3)
        check("x", "not to be a number")

    assert [record.passed for record in records] == [True, True]
    assert records[0].assertion_id == "number-to-be-greater-than-to-be-above-number-3s3p"
    assert records[1].negated is True

    # Outside the scope, records are not collected.
    check(5, "to be greater than", 3)
    assert len(records) == 2
    assert CHECK_RECORDS_COLLECTOR.get() is None


def test_failed_conjunct_is_recorded_before_raising():
    records: list[CheckRecord] = []

    with check_records_collector(records), pytest.raises(AssertionFailedError):
        check(5, "to be a number", "and", "to be greater than", 10)

    assert [record.passed for record in records] == [True, False]
    assert "to be > 10" in records[1].message


def test_validator_conjunct_records():
    records: list[CheckRecord] = []

    with check_records_collector(records):
        check(5, "to be a number", "and", int)

    assert records[1].assertion_id == "validator"
    assert records[1].signature == "int"


def test_nested_dispatches_are_recorded():
    def impl(pair):
        check(pair[0], "to be less than", pair[1])

    kit = phrasal.extend_with([create_assertion([tuple, "to be ascending"], impl)])
    records: list[CheckRecord] = []

    with check_records_collector(records):
        kit.check((1, 2), "to be ascending")

    assert [record.signature for record in records] == [
        "{number} 'to be less than' / 'to be below' {number}",
        "{tuple} 'to be ascending'",
    ]


def test_nested_collectors_restore_outer_scope():
    outer: list[CheckRecord] = []
    inner: list[CheckRecord] = []

    with check_records_collector(outer):
        with check_records_collector(inner):
            check(1, "to be a number")
        check(2, "to be a number")

    assert len(inner) == 1
    assert len(outer) == 1
