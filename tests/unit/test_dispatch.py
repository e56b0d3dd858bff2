import pytest

import phrasal
from phrasal import (
    AssertionFailure,
    AssertionFailedError,
    AssertionImplementationError,
    UnexpectedAsyncError,
    UnknownAssertionError,
    ValidationRequest,
    check,
    create_assertion,
    satisfies,
    schema,
)


is_even = create_assertion(["to be even"], lambda n: n % 2 == 0, {"category": "numeric"})


@pytest.fixture
def kit():
    return phrasal.extend_with([is_even])


def test_registered_relation_passes_and_fails(kit):
    assert kit.check(4, "to be even") is None

    with pytest.raises(AssertionFailedError) as exc_info:
        kit.check(3, "to be even")

    assert exc_info.value.actual == 3
    assert exc_info.value.assertion_id == is_even.id
    assert "to be even" in str(exc_info.value)


def test_negated_relation_passes_when_relation_fails(kit):
    kit.check(3, "not to be even")


def test_builtin_comparison():
    check(5, "to be greater than", 3)

    with pytest.raises(AssertionFailedError):
        check(2, "to be greater than", 5)


def test_unknown_phrase_raises_unknown_assertion():
    with pytest.raises(UnknownAssertionError) as exc_info:
        check(42, "to do something impossible")

    err = exc_info.value
    assert err.subject == 42
    assert err.call_args == (42, "to do something impossible")
    assert err.phrases == ["to do something impossible"]
    assert "42" in str(err)
    assert "to do something impossible" in str(err)
    assert isinstance(err, TypeError)


def test_argument_count_must_match_slot_count():
    with pytest.raises(UnknownAssertionError):
        check(5, "to be greater than")
    with pytest.raises(UnknownAssertionError):
        check(5, "to be greater than", 3, 4)


def test_parameter_validators_must_accept_arguments():
    with pytest.raises(UnknownAssertionError):
        check(5, "to be greater than", "3")


def test_dispatch_is_deterministic(kit):
    for _ in range(3):
        kit.check(4, "to be even")
        with pytest.raises(AssertionFailedError):
            kit.check(5, "to be even")


def test_first_matching_registration_wins():
    lenient = create_assertion(["to be acceptable"], lambda _: True)
    strict = create_assertion(["to be acceptable"], lambda _: False)

    phrasal.extend_with([lenient, strict]).check(1, "to be acceptable")
    with pytest.raises(AssertionFailedError):
        phrasal.extend_with([strict, lenient]).check(1, "to be acceptable")


def test_phrase_tokens_are_excluded_from_values():
    seen = []

    def impl(subject, low, high):
        seen.append((subject, low, high))
        return True

    kit = phrasal.extend_with([create_assertion([int, "to sit within", int, "and", int], impl)])
    kit.check(5, "to sit within", 1, "and", 9)

    assert seen == [(5, 1, 9)]


def test_returned_validator_is_applied_to_subject():
    kit = phrasal.extend_with([create_assertion(["to be an integer-like"], lambda _: schema(int))])

    kit.check(3, "to be an integer-like")
    with pytest.raises(AssertionFailedError) as exc_info:
        kit.check("3", "to be an integer-like")

    assert exc_info.value.actual == "3"


def test_validator_implementation_is_applied_to_subject():
    kit = phrasal.extend_with(
        [create_assertion(["to be positive"], satisfies(lambda n: n > 0, name="positive"))]
    )

    kit.check(1, "to be positive")
    with pytest.raises(AssertionFailedError, match="positive"):
        kit.check(-1, "to be positive")


def test_validation_request_validates_another_value():
    def impl(text):
        return ValidationRequest(subject=len(text), validator=lambda n: n % 2 == 0)

    kit = phrasal.extend_with([create_assertion([str, "to have an even length"], impl)])

    kit.check("ab", "to have an even length")
    with pytest.raises(AssertionFailedError) as exc_info:
        kit.check("abc", "to have an even length")

    assert exc_info.value.actual == 3


def test_returned_failure_carries_fields_and_diff():
    def impl(subject, expected):
        return AssertionFailure(actual=subject, expected=expected, message="lists differ")

    kit = phrasal.extend_with([create_assertion([list, "to look like", list], impl)])

    with pytest.raises(AssertionFailedError) as exc_info:
        kit.check([1, 2], "to look like", [1, 3])

    err = exc_info.value
    assert err.message == "lists differ"
    assert err.actual == [1, 2]
    assert err.expected == [1, 3]
    assert "--- expected" in err.diff
    assert "-[1, 3]" in err.diff
    assert "+[1, 2]" in err.diff
    assert str(err).startswith("lists differ\n\n")


def test_returned_failure_without_message_gets_default():
    kit = phrasal.extend_with([create_assertion(["to be special"], lambda _: AssertionFailure())])

    with pytest.raises(AssertionFailedError, match="to be special"):
        kit.check(1, "to be special")


def test_raised_assertion_error_is_a_failure():
    def impl(subject):
        assert subject == "yes", "subject was not yes"

    kit = phrasal.extend_with([create_assertion(["to be yes"], impl)])

    kit.check("yes", "to be yes")
    with pytest.raises(AssertionFailedError, match="subject was not yes") as exc_info:
        kit.check("no", "to be yes")

    assert isinstance(exc_info.value.__cause__, AssertionError)
    kit.check("no", "not to be yes")


def test_raised_assertion_failed_error_is_reraised_verbatim():
    original = AssertionFailedError(AssertionFailure(message="custom"))

    def impl(_):
        raise original

    kit = phrasal.extend_with([create_assertion(["to explode politely"], impl)])

    with pytest.raises(AssertionFailedError) as exc_info:
        kit.check(1, "to explode politely")

    assert exc_info.value is original


def test_raised_pydantic_validation_error_is_a_failure():
    from pydantic import TypeAdapter

    kit = phrasal.extend_with(
        [create_assertion(["to parse as int"], lambda s: TypeAdapter(int).validate_python(s) and True)]
    )

    with pytest.raises(AssertionFailedError):
        kit.check("abc", "to parse as int")


def test_unexpected_exception_is_an_implementation_error():
    def impl(_):
        raise ValueError("boom")

    kit = phrasal.extend_with([create_assertion(["to go boom"], impl)])

    with pytest.raises(AssertionImplementationError) as exc_info:
        kit.check(1, "to go boom")

    assert isinstance(exc_info.value.__cause__, ValueError)
    assert exc_info.value.code == "ERR_PHRASAL_ASSERTION_IMPL"


def test_implementation_errors_are_never_inverted():
    def impl(_):
        raise ValueError("boom")

    kit = phrasal.extend_with([create_assertion(["to go bang"], impl)])

    with pytest.raises(AssertionImplementationError):
        kit.check(1, "not to go bang")


def test_invalid_return_type_is_an_implementation_error():
    kit = phrasal.extend_with([create_assertion(["to return junk"], lambda _: 42)])

    with pytest.raises(AssertionImplementationError, match="Invalid return type") as exc_info:
        kit.check(1, "to return junk")

    assert exc_info.value.result == 42


def test_sync_check_rejects_awaitable_results():
    async def impl(_):
        return True

    kit = phrasal.extend_with([create_assertion(["to be awaited"], impl)])

    with pytest.raises(UnexpectedAsyncError, match="check_async"):
        kit.check(1, "to be awaited")


def test_nested_checks_inside_implementations():
    def impl(pair):
        check(pair, "to have length", 2)
        check(pair[0], "to be less than", pair[1])

    kit = phrasal.extend_with([create_assertion([tuple, "to be an ordered pair"], impl)])

    kit.check((1, 2), "to be an ordered pair")
    with pytest.raises(AssertionFailedError):
        kit.check((2, 1), "to be an ordered pair")


def test_phrase_index_can_be_disabled(monkeypatch):
    from phrasal.config import get_settings

    monkeypatch.setenv("PHRASAL_PHRASE_INDEX", "false")
    get_settings.cache_clear()
    try:
        kit = phrasal.extend_with([is_even])
        kit.check(4, "to be even")
        with pytest.raises(UnknownAssertionError):
            kit.check(4, "to be odd")
    finally:
        get_settings.cache_clear()
