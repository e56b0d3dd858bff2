import pytest

import phrasal
from phrasal import AssertionFailedError, UnknownAssertionError, check, create_assertion
from phrasal.dispatch.matching import AssertionConjunct, conjunction_positions, plan_call


def greater_than_ten(value):
    return value > 10


def test_chained_validator_passes():
    check(42, "to be a number", "and", greater_than_ten)


def test_chained_validator_rejects():
    with pytest.raises(AssertionFailedError) as exc_info:
        check(5, "to be a number", "and", greater_than_ten)

    assert exc_info.value.actual == 5
    assert exc_info.value.assertion_id == "validator"


@pytest.mark.parametrize("subject", [42, 5, "x", 11.5, None])
def test_chain_holds_iff_each_conjunct_holds(subject):
    def passes(*args):
        try:
            check(*args)
        except (AssertionFailedError, UnknownAssertionError):
            return False
        return True

    def accepts(value):
        return isinstance(value, (int, float)) and value > 10

    chained = passes(subject, "to be a number", "and", accepts)
    assert chained is (passes(subject, "to be a number") and accepts(subject))


def test_chains_of_relations_apply_to_original_subject():
    check(42, "to be a number", "and", "to be greater than", 10, "and", "to be less than", 100)

    with pytest.raises(AssertionFailedError):
        check(42, "to be a number", "and", "to be greater than", 10, "and", "to be less than", 20)


def test_relations_and_validators_alternate():
    check("hello", "to be a string", "and", str.islower, "and", "to have length", 5, "and", str)


def test_registration_phrase_and_is_not_split():
    check(5, "to be between", 1, "and", 10)
    check(5, "to be between", 1, "and", 10, "and", "to be an integer")

    with pytest.raises(AssertionFailedError):
        check(5, "to be between", 1, "and", 10, "and", "to be a string")


def test_negation_is_per_conjunct():
    check(5, "not to be a string", "and", "to be greater than", 3)

    with pytest.raises(AssertionFailedError):
        check(5, "not to be a string", "and", "not to be greater than", 3)


def test_deferred_check_as_conjunct():
    check("abc", "to be a string", "and", check.it("to have length", 3))

    with pytest.raises(AssertionFailedError, match="to have length"):
        check("abcd", "to be a string", "and", check.it("to have length", 3))


def test_nothing_runs_until_every_conjunct_resolves():
    calls = []

    def impl(subject):
        calls.append(subject)
        return True

    kit = phrasal.extend_with([create_assertion(["to be counted"], impl)])

    with pytest.raises(UnknownAssertionError):
        kit.check(1, "to be counted", "and", "to frobnicate")

    assert calls == []


def test_failing_conjunct_stops_the_chain():
    calls = []

    def impl(subject):
        calls.append(subject)
        return True

    kit = phrasal.extend_with([create_assertion(["to be counted"], impl)])

    with pytest.raises(AssertionFailedError):
        kit.check(1, "to be a string", "and", "to be counted")

    assert calls == []


def test_plan_prefers_most_conjuncts():
    args = (5, "to be between", 1, "and", 10, "and", "to be an integer")

    plan = plan_call(args, check.resolve)

    assert conjunction_positions(args) == (3, 5)
    assert [type(conjunct) for conjunct in plan] == [AssertionConjunct, AssertionConjunct]
    assert plan[0].match.args == (5, "to be between", 1, "and", 10)
    assert plan[1].match.args == (5, "to be an integer")


def test_plan_skips_empty_segments():
    with pytest.raises(UnknownAssertionError):
        check(5, "to be a number", "and")

    assert plan_call((5, "to be a number", "and"), check.resolve) is None


def test_long_chains_keep_registration_phrase_and():
    links = ["and", int] * 6

    check(5, "to be between", 1, "and", 10, *links)
    check(5, "to be an integer", *links, "and", "to be between", 1, "and", 10, *links)

    with pytest.raises(AssertionFailedError):
        check(5, "to be between", 1, "and", 10, *links, "and", str)


def test_long_chains_resolve_in_quadratic_calls():
    calls = []

    def resolve(args):
        calls.append(args)
        return check.resolve(args)

    args = (5, "to be between", 1, "and", 10, *(["and", "to be an integer"] * 20))

    plan = plan_call(args, resolve)

    ands = len(conjunction_positions(args))
    assert len(plan) == 21
    assert len(calls) <= (ands + 1) * (ands + 2) // 2
