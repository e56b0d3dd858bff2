import json

import pytest
from click.testing import CliRunner

from phrasal.cli import main, parse_argument


@pytest.fixture
def runner():
    return CliRunner()


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("3", 3),
        ("1.5", 1.5),
        ("[1, 2]", [1, 2]),
        ('"3"', "3"),
        ("null", None),
        ("to be a string", "to be a string"),
        ("and", "and"),
    ],
)
def test_parse_argument(raw, expected):
    assert parse_argument(raw) == expected


def test_check_passes(runner):
    result = runner.invoke(main, ["check", "5", "to be greater than", "3"])

    assert result.exit_code == 0
    assert "PASSED" in result.output


def test_check_with_chain(runner):
    result = runner.invoke(main, ["check", '"hello"', "to be a string", "and", "to have length", "5"])

    assert result.exit_code == 0


def test_check_failure_exit_code(runner):
    result = runner.invoke(main, ["check", "2", "to be greater than", "5"])

    assert result.exit_code == 1
    assert "AssertionFailedError" in result.output


def test_check_negated_failure_exit_code(runner):
    result = runner.invoke(main, ["check", '"x"', "not to be a string"])

    assert result.exit_code == 1
    assert "NegatedAssertionError" in result.output


def test_check_unknown_exit_code(runner):
    result = runner.invoke(main, ["check", "42", "to do something impossible"])

    assert result.exit_code == 2
    assert "UnknownAssertionError" in result.output


def test_catalog_json(runner):
    result = runner.invoke(main, ["catalog", "--json"])

    assert result.exit_code == 0
    entries = json.loads(result.output)
    assert any(entry["id"] == "any-to-be-a-string-2s1p" for entry in entries)
    assert all(entry["capability"] == "sync" for entry in entries)


def test_catalog_async_json(runner):
    result = runner.invoke(main, ["catalog", "--async", "--json"])

    assert result.exit_code == 0
    assert all(entry["capability"] == "async" for entry in json.loads(result.output))


def test_catalog_table(runner):
    result = runner.invoke(main, ["catalog"])

    assert result.exit_code == 0
    assert "ASSERTIONS" in result.output


def test_version(runner):
    result = runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output
