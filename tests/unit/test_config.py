import pytest
from pydantic import ValidationError

from phrasal.config import PhrasalSettings, get_settings


@pytest.fixture(autouse=True)
def reset_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    for name in ("DIFF_CONTEXT_LINES", "MAX_REPR_LENGTH", "PHRASE_INDEX"):
        monkeypatch.delenv(f"PHRASAL_{name}", raising=False)

    settings = get_settings()

    assert settings.diff_context_lines == 3
    assert settings.max_repr_length == 200
    assert settings.phrase_index is True


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PHRASAL_MAX_REPR_LENGTH", "20")
    monkeypatch.setenv("PHRASAL_PHRASE_INDEX", "false")

    settings = get_settings()

    assert settings.max_repr_length == 20
    assert settings.phrase_index is False


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_invalid_values_are_rejected(monkeypatch):
    monkeypatch.setenv("PHRASAL_MAX_REPR_LENGTH", "3")

    with pytest.raises(ValidationError):
        PhrasalSettings()


def test_max_repr_length_truncates_messages(monkeypatch):
    from phrasal import AssertionFailedError, check

    monkeypatch.setenv("PHRASAL_MAX_REPR_LENGTH", "20")

    with pytest.raises(AssertionFailedError) as exc_info:
        check("x" * 100, "to be a number")

    assert "x" * 30 not in exc_info.value.message
    assert "..." in exc_info.value.message
