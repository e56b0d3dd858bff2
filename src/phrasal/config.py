"""Runtime configuration for phrasal."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PhrasalSettings(BaseSettings):
    """Settings that tune diagnostics and dispatch.

    Loads from environment variables automatically:
        PHRASAL_DIFF_CONTEXT_LINES, PHRASAL_MAX_REPR_LENGTH,
        PHRASAL_PHRASE_INDEX
    """

    diff_context_lines: int = Field(
        default=3, ge=0, description="Context lines shown around each hunk of a failure diff"
    )
    max_repr_length: int = Field(
        default=200, ge=10, description="Truncate value reprs in messages beyond this length"
    )
    phrase_index: bool = Field(
        default=True, description="Narrow candidate registrations by phrase before matching"
    )

    model_config = SettingsConfigDict(
        env_prefix="PHRASAL_",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> PhrasalSettings:
    """Return the process-wide settings, loaded once from the environment."""
    return PhrasalSettings()
