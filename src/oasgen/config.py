"""Runtime configuration, loaded from ``OASGEN_*`` environment variables."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from oasgen.api.base import CONTENT_TYPE_JSON


class Settings(BaseSettings):
    """Settings shared by the synthesizer, the assembler and the CLI.

    The ``*_key`` fields name the entries read from a field's free-form
    metadata (``Field(json_schema_extra=...)`` or ``dataclasses.field(metadata=...)``)
    so projects can keep their own annotation vocabulary.
    """

    openapi_version: str = "3.0.3"
    default_content_type: str = CONTENT_TYPE_JSON
    example_name_format: str = "Sample {n}"

    query_key: str = "query"
    header_key: str = "header"
    cookie_key: str = "cookie"
    description_key: str = "description"
    name_key: str = "name"
    embed_key: str = "embed"

    snake_case_names: bool = False
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="OASGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("example_name_format")
    @classmethod
    def _check_example_name_format(cls, v: str) -> str:
        if "{n}" not in v:
            raise ValueError("example_name_format must contain '{n}'")
        return v

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, v: str) -> str:
        return v.upper()

    def example_name(self, n: int) -> str:
        return self.example_name_format.format(n=n)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings instance."""
    return Settings()
