"""Configuration management with Pydantic settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """shelf configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHELF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    archive_type: str = Field(
        default="tar",
        description="Archive format used when --type is not given (tar or zip)",
    )

    compress_level: int | None = Field(
        default=None,
        description="Compression level used when --compress-level is not given",
    )

    interpreter: str = Field(
        default="/bin/sh",
        description="Interpreter named in the shebang of generated scripts",
    )

    executable_suffixes: list[str] = Field(
        default_factory=lambda: [".sh"],
        description="Case-sensitive file suffixes that are embedded with mode 0o755",
    )

    temp_prefix: str = Field(
        default="shelf",
        pattern=r"^[A-Za-z0-9._-]+$",
        description="Name prefix of the temporary extraction directory",
    )

    stdout_spool_bytes: int = Field(
        default=16 * 1024 * 1024,
        ge=0,
        description="Bytes buffered in memory before stdout output spools to disk",
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings | None) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
