"""Ingestion configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class TimetableConfig(BaseSettings):
    """Ingestion configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Resit export
    resit_sheet_name: str = Field(
        default="SPECIAL RESIT",
        description="Workbook sheet holding the special resit table",
    )
    resit_strict: bool = Field(
        default=True,
        description="Fail the whole resit import if any row is invalid",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "TIMETABLE_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: TimetableConfig | None = None


def get_config() -> TimetableConfig:
    """Get the ingestion configuration singleton.

    Returns:
        TimetableConfig: Ingestion configuration instance
    """
    global _config
    if _config is None:
        _config = TimetableConfig()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config
    _config = None
