"""Application configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    """Roster application settings.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Paths
    state_dir: str = Field(
        default="data/state",
        description="Directory holding the persisted roster keys",
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

    # Activity colors
    default_activity_color: str = Field(
        default="#6366F1",
        description="Color preselected when adding a new activity",
    )
    fallback_activity_color: str = Field(
        default="#e5e7eb",
        description="Color shown for activities without one",
    )

    page_title: str = Field(
        default="LILA After school Filter",
        description="Title shown in the browser tab and page header",
    )

    model_config = {
        "env_prefix": "AFTERSCHOOL_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the application configuration singleton.

    Returns:
        AppConfig: Application configuration instance
    """
    global _config
    if _config is None:
        _config = AppConfig()
    return _config
