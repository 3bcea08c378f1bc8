"""StudentVUE client configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class StudentVueConfig(BaseSettings):
    """Client configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # District portal credentials
    studentvue_district_url: str = Field(
        default="",
        description="District StudentVUE URL, e.g. https://student.tusd1.org/",
    )
    studentvue_user: str = Field(
        default="",
        description="StudentVUE username",
    )
    studentvue_pass: str = Field(
        default="",
        description="StudentVUE password",
    )

    # Request settings
    calendar_concurrency: int = Field(
        default=7,
        ge=1,
        description="Maximum in-flight month requests when building a calendar",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for a single SOAP request",
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
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: StudentVueConfig | None = None


def get_config() -> StudentVueConfig:
    """Get the client configuration singleton.

    Returns:
        StudentVueConfig: Client configuration instance
    """
    global _config
    if _config is None:
        _config = StudentVueConfig()
    return _config
