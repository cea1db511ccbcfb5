"""Application configuration using pydantic-settings."""

import warnings
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


# Sentinel value that indicates an unconfigured API key
_UNCONFIGURED_API_KEY = "CHANGE_ME"

# Find .env file: check backend dir first, then project root
_BACKEND_DIR = Path(__file__).parent.parent
_PROJECT_ROOT = _BACKEND_DIR.parent
_ENV_FILE = _BACKEND_DIR / ".env" if (_BACKEND_DIR / ".env").exists() else _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The analysis engine itself needs no configuration. These settings cover
    the HTTP service and the optional OpenAI refinement step.
    """

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Authentication
    api_key: str = _UNCONFIGURED_API_KEY

    # OpenAI (optional; empty disables /api/refine)
    openai_api_key: str = ""
    refine_model: str = "gpt-5-mini"
    refine_max_output_tokens: int = 1000

    # Application
    cors_origins: str = "http://localhost:3000"
    debug: bool = False

    def model_post_init(self, __context) -> None:
        """Warn about unconfigured credentials."""
        if self.api_key == _UNCONFIGURED_API_KEY:
            warnings.warn(
                "API_KEY not configured! Set API_KEY environment variable.",
                UserWarning,
                stacklevel=2,
            )

    @property
    def refinement_enabled(self) -> bool:
        return bool(self.openai_api_key)


settings = Settings()
