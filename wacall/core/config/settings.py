"""
Settings for the wacall webhook bridge.

Environment variable configuration for the webhook endpoints, logging and the
optional Redis broadcast transport.
"""

import os
import tomllib
from pathlib import Path

from dotenv import load_dotenv

# Load .env file for local development - look in current working directory
load_dotenv(".env")


def _get_version_from_pyproject() -> str:
    """
    Read version from pyproject.toml file.

    Returns:
        Version string from pyproject.toml, or fallback version
    """
    current_path = Path(__file__)
    for parent in [current_path.parent, *current_path.parents]:
        pyproject_path = parent / "pyproject.toml"
        if pyproject_path.exists():
            try:
                with open(pyproject_path, "rb") as f:
                    pyproject_data = tomllib.load(f)
                    version = pyproject_data.get("project", {}).get("version")
                    if version:
                        return version
            except (OSError, tomllib.TOMLDecodeError):
                continue

    return "0.1.0"


class Settings:
    """Application settings with environment-based configuration."""

    def __init__(self):
        # ================================================================
        # Version & General Configuration
        # ================================================================
        self.version: str = _get_version_from_pyproject()
        self.port: int = int(os.getenv("PORT", "8000"))
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.log_dir: str = os.getenv("LOG_DIR", "./logs")
        self.environment: str = os.getenv("ENVIRONMENT", "DEV")

        # ================================================================
        # Webhook Secrets
        # ================================================================
        # Echoed back during the subscription handshake
        self.webhook_verify_token: str | None = os.getenv("WEBHOOK_VERIFY_TOKEN")
        # HMAC key for the x-hub-signature-256 header
        self.app_secret: str | None = os.getenv("APP_SECRET")

        # ================================================================
        # Broadcast Configuration (Optional)
        # ================================================================
        self.redis_url: str | None = os.getenv("REDIS_URL")
        self.broadcast_channel: str = os.getenv("BROADCAST_CHANNEL", "wacall:events")

        self._validate_settings()

    def _validate_settings(self):
        """Validate settings values."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.log_level.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        self.log_level = self.log_level.upper()

        valid_environments = ["DEV", "PROD"]
        if self.environment.upper() not in valid_environments:
            self.environment = "DEV"  # Default fallback
        self.environment = self.environment.upper()

    def require_webhook_secrets(self) -> tuple[str, str]:
        """
        Return the verify token and app secret, failing fast when either is unset.

        Called when the application is built rather than at import time so the
        CLI and the test-suite can import the package without credentials.

        Returns:
            Tuple of (webhook_verify_token, app_secret)

        Raises:
            ValueError: If a secret is missing
        """
        if not self.webhook_verify_token:
            raise ValueError("WEBHOOK_VERIFY_TOKEN is required")
        if not self.app_secret:
            raise ValueError("APP_SECRET is required")
        return self.webhook_verify_token, self.app_secret

    @property
    def has_redis(self) -> bool:
        """Check if Redis is configured."""
        return self.redis_url is not None

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "DEV"


# Global settings instance
settings = Settings()
