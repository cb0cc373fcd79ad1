# backend/currency_archive/config.py
"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation:
- ENVIRONMENT: Runtime mode (development, test, production)
- DATA_PATH: Root directory of the EUR-quoted rate archive
- ANALYTICS_*: Worker pool and timeout settings for the analytics engine

Environment-specific behavior:
- test: The archive path is not checked; tests inject in-memory archives
- development: A missing archive directory only produces a warning
- production: The archive directory must exist

Configuration is validated on application startup. Invalid configuration
will raise a ValueError with a descriptive message.

Usage:
    from currency_archive.config import settings

    if settings.is_production:
        # Production-specific logic
        ...
"""
from decimal import Decimal
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Find the .env file in project root (parent of backend/)
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_PROJECT_ROOT = _BACKEND_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables:
        - ENVIRONMENT: Runtime environment (development, test, production)
        - DATA_PATH: Archive root laid out as <year>/<month>/DD-MM-YYYY.json
        - APP_NAME: Application name (default: "Currency Archive Analytics")
        - DEBUG: Enable debug mode (default: False)
        - LOG_LEVEL: Logging level (default: "INFO")
        - LOG_FORMAT: "text" or "json" (default: "text")

    Analytics Settings (optional, with sensible defaults):
        - RISK_FREE_RATE: Annual risk-free rate as a decimal (default: 0.04)
        - ANALYTICS_MAX_WORKERS: Size of the shared worker pool (default: 8)
        - ANALYTICS_TIMEOUT_SECONDS: Upper bound for one analytics stage (default: 30)
    """

    # Environment mode - determines validation strictness
    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Runtime environment (development, test, production)"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: Literal["text", "json"] = Field(
        default="text",
        description="Log output format (text for humans, json for aggregators)"
    )

    app_name: str = "Currency Archive Analytics"
    debug: bool = False

    # =========================================================================
    # RATE ARCHIVE
    # =========================================================================
    data_path: Path = Field(
        default=Path("Data"),
        description="Root directory of the daily rate files"
    )
    load_archive_on_startup: bool = Field(
        default=True,
        description="Bulk-load the archive when the application starts"
    )

    # =========================================================================
    # ANALYTICS
    # =========================================================================
    risk_free_rate: Decimal = Field(
        default=Decimal("0.04"),
        ge=0,
        le=1,
        description="Annual risk-free rate used for the Sharpe ratio (decimal)"
    )
    analytics_max_workers: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Number of threads in the shared analytics pool"
    )
    analytics_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Maximum seconds to wait for one stage of an analytics request"
    )
    max_range_days: int = Field(
        default=366 * 27,
        ge=1,
        description="Largest calendar range accepted by range endpoints"
    )

    # =========================================================================
    # RATE LIMITING
    # =========================================================================
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable per-client rate limiting"
    )
    trust_proxy_headers: bool = Field(
        default=False,
        description="Trust X-Forwarded-For from any client (only behind a load balancer)"
    )
    trusted_proxy_ips: list[str] = Field(
        default=["127.0.0.1"],
        description="Proxy addresses whose forwarded headers are trusted"
    )

    # =========================================================================
    # CORS
    # =========================================================================
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Allowed CORS origins (comma-separated in env var)"
    )
    cors_allow_credentials: bool = Field(
        default=True,
        description="Allow credentials in CORS requests"
    )
    cors_allow_methods: list[str] = Field(
        default=["GET"],
        description="Allowed HTTP methods for CORS"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        description="Allowed HTTP headers for CORS"
    )

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_archive_config(self) -> "Settings":
        """
        Validate archive configuration based on environment.

        Rules:
        - test: nothing is checked, archives are injected by fixtures
        - development: missing directory produces a warning
        - production: directory must exist
        """
        if self.environment == "test":
            return self

        if not self.data_path.is_dir():
            if self.environment == "production":
                raise ValueError(
                    f"DATA_PATH '{self.data_path}' does not exist. "
                    "Production requires the rate archive to be present on startup."
                )
            import warnings
            warnings.warn(
                f"DATA_PATH '{self.data_path}' does not exist. "
                "The API will start with an empty archive.",
                UserWarning,
                stacklevel=2,
            )

        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


# Create single instance
settings = Settings()
