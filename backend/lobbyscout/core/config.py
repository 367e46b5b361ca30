"""Configuration settings for the lobby scout service."""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Riot API Configuration
    riot_api_key: str = Field(
        default="",
        description="Riot API key sent as X-Riot-Token; empty means not configured",
    )
    default_platform: str = Field(default="la2")
    riot_request_timeout_ms: int = Field(default=10_000, gt=0)
    riot_max_retries: int = Field(default=3, ge=0)

    # Feature flags
    feature_match_history: bool = Field(
        default=False,
        description="Enable deep signals aggregated from Match-V5 history",
    )
    feature_spectator: bool = Field(default=True)

    # Application Configuration
    log_level: str = Field(default="INFO")

    # Outbound scheduling lanes
    interactive_max_concurrent: int = Field(default=4, gt=0)
    interactive_min_spacing_ms: int = Field(default=100, ge=0)
    bulk_max_concurrent: int = Field(default=2, gt=0)
    bulk_min_spacing_ms: int = Field(default=250, ge=0)
    global_max_concurrent: int = Field(default=5, gt=0)

    # Cache
    cache_max_entries: int = Field(default=500, gt=0)

    @model_validator(mode="after")
    def validate_lane_ceiling(self) -> "Settings":
        """Keep the global ceiling strictly below the sum of lane maxima.

        Lanes only compete for capacity when the ceiling is lower than what
        they could run together; otherwise interactive priority never applies.

        :raises ValueError: If the ceiling is not below the lane sum
        """
        lane_sum = self.interactive_max_concurrent + self.bulk_max_concurrent
        if self.global_max_concurrent >= lane_sum:
            raise ValueError(
                f"global_max_concurrent ({self.global_max_concurrent}) must be "
                f"lower than the sum of lane maxima ({lane_sum})"
            )
        return self

    @property
    def has_riot_api_key(self) -> bool:
        """Whether a usable API key is configured."""
        return bool(self.riot_api_key) and not self.riot_api_key.startswith(
            "RGAPI-xxxx"
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix for environment variables
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()


# Create a global settings instance lazily
settings: Settings | None = None


def get_global_settings() -> Settings:
    """Get or create the global settings instance."""
    global settings
    if settings is None:
        settings = get_settings()
    return settings
