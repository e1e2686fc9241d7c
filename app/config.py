"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Garden backend (persistence + blob storage)
    garden_api_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL for the garden backend API"
    )
    garden_api_key: str = Field(
        default="",
        description="API key for the garden backend"
    )

    # Retry Configuration (garden backend reads only)
    max_retry_attempts: int = Field(
        default=3,
        description="Maximum number of retry attempts for garden backend calls"
    )
    retry_backoff_multiplier: int = Field(
        default=1,
        description="Multiplier for exponential backoff"
    )
    retry_min_wait: int = Field(
        default=4,
        description="Minimum wait time in seconds between retries"
    )
    retry_max_wait: int = Field(
        default=10,
        description="Maximum wait time in seconds between retries"
    )

    # Generation provider
    provider_base_url: str = Field(
        default="https://vision.example.com",
        description="Base URL for the generative image/text provider"
    )
    provider_api_key: str = Field(
        default="",
        description="API key for the generation provider; empty disables generation"
    )
    provider_model: str = Field(
        default="garden-vision-1",
        description="Model identifier sent to the generation provider"
    )
    provider_timeout_seconds: float = Field(
        default=90.0,
        description="Upper bound on a single generation call"
    )

    # Pipeline parameters
    match_max_distance: float = Field(
        default=100.0,
        description="Planar distance at which match quality decays to zero"
    )
    max_horizon_years: int = Field(
        default=50,
        description="Largest projection horizon accepted, in years"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Garden Future Vision API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
