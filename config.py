"""Application configuration using pydantic-settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # The Graph hosted service. Subgraph names ("uniswap/uniswap-v2") are
    # appended to this URL.
    SUBGRAPH_BASE_URL: str = "https://api.thegraph.com/subgraphs/name"
    GRAPH_API_KEY: str = ""

    # CoinGecko (optional demo key for higher rate limits)
    COINGECKO_API_KEY: str = ""

    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Default chart window seeded into a protocol page
    DEFAULT_WINDOW_DAYS: int = 90

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize LOG_LEVEL to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}, got {v!r}")
        return v.upper()

    @field_validator("DEFAULT_WINDOW_DAYS")
    @classmethod
    def validate_window_days(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"DEFAULT_WINDOW_DAYS must be positive, got {v}")
        return v

    # App settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"


settings = Settings()
