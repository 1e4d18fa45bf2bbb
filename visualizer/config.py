"""
Configuration module for the candle visualizer.
All settings are loaded from environment variables.
"""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Runtime
    app_title: str = "Candle Visualizer"
    host: str = "0.0.0.0"
    port: int = 8080

    # Database: either a full URL or the individual connection parameters
    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "candles"
    db_sslmode: str = "disable"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout_seconds: int = 30
    db_statement_timeout_ms: int = 30000

    # Logging
    log_level: str = "INFO"

    # Candle requests without explicit parameters fall back to these
    default_figi: str = "BBG004730N88"
    default_interval: str = "CANDLE_INTERVAL_DAY"
    debug_figi_sample_limit: int = 10

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def sqlalchemy_url(self) -> URL:
        """Return the store URL, assembling it from parts when no full URL is set."""
        if self.database_url:
            return make_url(self.database_url)

        return URL.create(
            "postgresql+psycopg2",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query={"sslmode": self.db_sslmode},
        )


# Global settings instance
settings = Settings()
