"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite:///./gptmarket.db"
    DB_WRITE_RETRIES: int = 3  # Attempts per finalization write

    # Validation
    VALIDATOR_NAME: str = "Automated Validation System"
    VALIDATION_STALE_AFTER_SECONDS: int = 300  # Open runs older than this are superseded

    # Worker
    RUN_WORKER: bool = True
    WORKER_POLL_INTERVAL: int = 5
    MAX_JOB_RETRIES: int = 3

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


# Global settings instance
settings = Settings()
