"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "timebank-engine"
    log_level: str = "INFO"

    # Exchange rates
    default_credit_rate: float = 5.0  # Credits per hour for categories missing from the rate table
    market_multiplier_floor: float = 0.5
    market_multiplier_ceiling: float = 2.0

    # Trade loops
    hours_baseline: float = 4.0
    default_trust_score: float = 50.0
    balanced_trade_tolerance: float = 0.15


settings = Settings()
