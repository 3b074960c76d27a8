"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Data files
    snapshot_path: str = "data/rates.json"
    sources_path: str = "data/sources.json"

    # Service
    service_name: str = "savings-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 20.0  # Applied per source
    http_user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    )
    http_accept_language: str = "tr-TR,tr;q=0.9,en-US;q=0.8,en;q=0.7"

    # Ingestion
    ingestion_max_concurrency: int = 4
    ingestion_success_threshold: float = 0.5  # Share of sources that must yield tiers

    # Calculation defaults
    default_withholding_rate_percent: float = 17.5
    default_table_principal: float = 100_000

    # Interactive recomputation
    principal_debounce_seconds: float = 0.3
    search_debounce_seconds: float = 0.2


settings = Settings()
