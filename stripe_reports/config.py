"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Upstream payments API
    stripe_api_base: str = "https://api.stripe.com"
    page_size: int = 100

    # Service
    service_name: str = "stripe-reports"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 30.0

    # Reporting
    account_concurrency: int = 1  # 1 = accounts fetched one at a time
    default_timezone: str = "UTC"
    summary_default_limit: int = 10
    detail_default_limit: int = 50


settings = Settings()
