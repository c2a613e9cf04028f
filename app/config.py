"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./mollie_gateway.db"
    log_level: str = "INFO"
    public_base_url: str = "http://localhost:8000"  # Used to build callback/webhook URLs
    mollie_api_base: str = "https://api.mollie.com/v2"
    mollie_api_key: str = ""  # Fallback when no gateway config is stored
    mollie_webhook_enabled: bool = False
    http_timeout_seconds: float = 10.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
