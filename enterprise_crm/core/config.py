from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Enterprise CRM API"
    app_env: str = "local"
    app_debug: bool = True
    log_level: str = "INFO"
    api_port: int = 8000
    database_url: str = "sqlite:///./enterprise_crm.db"
    database_echo: bool = False
    jwt_secret: str = "replace-me-with-a-long-random-secret"
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "EnterpriseCRM"
    jwt_audience: str = "EnterpriseCRMUsers"
    jwt_expiry_minutes: int = 60
    default_page_size: int = 10
    metrics_enabled: bool = False
    otel_enabled: bool = False
    otel_service_name: str = "enterprise-crm"
    otel_console_exporter: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
