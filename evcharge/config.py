from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional


class Settings(BaseSettings):
    model_config = ConfigDict(extra="ignore", case_sensitive=False, env_file=".env")

    # Database
    database_url: str = "sqlite:///./evcharge.db"

    # Logging
    log_level: str = "INFO"

    # HTTP
    api_prefix: str = "/api/v1"
    cors_allow_origins: str = "*"
    default_locale: str = "en"  # en or ko

    # JWT
    jwt_secret: str = "dev-secret-change-me"
    jwt_alg: str = "HS256"
    access_token_expire_minutes: int = 60

    # Public EV charger feed (data.go.kr). The service key is issued already URL-encoded.
    openapi_service_key: Optional[str] = None
    openapi_base_url: str = "http://apis.data.go.kr/B552584/EvCharger"
    openapi_zcode: str = "11"  # Seoul

    # Startup seeding
    seed_on_startup: bool = True
    seed_page_size: int = 100
    seed_max_pages: int = 1
    seed_timeout_s: float = 15.0

    # Observability
    metrics_enabled: bool = True


# Global settings instance
settings = Settings()
