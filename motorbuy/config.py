from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized runtime configuration loaded from environment variables.
    """

    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str
    API_PREFIX: str = "/api"
    APP_NAME: str = "MotorBuy API"
    ALLOWED_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Applied to vendors created through the become-a-vendor flow
    DEFAULT_COMMISSION_TYPE: str = "percentage"
    DEFAULT_COMMISSION_VALUE: str = "5"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
