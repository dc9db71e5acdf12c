"""Application configuration"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings"""

    # Telegram (secrets supplied out of band, checked at dispatch time)
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    telegram_api_base: str = "https://api.telegram.org"
    telegram_parse_mode: str = "HTML"
    # 0 means exactly one outbound call per submission
    telegram_max_retries: int = 0

    # Form
    require_phone_number: bool = False

    # Application
    environment: str = "development"
    cors_origins: list[str] = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def telegram_configured(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
