from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./fast_id_badges.db"
    BARCODE_DATABASE_URL: str = "sqlite:///./barcode_entries.db"
    RESET_DB: bool = False
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]

    SECRET_KEY: str = "change-this-secret"
    ACCESS_TOKEN_TTL_SECONDS: int = 60 * 60 * 24
    PASSWORD_RESET_TTL_SECONDS: int = 60 * 60

    # pricing
    CART_TAX_RATE: float = 0.07
    CHECKOUT_TAX_RATE: float = 0.16
    FREE_SHIPPING_THRESHOLD: float = 100.0

    # third-party AI services
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_CHAT_MODEL: str = "claude-3-haiku-20240307"
    ANTHROPIC_PROMPT_MODEL: str = "claude-3-opus-20240229"
    OPENAI_API_KEY: str = ""
    OPENAI_IMAGE_MODELS: List[str] = ["dall-e-3", "dall-e-2"]
    OPENAI_TIMEOUT_SECONDS: int = 60

    CHAT_SESSION_TTL_SECONDS: int = 60 * 60
    CHAT_SESSION_SWEEP_SECONDS: int = 300

    UPLOAD_DIR: str = "./public/uploads"
    PROFILE_IMAGE_MAX_BYTES: int = 2 * 1024 * 1024

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
