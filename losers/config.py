from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    APP_NAME: str = "Losers API"
    SECRET_KEY: str = "your_secret_key"
    ALGORITHM: str = "HS256"
    # Tokens stay valid for 14 days
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 14
    DATABASE_URL: str = "sqlite:///./losers.db"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # CORS: production site plus local frontends (can be overridden via .env)
    ALLOWED_ORIGINS: List[str] = [
        "https://losers.space",
        "http://localhost:3000",
        "http://localhost:3001",
    ]
    # Vercel preview deployments
    ALLOWED_ORIGIN_REGEX: str | None = r"https://.*\.vercel\.app"

    model_config = SettingsConfigDict(env_file=".env")
