"""
Application settings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./data/receipts.db"
    DATA_DIR: str = "./data"

    # Environment
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:8787"]

    # Google identity
    GOOGLE_CLIENT_ID: Optional[str] = None
    GOOGLE_CERTS_URL: str = "https://www.googleapis.com/oauth2/v1/certs"
    # Used when the certs endpoint sends no Cache-Control max-age
    GOOGLE_CERTS_MAX_AGE_S: int = 3600
    GOOGLE_ISSUERS: List[str] = ["accounts.google.com", "https://accounts.google.com"]

    # Sessions
    SESSION_TTL_DAYS: int = 30
    SESSION_COOKIE_NAME: str = "sid"
    COOKIE_SECURE: bool = True

    # Document extraction service
    EXTRACT_API_KEY: str = ""
    EXTRACT_BASE_URL: str = "https://api.va.landing.ai"
    PARSE_MODEL: str = "dpt-2-latest"
    EXTRACT_TIMEOUT_S: float = 120.0
    EXTRACT_VALIDATE_SCHEMA: bool = False

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


settings = Settings()
