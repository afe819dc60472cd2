"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Portal settings loaded from environment variables."""

    # Remote leave-management API (single base URL for every call)
    API_BASE_URL: str = "http://localhost:3000"
    API_TIMEOUT_SECONDS: float = 15.0

    # Portal session: SESSION_SECRET MUST be set via environment / .env (no default)
    SESSION_SECRET: str
    SESSION_ALGORITHM: str = "HS256"
    SESSION_EXPIRY_HOURS: int = 24
    SESSION_COOKIE_NAME: str = "portal_session"
    ROLE_COOKIE_NAME: str = "role"
    COOKIE_SECURE: bool = False

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOGIN_RATE_LIMIT: str = "10/minute"
    NOTICE_TTL_SECONDS: int = 5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
