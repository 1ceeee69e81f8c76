from typing import Optional
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Basic configuration ---
    APP_NAME: str = "Placement360"
    APP_DESCRIPTION: str = "Campus placement and work-experience review platform"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"  # development, production, testing
    DEBUG: bool = True
    SECRET_KEY: str = "your-super-secret-key-change-it-in-production"

    # --- Database (MySQL/SQLModel) ---
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = "root"
    DB_NAME: str = "placement360"
    # Full URL override, e.g. sqlite+aiosqlite:///./dev.db
    DB_URL: Optional[str] = None

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        safe_password = quote_plus(self.DB_PASSWORD)
        return f"mysql+aiomysql://{self.DB_USER}:{safe_password}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # --- Tokens ---
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    EMAIL_VERIFICATION_EXPIRE_MINUTES: int = 60 * 24
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60
    OAUTH_STATE_EXPIRE_MINUTES: int = 10
    MIN_PASSWORD_LENGTH: int = 6
    REQUIRE_EMAIL_CONFIRMATION: bool = True

    # --- Cookie ---
    ACCESS_TOKEN_COOKIE_NAME: str = "access_token"
    COOKIE_SECURE: bool = False  # Set True in production (HTTPS only)
    COOKIE_SAMESITE: str = "lax"  # lax, strict, none

    # --- Frontend (links in emails and OAuth redirects) ---
    FRONTEND_URL: str = "http://localhost:5173"
    EMAIL_VERIFY_PATH: str = "/auth/verify"
    PASSWORD_RESET_PATH: str = "/reset-password"
    OAUTH_SUCCESS_PATH: str = "/"
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    # --- Google OAuth ---
    GOOGLE_CLIENT_ID: Optional[str] = None
    GOOGLE_CLIENT_SECRET: Optional[str] = None
    GOOGLE_REDIRECT_URI: Optional[str] = None  # Fallback: built from request base URL
    GOOGLE_AUTH_URL: str = "https://accounts.google.com/o/oauth2/v2/auth"
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
    GOOGLE_USERINFO_URL: str = "https://openidconnect.googleapis.com/v1/userinfo"

    # --- Notification service ---
    NOTIFICATION_DRIVER: str = "mock"  # mock, email
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: Optional[int] = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None

    # --- Logging ---
    LOG_DIR: str = "logs"

    # --- API route prefixes (optional, overridable per deployment) ---
    API_V1_AUTH_PREFIX: str = "/api/v1/auth"
    API_V1_COMPANIES_PREFIX: str = "/api/v1/companies"
    API_V1_REVIEWS_PREFIX: str = "/api/v1/reviews"
    API_V1_PLACEMENTS_PREFIX: str = "/api/v1/placements"
    API_V1_ADMIN_PREFIX: str = "/api/v1/admin"

    # --- Gunicorn ---
    GUNICORN_BIND: str = "0.0.0.0:8000"
    GUNICORN_WORKERS: Optional[int] = None  # Fallback: 2 x CPU + 1, capped at 8
    GUNICORN_TIMEOUT: int = 60
    GUNICORN_PROC_NAME: Optional[str] = None  # Fallback to APP_NAME when empty

    # --- Pydantic ---
    # Load env from project root .env; priority: env vars > .env > defaults
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


# Singleton settings instance
settings = Settings()
