# goal_tracker/config.py
from pydantic_settings import BaseSettings
from typing import Optional, Set
from pydantic import Field

class Settings(BaseSettings):
    SECRET_KEY: str = Field("change-me-in-production")
    ALGORITHM: str = Field("HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24)
    LINK_TOKEN_EXPIRE_DAYS: int = Field(7)
    # Reject one-click status links that carry no valid signed token.
    REQUIRE_SIGNED_LINKS: bool = Field(False)

    DATABASE_URL: Optional[str] = None
    SQLALCHEMY_DATABASE_URL: Optional[str] = None
    SQL_ECHO: bool = Field(False)

    # Admin allow-list: comma-separated emails.
    ADMIN_EMAILS: str = Field("admin@example.com")

    RATE_LIMIT_REQUESTS: int = Field(100)
    RATE_LIMIT_WINDOW_SECONDS: float = Field(60.0)
    RATE_LIMIT_MAX_CLIENTS: int = Field(10_000)
    RATE_LIMIT_PATH_PREFIX: str = Field("/api")
    # Only safe behind a proxy that overwrites X-Forwarded-For.
    TRUST_FORWARDED_FOR: bool = Field(True)

    RESEND_API_KEY: Optional[str] = None
    RESEND_API_URL: str = Field("https://api.resend.com/emails")
    EMAIL_FROM: str = Field("onboarding@resend.dev")

    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: str = Field("https://api.openai.com/v1")
    OPENAI_MODEL: str = Field("gpt-4o-mini")

    APP_URL: str = Field("http://localhost:8000")
    HTTP_TIMEOUT_SECONDS: float = Field(10.0)
    LOG_LEVEL: str = Field("INFO")

    model_config = {
        "env_file": ".env",
        "extra": "allow",
    }

    @property
    def effective_database_url(self) -> str:
        return self.SQLALCHEMY_DATABASE_URL or self.DATABASE_URL or "sqlite+aiosqlite:///./goal_tracker.db"

    @property
    def admin_emails(self) -> Set[str]:
        return {e.strip().lower() for e in self.ADMIN_EMAILS.split(",") if e.strip()}

settings = Settings()
