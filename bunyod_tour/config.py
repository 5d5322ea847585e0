"""Application configuration settings."""

from typing import Literal

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    """Application settings configuration."""

    # 기본 설정
    app_name: str = "Bunyod-Tour API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # 서버 설정
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS 설정
    cors_origins: list[str] = ["*"]
    frontend_url: str = "http://localhost:5000"

    # 데이터베이스 설정
    database_url: str = ""
    db_pool_size: int = 15
    db_max_overflow: int = 25
    db_pool_recycle: int = 1800

    # Transient connection errors are retried with linear backoff (attempt * delay)
    db_retry_attempts: int = 3
    db_retry_delay_seconds: float = 1.0

    # 이메일 설정
    mail_username: str = ""
    mail_password: str = ""
    mail_from: str = "noreply@bunyodtour.tj"
    mail_port: int = 587
    mail_server: str = "smtp.gmail.com"
    mail_starttls: bool = True
    mail_ssl_tls: bool = False
    mail_from_name: str = "Bunyod-Tour"
    admin_email: str = ""

    # "warn" logs a city outside the tour's countries, "reject" refuses the write
    city_country_policy: Literal["warn", "reject"] = "warn"

    # 로깅 설정
    log_dir: str = "logs"
    log_level: str = "INFO"

    @field_validator("database_url")
    @classmethod
    def database_url_must_be_set(cls, v: str) -> str:
        """Validate that database URL is set."""
        if not v:
            raise ValueError("DATABASE_URL must be set")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def email_enabled(self) -> bool:
        """SMTP credentials are present."""
        return bool(self.mail_username and self.mail_password)

    @property
    def admin_notification_email(self) -> str:
        return self.admin_email or self.mail_username

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as list."""
        if self.is_production:
            return [self.frontend_url]
        return self.cors_origins

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Lazily build the process-wide settings from the environment."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
