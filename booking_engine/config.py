from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Booking Engine"
    app_env: str = "development"
    debug: bool = True

    # Database
    database_url: str = "sqlite+aiosqlite:///./booking.db"

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Logfire (Observability)
    logfire_token: str = ""

    # Business defaults, used until an administrator saves a system_settings row
    working_hours_start: str = "08:00:00"
    working_hours_end: str = "12:00:00"
    appointment_duration_minutes: int = 30
    monthly_limit_per_user: int = 2
    cancellation_blocking_hours: int = 2
    min_cancellation_lead_time_hours: int = 12
    max_advanced_booking_days: int = 30
    blocking_time_after_hours: str = "19:00:00"

    # Outgoing email identity
    institution_name: str = "OAB/SC"
    sender_email: str = "noreply@oabsc.org.br"
    sender_name: str = "OAB/SC"

    # Daily report of the next day's appointments; empty admin_emails sends it to sender_email
    admin_emails: str = ""
    daily_report_enabled: bool = True

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
