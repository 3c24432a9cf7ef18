"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Slot Poll"
    debug: bool = False
    app_url: str = "http://localhost:8000"  # Base URL used in notification links

    # CORS
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./slotpoll.db"

    # Google Calendar API
    google_client_id: str = ""
    google_client_secret: str = ""
    google_refresh_token: str = ""  # Fallback when no per-request access token is sent
    google_calendar_id: str = "primary"

    # Free slot computation
    timezone: str = "UTC"  # IANA name; working hours are interpreted in this zone
    work_start_hour: int = 9
    work_end_hour: int = 18
    slot_step_minutes: int = 30
    slot_length_minutes: int = 60

    # Email notifications (Resend)
    resend_api_key: str = ""
    email_from_address: str = "Slot Poll <noreply@slotpoll.app>"


settings = Settings()
