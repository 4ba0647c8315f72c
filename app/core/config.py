"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Event Registration"
    debug: bool = False
    log_file: str = ""  # Empty logs to stderr

    # Server
    host: str = "0.0.0.0"  # Bind to all interfaces for external access
    port: int = 8000
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./event_registration.db"

    # Identity provider headers, set by the gateway in front of the service
    user_id_header: str = "X-User-Id"
    user_email_header: str = "X-User-Email"
    user_name_header: str = "X-User-Name"

    # Listings
    default_page_size: int = 10


settings = Settings()
