"""Application configuration settings."""

import typing as t

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    fields: t.List[str]

    def __init__(self, fields: t.List[str]) -> None:
        """Initialize ConfigurationError.

        Args:
            fields (t.List[str]): Names of the missing or invalid settings.
        """
        self.fields = fields
        super().__init__(
            "Missing or invalid configuration: " + ", ".join(fields)
        )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "FoodAid Portal"
    app_version: str = "1.0.0"
    debug: bool = False

    # Tenant partition of every collection path
    app_id: str = "default-app-id"

    # Document store
    database_url: str = "sqlite+aiosqlite:///./foodaid.db"

    # Identity service
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24  # 24 hours
    bootstrap_manager_id: str = "manager-admin"

    # Inventory rules
    restock_increment: int = 10
    low_stock_threshold: int = 50
    near_expiry_days: int = 60
    seed_demo_data: bool = True

    # Inventory alerts
    check_inventory_interval_hours: int = 24

    # CORS
    cors_origins: t.List[str] = ["*"]

    # Email notifications (optional)
    smtp_enabled: bool = False
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from_email: str = "foodaid@localhost"
    alert_recipients: t.List[str] = []


def load_settings() -> Settings:
    """Load settings from the environment.

    Returns:
        Settings: The loaded settings.
    """
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise ConfigurationError(
            [".".join(str(loc) for loc in err["loc"]) for err in exc.errors()]
        ) from exc


SETTINGS: Settings = load_settings()
