"""
Terminal settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class QueueSettings(BaseSettings):
    """Durable local queue configuration."""

    model_config = SettingsConfigDict(env_prefix="QUEUE_")

    backend: Literal["file", "sqlite", "memory"] = "file"
    data_dir: Path = Path("data")
    storage_key: str = "pos_offline_queue_v1"
    db_name: str = "pos_queue.db"

    # SQLite settings
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class ServerSettings(BaseSettings):
    """Central sale server configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    base_url: str = "http://localhost:5000"
    sale_path: str = "/api/pos/sale"
    timeout: float = 15.0  # seconds, exceeded requests count as network failures
    api_token: str | None = None

    @property
    def sale_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.sale_path.lstrip('/')}"


class ConnectivitySettings(BaseSettings):
    """Online/offline detection configuration."""

    model_config = SettingsConfigDict(env_prefix="CONNECTIVITY_")

    probe: Literal["http", "manual"] = "http"
    health_path: str = "/api/health"
    poll_interval: float = 5.0
    timeout: float = 3.0
    assume_online: bool = True


class SyncSettings(BaseSettings):
    """Queue drain configuration."""

    model_config = SettingsConfigDict(env_prefix="SYNC_")

    auto_sync_on_reconnect: bool = True

    # Backoff after a pass halts on a network failure (1 disables it)
    max_auto_attempts: int = 3
    backoff_initial: float = 2.0
    backoff_max: float = 60.0

    # Operator-visible storage alerts kept in memory
    alert_history: int = 20


class ReceiptSettings(BaseSettings):
    """Receipt layout configuration."""

    model_config = SettingsConfigDict(env_prefix="RECEIPT_")

    store_name: str = "GOKUL WHOLESALE"
    address_lines: list[str] = ["1141 W Bryn Mawr Ave", "Itasca, IL 60143"]
    phone: str | None = "(630) 540-9910"
    footer_lines: list[str] = [
        "Thank you for your business!",
        "Return Policy: 30 Days with Receipt",
    ]
    width: int = 40  # characters per text line
    currency_symbol: str = "$"


class APISettings(BaseSettings):
    """Terminal API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "127.0.0.1"
    port: int = 8765
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main terminal settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "POS Sync Terminal"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["auto", "console", "json"] = "auto"  # auto: console in development
    terminal_id: str = "register-1"

    # Sub-settings
    queue: QueueSettings = Field(default_factory=QueueSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    connectivity: ConnectivitySettings = Field(default_factory=ConnectivitySettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)
    receipt: ReceiptSettings = Field(default_factory=ReceiptSettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("queue", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> QueueSettings:
        if isinstance(v, dict):
            settings = QueueSettings(**v)
        else:
            settings = v or QueueSettings()
        if settings.backend != "memory":
            settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
