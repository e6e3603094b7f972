"""Configuration management for fleet console."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    api_base_url: str
    session_cookie: str
    session_token: str | None
    preferences_path: str
    default_page_size: int
    http_timeout: float
    database_url: str
    dev_admin_token: str
    dev_client_token: str
    host: str
    port: int
    debug: bool

    @property
    def HOST(self) -> str:
        """Alias for host."""
        return self.host

    @property
    def PORT(self) -> int:
        """Alias for port."""
        return self.port

    @property
    def DEBUG(self) -> bool:
        """Alias for debug."""
        return self.debug

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            api_base_url=os.getenv("FLEET_API_URL", "").rstrip("/"),
            session_cookie=os.getenv("FLEET_SESSION_COOKIE", "fleet_session"),
            session_token=os.getenv("FLEET_SESSION_TOKEN") or None,
            preferences_path=os.getenv(
                "FLEET_PREFERENCES_PATH",
                os.path.join(os.path.expanduser("~"), ".fleet_console.json"),
            ),
            default_page_size=int(os.getenv("FLEET_DEFAULT_PAGE_SIZE", "10")),
            http_timeout=float(os.getenv("FLEET_HTTP_TIMEOUT", "30")),
            database_url=os.getenv(
                "DATABASE_URL",
                "sqlite+aiosqlite:///./fleet_console_dev.db",
            ),
            dev_admin_token=os.getenv("FLEET_DEV_ADMIN_TOKEN", "dev-admin"),
            dev_client_token=os.getenv("FLEET_DEV_CLIENT_TOKEN", "dev-client"),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
