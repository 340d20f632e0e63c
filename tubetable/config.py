# tubetable/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- API / TfL ---
    TFL_API_BASE_URL: str = "https://api.tfl.gov.uk"
    TFL_APP_KEY: str | None = None
    TFL_APP_KEY_FILE: str | None = "app_key.txt"
    TFL_USER_AGENT: str = "TFL-Python-Client/1.0"
    TFL_HTTP_TIMEOUT: float = 10.0

    # --- Search ---
    DEFAULT_MODE: str = "tube"
    DEMO_STATION_NAME: str = "Richmond"

    # --- StopPoint id conventions ---
    HUB_ID_PREFIX: str = "HUB"
    PLATFORM_ID_PREFIX: str = "940G"
    SINGLETON_PAD_ID: str = "HUBAMR"  # Amersham
    SINGLETON_PAD_ALT_ID: str = "HUBRMD"  # Richmond
    STOP_TREE_MAX_DEPTH: int = 32

    # --- Rendering ---
    TIMETABLE_MAX_JOURNEYS: int = 200
    TIMETABLE_STATION_COL_WIDTH: int = 50

    # --- Server ---
    LOG_LEVEL: str = "INFO"
    PORT: int = 8080

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    def resolve_app_key(self) -> str:
        key = (self.TFL_APP_KEY or "").strip()
        if key:
            return key
        path = (self.TFL_APP_KEY_FILE or "").strip()
        if path and os.path.exists(path):
            with open(path, encoding="utf-8") as f:
                return f.read().strip()
        return ""


@dataclass(frozen=True)
class TransportConfig:
    """Outbound call settings, fixed at startup and shared read-only."""

    base_url: str
    app_key: str
    user_agent: str
    timeout: float

    @classmethod
    def from_settings(cls, s: Settings) -> TransportConfig:
        return cls(
            base_url=(s.TFL_API_BASE_URL or "").rstrip("/"),
            app_key=s.resolve_app_key(),
            user_agent=s.TFL_USER_AGENT,
            timeout=float(s.TFL_HTTP_TIMEOUT or 10.0),
        )


settings = Settings()
