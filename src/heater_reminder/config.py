"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="HEATER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Water Heater Service Reminder API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root log level for the backend process.")
    data_root: Path = Field(default=Path("data"), description="Root directory for local data files.")

    store_backend: Literal["sheets", "workbook", "memory"] = Field(
        default="sheets",
        description="Which record store backs the customer list.",
    )
    spreadsheet_id: Optional[str] = Field(
        default=None,
        description="Google Sheets document id (or full URL) holding the customer sheet.",
    )
    worksheet_index: int = Field(default=0, ge=0)
    credentials_file: Path = Field(
        default=Path("credentials.json"),
        description="Service-account key file used to reach Google Sheets.",
    )
    value_input_option: Literal["RAW", "USER_ENTERED"] = Field(
        default="RAW",
        description="How Google Sheets interprets written values.",
    )
    workbook_file: Path = Field(
        default=Path("data/customers.xlsx"),
        description="Local workbook used when store_backend is 'workbook'.",
    )

    # Slash dates are read day-first (15/01/2024) as they are typed in the sheet,
    # not month-first as a browser Date would read them.
    date_formats: tuple[str, ...] = Field(
        default=("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%Y/%m/%d"),
        description="strptime formats accepted for service dates, tried in order.",
    )
    service_interval_months: int = Field(default=6, ge=1)
    urgent_window_days: int = Field(default=7, ge=0)
    upcoming_window_days: int = Field(default=30, ge=1)

    messaging_base_url: str = Field(default="https://wa.me")
    country_code: str = Field(default="62")
    trunk_prefix: str = Field(default="0")
    open_links: bool = Field(
        default=True,
        description="Open messaging links in the local browser; when false only the URL is returned.",
    )

    reminder_check_interval_hours: float = Field(
        default=24.0,
        ge=0.0,
        description="How often pending reminders are recomputed. 0 disables the scheduler.",
    )

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for the desktop front-end (CORS).",
    )

    @field_validator("data_root", "credentials_file", "workbook_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", "date_formats", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("spreadsheet_id", mode="before")
    @classmethod
    def _extract_spreadsheet_id(cls, value: Any) -> Optional[str]:
        """Accept either a bare id or the full docs.google.com URL."""
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        if "/spreadsheets/d/" in text:
            text = text.split("/spreadsheets/d/", 1)[1].split("/", 1)[0]
        return text.split("?", 1)[0].split("#", 1)[0]


settings = Settings()
