from __future__ import annotations

import os
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field("sqlite:///study_planner.db", alias="DATABASE_URL")
    backend_session_secret: str = Field(..., alias="BACKEND_SESSION_SECRET")

    app_timezone: str = Field("UTC", alias="APP_TIMEZONE")
    default_reminder_time: str = Field("07:00:00", alias="DEFAULT_REMINDER_TIME")
    default_semester_weeks: int = Field(16, alias="DEFAULT_SEMESTER_WEEKS")

    allowed_emails_raw: str = Field("", alias="ALLOWED_EMAILS")
    admin_emails_raw: str = Field("", alias="ADMIN_EMAILS")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @staticmethod
    def _split_emails(raw: str) -> List[str]:
        items = [item.strip().lower() for item in str(raw or "").split(",") if item.strip()]
        dedup = []
        seen = set()
        for item in items:
            if item in seen:
                continue
            seen.add(item)
            dedup.append(item)
        return dedup

    @property
    def allowed_emails(self) -> List[str]:
        return self._split_emails(self.allowed_emails_raw)

    @property
    def admin_emails(self) -> List[str]:
        return self._split_emails(self.admin_emails_raw)


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None


# For local dev convenience only.
if os.getenv("BACKEND_DEBUG_SETTINGS"):
    print(get_settings())
