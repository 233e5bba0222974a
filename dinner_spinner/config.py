from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


@dataclass(frozen=True)
class AppConfig:
    port: int = int(os.getenv("PORT", "3000"))
    host: str = "0.0.0.0"
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///dinner_spinner.db")
    session_secret: str = os.getenv("SESSION_SECRET", "dinner-spinner-secret-key-change-this")
    session_max_age: int = 24 * 60 * 60
    admin_username: str = "admin"
    admin_password: str = "admin123"


DEFAULT_APP_CONFIG = AppConfig()
