# File: scribe/core/config/settings.py

import os
import shutil
from pathlib import Path
from typing import Optional


class Settings:
    # --- Paths ---
    # scribe/core/config/settings.py -> scribe/core/config -> scribe/core -> scribe -> ROOT
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"

    # --- Database ---
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "scribe_db")

    @property
    def DATABASE_URL(self) -> str:
        # SQLite only when explicitly requested (tests, single-machine runs).
        if os.getenv("USE_SQLITE", "false").lower() == "true":
            sqlite_path = os.getenv("SQLITE_PATH", str(self.DATA_DIR / "scribe.db"))
            return f"sqlite:///{sqlite_path}"

        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # --- External Tools ---
    # Auto-detect the whisper CLI or use env var
    WHISPER_BINARY: str = os.getenv("WHISPER_BINARY_PATH", shutil.which("whisper") or "whisper")

    # Parent for the per-call output directories (None = system temp dir)
    WHISPER_TEMP_DIR: Optional[str] = os.getenv("WHISPER_TEMP_DIR") or None

    # --- Process Supervision ---
    WHISPER_PROBE_TIMEOUT: float = float(os.getenv("WHISPER_PROBE_TIMEOUT", "30"))
    WHISPER_POLL_INTERVAL: float = float(os.getenv("WHISPER_POLL_INTERVAL", "0.2"))
    WHISPER_KILL_GRACE: float = float(os.getenv("WHISPER_KILL_GRACE", "5"))

    # --- Model Configuration ---
    # One of: default, fast, accurate
    WHISPER_PRESET: str = os.getenv("WHISPER_PRESET", "default")

    def ensure_dirs(self):
        """Creates the whisper output parent directory if one is configured and missing."""
        if self.WHISPER_TEMP_DIR:
            Path(self.WHISPER_TEMP_DIR).mkdir(parents=True, exist_ok=True)


settings = Settings()
