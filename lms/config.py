"""
Configuration: loaded from environment variables
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the project root
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration"""

    # --- Collaborator API ---
    API_URL: str = os.getenv("API_URL", "http://localhost:54112/api")
    API_TOKEN: str = os.getenv("API_TOKEN", "")
    API_TIMEOUT: float = float(os.getenv("API_TIMEOUT", "15"))

    # --- Policies ---
    # Refuse approve/reject locally when the request is no longer pending
    GUARD_TERMINAL_CERTIFICATES: bool = _flag("GUARD_TERMINAL_CERTIFICATES", "true")
    # Quote CSV fields that contain commas or quotes (off keeps the legacy file shape)
    CSV_QUOTE_FIELDS: bool = _flag("CSV_QUOTE_FIELDS", "false")

    # --- Settings ---
    ACTIVITY_FEED_LIMIT: int = int(os.getenv("ACTIVITY_FEED_LIMIT", "10"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> list[str]:
        """Check required settings"""
        errors = []

        if not cls.API_URL:
            errors.append("API_URL is not set")
        if cls.API_TIMEOUT <= 0:
            errors.append("API_TIMEOUT must be positive")
        if cls.ACTIVITY_FEED_LIMIT < 1:
            errors.append("ACTIVITY_FEED_LIMIT must be at least 1")

        return errors


# Configuration singleton
config = Config()
