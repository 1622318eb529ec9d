"""
ScamRadar Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- LLM Provider ---
    LLM_PROVIDER: str = os.getenv("SCAMRADAR_LLM_PROVIDER", "gemini")
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # --- Response Cache ---
    CACHE_MAX_SIZE: int = int(os.getenv("SCAMRADAR_CACHE_MAX_SIZE", "1000"))
    CACHE_TTL_SECONDS: float = float(
        os.getenv("SCAMRADAR_CACHE_TTL", str(24 * 60 * 60))
    )

    # --- Admin ---
    ADMIN_KEYS: str = os.getenv("SCAMRADAR_ADMIN_KEYS", "")

    # --- Server ---
    HOST: str = os.getenv("SCAMRADAR_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("SCAMRADAR_PORT", "8000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("SCAMRADAR_CORS_ORIGINS", "*")


settings = Settings()
