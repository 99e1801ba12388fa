"""
Carbon Wallet Configuration
===========================
All environment variables in one place. Pydantic Settings validates
types at startup so a bad storage backend or log level fails on boot.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Loaded from environment variables or a .env file."""

    # --- Supabase ---
    supabase_url: str = "http://localhost:54321"
    supabase_service_key: str = ""  # service_role key for backend operations

    # --- Storage ---
    # "supabase" persists to Postgres tables, "local" to a flat JSON key-value store
    storage_backend: Literal["supabase", "local"] = "supabase"
    # None keeps the local store in memory only
    local_store_path: Optional[str] = None

    # --- App settings ---
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # --- Feature flags ---
    # If False, calculator endpoints never return an alternative suggestion.
    enable_suggestions: bool = True

    # --- Model defaults ---
    # Body weight used by the exercise model when the profile has none
    default_weight_kg: float = 70.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
