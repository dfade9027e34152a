"""
config.py: allowance_split settings.

Usage:
    from allowance_split.config import settings
    print(settings.tax_year)

Import directly as a module-level singleton: never pass settings around as a parameter.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore any extra env vars
    )

    # --- Reference year ---
    # Used for parent age (young-parent rate reduction) when the caller passes none.
    tax_year: int = 2025


# Module-level singleton: import this throughout the codebase
settings = Settings()
