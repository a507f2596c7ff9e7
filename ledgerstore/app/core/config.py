"""
Configuration settings for the Ledger Store core.

This module handles application configuration using Pydantic settings.
"""

import enum
from pathlib import Path

from pydantic_settings import BaseSettings


class DeletePolicy(str, enum.Enum):
    """
    What a hard delete does to rows that still reference the deleted entity.

    Policies:
        ORPHAN: Delete the row and leave referencing rows untouched (dangling ids)
        RESTRICT: Refuse the delete while any row references the target
        CASCADE: Delete the referencing rows together with the target
    """
    ORPHAN = "orphan"
    RESTRICT = "restrict"
    CASCADE = "cascade"


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Ledger Store"
    debug: bool = False
    log_level: str = "INFO"

    # Database Configuration
    database_name: str = "track_expenses"
    data_dir: Path = Path("data")
    platform: str = "auto"  # auto, native or web
    db_echo: bool = False
    db_timeout: float = 10.0  # seconds

    # Web persistence (async key-value store holding the database image)
    redis_url: str = "redis://localhost:6379/0"
    snapshot_key: str = "__TRACK_EXPENSES_DB__"

    # Hard delete behaviour for ledgers, accounts and categories
    delete_policy: DeletePolicy = DeletePolicy.ORPHAN

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def database_path(self) -> Path:
        """Location of the native database file."""
        return self.data_dir / f"{self.database_name}.db"


settings = Settings()
