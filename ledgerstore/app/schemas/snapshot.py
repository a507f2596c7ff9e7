"""
Snapshot document schemas.

Structure of the JSON dump exchanged by the native backend's export/import.
Values are raw SQLite column values in ``columns`` order.
"""

from datetime import datetime
from typing import Any, List, Literal

from pydantic import BaseModel, Field

SNAPSHOT_VERSION = 1


class SnapshotTable(BaseModel):
    """Rows of one table."""
    name: str = Field(..., min_length=1)
    columns: List[str]
    values: List[List[Any]] = Field(default_factory=list)


class SnapshotDocument(BaseModel):
    """A full structured dump of the ledger database."""
    database: str
    version: int = SNAPSHOT_VERSION
    mode: Literal["full"] = "full"
    exported_at: datetime
    tables: List[SnapshotTable]
