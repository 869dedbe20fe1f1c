"""
Result models for persistence and entry store operations.
"""

from pydantic import BaseModel, Field
from typing import Optional

from spark.models.domain import SparkEntry


class SaveResult(BaseModel):
    """Result of writing the entries document."""
    success: bool
    entry_count: int = 0
    path: Optional[str] = None
    error: Optional[str] = None


class EntryWriteResult(BaseModel):
    """Result of adding or updating an entry."""
    entry: SparkEntry
    save: SaveResult


class ClearResult(BaseModel):
    """Result of clearing the store."""
    cleared_count: int
    save: SaveResult


class ReevaluationResult(BaseModel):
    """Result of re-scoring every locked entry against a context."""
    evaluated: int = 0
    unlocked_ids: list[str] = Field(default_factory=list)
    # None when nothing unlocked and no write was needed.
    save: Optional[SaveResult] = None
