"""Result models for store and persistence outcomes."""

from spark.models.results.store import (
    SaveResult,
    EntryWriteResult,
    ClearResult,
    ReevaluationResult,
)

__all__ = [
    "SaveResult",
    "EntryWriteResult",
    "ClearResult",
    "ReevaluationResult",
]
