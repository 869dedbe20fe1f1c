"""
Spark models.

Usage:
    from spark.models import SparkEntry, SparkEntryCreate, Geofence, UnlockContext
    from spark.models import Weather, Emotion, UnlockDecision
    from spark.models import SaveResult, ReevaluationResult
"""

# --- Enums ---
from spark.models.enums import (
    Weather,
    Emotion,
    UnlockDecision,
    LockFilter,
    SortOrder,
    LocationPermission,
    ChangeKind,
)

# --- Domain models ---
from spark.models.domain import (
    UtcDatetime, as_utc, utc_now,
    Coordinate, Geofence, GeofenceCreate,
    UnlockContext, ConditionStatus, ContextState,
    LocationUpdate, WeatherUpdate, EmotionUpdate,
    SparkEntry, SparkEntryCreate, SparkEntryUpdate, EntryView, EntryWriteResponse,
    EntryQuery,
    EntryChangeEvent,
)

# --- Result models ---
from spark.models.results import (
    SaveResult,
    EntryWriteResult,
    ClearResult,
    ReevaluationResult,
)

__all__ = [
    # Enums
    "Weather", "Emotion", "UnlockDecision", "LockFilter", "SortOrder",
    "LocationPermission", "ChangeKind",
    # Domain
    "UtcDatetime", "as_utc", "utc_now",
    "Coordinate", "Geofence", "GeofenceCreate",
    "UnlockContext", "ConditionStatus", "ContextState",
    "LocationUpdate", "WeatherUpdate", "EmotionUpdate",
    "SparkEntry", "SparkEntryCreate", "SparkEntryUpdate", "EntryView", "EntryWriteResponse",
    "EntryQuery",
    "EntryChangeEvent",
    # Results
    "SaveResult", "EntryWriteResult", "ClearResult", "ReevaluationResult",
]
