"""Domain models: entries, geofences and the unlock context."""

from spark.models.domain.common import UtcDatetime, as_utc, utc_now
from spark.models.domain.geofence import Coordinate, Geofence, GeofenceCreate
from spark.models.domain.context import (
    UnlockContext,
    ConditionStatus,
    ContextState,
    LocationUpdate,
    WeatherUpdate,
    EmotionUpdate,
)
from spark.models.domain.entry import (
    SparkEntry,
    SparkEntryCreate,
    SparkEntryUpdate,
    EntryView,
    EntryWriteResponse,
)
from spark.models.domain.query import EntryQuery
from spark.models.domain.events import EntryChangeEvent

__all__ = [
    "UtcDatetime", "as_utc", "utc_now",
    "Coordinate", "Geofence", "GeofenceCreate",
    "UnlockContext", "ConditionStatus", "ContextState",
    "LocationUpdate", "WeatherUpdate", "EmotionUpdate",
    "SparkEntry", "SparkEntryCreate", "SparkEntryUpdate", "EntryView", "EntryWriteResponse",
    "EntryQuery",
    "EntryChangeEvent",
]
