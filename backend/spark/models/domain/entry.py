"""Spark entry domain models."""

from datetime import datetime, timedelta
from typing import Annotated, Any, Optional
from uuid import uuid4

from pydantic import AfterValidator, BaseModel, Field, field_validator, model_validator

from spark.models.domain.common import UtcDatetime, utc_now
from spark.models.domain.context import ConditionStatus
from spark.models.domain.geofence import Geofence, GeofenceCreate
from spark.models.enums import Emotion, Weather


def _reject_unknown_weather(value: Weather) -> Weather:
    if value == Weather.UNKNOWN:
        raise ValueError("'unknown' cannot be required to unlock an entry")
    return value


RequiredWeather = Annotated[Weather, AfterValidator(_reject_unknown_weather)]


def _to_geofence(data: Optional[GeofenceCreate]) -> Optional[Geofence]:
    if data is None:
        return None
    return Geofence(latitude=data.latitude, longitude=data.longitude, radius=data.radius)


class SparkEntryCreate(BaseModel):
    """Payload for authoring a new entry.

    ``earliest_unlock`` and ``unlock_after`` are alternatives: an absolute
    instant, or a delay counted from creation. With neither, the entry is
    eligible to unlock as soon as its other conditions hold.
    """
    title: str
    content: str
    geofence: Optional[GeofenceCreate] = None
    weather: Optional[RequiredWeather] = None
    emotion: Optional[Emotion] = None
    earliest_unlock: Optional[UtcDatetime] = None
    unlock_after: Optional[timedelta] = None

    @field_validator("unlock_after")
    @classmethod
    def non_negative_delay(cls, value: Optional[timedelta]) -> Optional[timedelta]:
        if value is not None and value < timedelta(0):
            raise ValueError("unlock_after must not be negative")
        return value

    @model_validator(mode="after")
    def single_time_condition(self):
        if self.earliest_unlock is not None and self.unlock_after is not None:
            raise ValueError("Provide earliest_unlock or unlock_after, not both")
        return self

    def to_entry(self, now: Optional[datetime] = None) -> "SparkEntry":
        created = now or utc_now()
        if self.unlock_after is not None:
            earliest = created + self.unlock_after
        else:
            earliest = self.earliest_unlock or created
        return SparkEntry(
            id=str(uuid4()),
            title=self.title,
            content=self.content,
            creation_date=created,
            geofence=_to_geofence(self.geofence),
            weather=self.weather,
            emotion=self.emotion,
            earliest_unlock=earliest,
        )


class SparkEntryUpdate(BaseModel):
    """Payload for editing an entry. Explicit nulls clear a condition."""
    title: Optional[str] = None
    content: Optional[str] = None
    geofence: Optional[GeofenceCreate] = None
    weather: Optional[RequiredWeather] = None
    emotion: Optional[Emotion] = None
    earliest_unlock: Optional[UtcDatetime] = None

    def apply_to(self, entry: "SparkEntry") -> "SparkEntry":
        changes: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name == "geofence":
                changes["geofence"] = _to_geofence(value)
            elif name == "earliest_unlock":
                # Clearing the time condition means "no delay".
                changes["earliest_unlock"] = value or entry.creation_date
            elif value is not None or name not in ("title", "content"):
                changes[name] = value
        return entry.model_copy(update=changes)


class SparkEntry(BaseModel):
    """A journal note plus its unlock conditions and lock state."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    content: str
    creation_date: UtcDatetime = Field(default_factory=utc_now)

    # unlock conditions
    geofence: Optional[Geofence] = None
    weather: Optional[RequiredWeather] = None
    emotion: Optional[Emotion] = None
    earliest_unlock: UtcDatetime

    # None while locked
    unlocked_at: Optional[UtcDatetime] = None

    @model_validator(mode="before")
    @classmethod
    def default_earliest_unlock(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("earliest_unlock") is None:
            data = dict(data)
            if data.get("creation_date") is None:
                data["creation_date"] = utc_now()
            data["earliest_unlock"] = data["creation_date"]
        return data

    @model_validator(mode="after")
    def unlock_not_before_creation(self):
        if self.unlocked_at is not None and self.unlocked_at < self.creation_date:
            raise ValueError("unlocked_at must not precede creation_date")
        return self

    @property
    def is_locked(self) -> bool:
        return self.unlocked_at is None


class EntryView(BaseModel):
    """Presentation view of an entry. Content is withheld while locked."""
    id: str
    title: str
    content: Optional[str] = None
    creation_date: datetime
    geofence: Optional[Geofence] = None
    weather: Optional[Weather] = None
    emotion: Optional[Emotion] = None
    earliest_unlock: datetime
    unlocked_at: Optional[datetime] = None
    is_locked: bool
    conditions: Optional[ConditionStatus] = None

    @classmethod
    def from_entry(cls, entry: SparkEntry, conditions: Optional[ConditionStatus] = None) -> "EntryView":
        return cls(
            id=entry.id,
            title=entry.title,
            content=None if entry.is_locked else entry.content,
            creation_date=entry.creation_date,
            geofence=entry.geofence,
            weather=entry.weather,
            emotion=entry.emotion,
            earliest_unlock=entry.earliest_unlock,
            unlocked_at=entry.unlocked_at,
            is_locked=entry.is_locked,
            conditions=conditions,
        )


class EntryWriteResponse(BaseModel):
    """Entry view plus the outcome of flushing the store."""
    entry: EntryView
    persisted: bool
    storage_error: Optional[str] = None
