"""Unlock context domain models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from spark.models.domain.common import UtcDatetime, utc_now
from spark.models.domain.geofence import Coordinate
from spark.models.enums import Emotion, LocationPermission, Weather


class UnlockContext(BaseModel):
    """Real-world readings an entry's conditions are evaluated against.

    Any reading may be missing; a missing reading fails the matching
    condition rather than raising.
    """
    coordinate: Optional[Coordinate] = None
    weather: Optional[Weather] = None
    emotion: Optional[Emotion] = None
    now: UtcDatetime = Field(default_factory=utc_now)


class ConditionStatus(BaseModel):
    """Per-condition outcome. ``None`` marks a condition the entry does not set."""
    geofence: Optional[bool] = None
    weather: Optional[bool] = None
    emotion: Optional[bool] = None
    earliest_unlock: bool

    @property
    def satisfied(self) -> bool:
        return all(v is not False for v in (self.geofence, self.weather, self.emotion)) and self.earliest_unlock


class ContextState(BaseModel):
    """Latest readings held by the context service."""
    coordinate: Optional[Coordinate] = None
    location_permission: LocationPermission = LocationPermission.NOT_DETERMINED
    weather: Optional[Weather] = None
    emotion: Optional[Emotion] = None
    weather_updated_at: Optional[datetime] = None


class LocationUpdate(BaseModel):
    """Location collaborator payload."""
    coordinate: Optional[Coordinate] = None
    permission: LocationPermission = LocationPermission.AUTHORIZED


class WeatherUpdate(BaseModel):
    """Weather collaborator payload: a weather tag or a WMO weather code."""
    weather: Optional[Weather] = None
    wmo_code: Optional[int] = None

    @model_validator(mode="after")
    def exactly_one_reading(self):
        if (self.weather is None) == (self.wmo_code is None):
            raise ValueError("Provide exactly one of weather or wmo_code")
        return self


class EmotionUpdate(BaseModel):
    """Emotion collaborator payload."""
    emotion: Emotion
