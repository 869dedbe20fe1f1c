"""Geographic domain models."""

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """A point on the Earth's surface in decimal degrees."""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class GeofenceCreate(BaseModel):
    """Payload for attaching a geofence to a new entry."""
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    radius: float = Field(gt=0, description="Radius in meters.")


class Geofence(BaseModel):
    """A circular zone used as a location unlock condition. Immutable."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    radius: float = Field(gt=0, description="Radius in meters.")

    @property
    def center(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)
