"""Context service: latest location, weather and emotion readings."""

from datetime import datetime
from typing import Optional

from spark.logging import get_logger
from spark.models import (
    ContextState,
    Coordinate,
    Emotion,
    LocationPermission,
    UnlockContext,
    Weather,
    utc_now,
)
from spark.services.preferences import EmotionPreferenceStore
from spark.services.weather import WeatherFetcher

logger = get_logger('services.context')


class ContextService:
    """
    Holds the readings pushed by the location, weather and emotion
    collaborators. Missing readings are valid state, not pending work.
    """

    def __init__(self, preferences: EmotionPreferenceStore):
        self.preferences = preferences
        self._coordinate: Optional[Coordinate] = None
        self._permission = LocationPermission.NOT_DETERMINED
        self._weather: Optional[Weather] = None
        self._weather_updated_at: Optional[datetime] = None
        self._emotion: Optional[Emotion] = None

    async def initialize(self) -> None:
        self._emotion = await self.preferences.load()

    def update_location(
        self,
        coordinate: Optional[Coordinate],
        permission: LocationPermission = LocationPermission.AUTHORIZED,
    ) -> None:
        self._permission = permission
        # Without permission, any coordinate we were handed is not trusted.
        self._coordinate = coordinate if permission == LocationPermission.AUTHORIZED else None

    def set_weather(self, weather: Weather) -> None:
        self._weather = weather
        self._weather_updated_at = utc_now()

    async def refresh_weather(self, fetch: WeatherFetcher) -> Optional[Weather]:
        """
        Ask the weather collaborator for a reading.

        On failure the last known reading is kept and returned.

        :param fetch: Collaborator called with the current coordinate
        :type fetch: WeatherFetcher
        :return: The weather now held by the service
        :rtype: Weather | None
        """
        try:
            weather = await fetch(self._coordinate)
        except Exception as e:
            logger.warning(f"Weather fetch failed, keeping last known value: {e}")
            return self._weather
        self.set_weather(weather)
        return weather

    async def set_emotion(self, emotion: Emotion) -> None:
        self._emotion = emotion
        await self.preferences.save(emotion)

    def state(self) -> ContextState:
        return ContextState(
            coordinate=self._coordinate,
            location_permission=self._permission,
            weather=self._weather,
            emotion=self._emotion,
            weather_updated_at=self._weather_updated_at,
        )

    def snapshot(self, now: Optional[datetime] = None) -> UnlockContext:
        """Freeze the current readings into an UnlockContext."""
        return UnlockContext(
            coordinate=self._coordinate,
            weather=self._weather,
            emotion=self._emotion,
            now=now or utc_now(),
        )
