"""Unlock orchestration: apply context updates, then re-evaluate entries."""

from datetime import datetime
from typing import Optional

from spark.models import Emotion, LocationUpdate, ReevaluationResult, WeatherUpdate
from spark.services.context import ContextService
from spark.services.entries import EntryStore
from spark.services.weather import WeatherFetcher, weather_from_wmo_code


class UnlockService:
    """Feeds collaborator readings into the entry store."""

    def __init__(self, context: ContextService, store: EntryStore):
        self.context = context
        self.store = store

    async def refresh(self, now: Optional[datetime] = None) -> ReevaluationResult:
        return await self.store.reevaluate_all(self.context.snapshot(now))

    async def on_location(self, update: LocationUpdate) -> ReevaluationResult:
        self.context.update_location(update.coordinate, update.permission)
        return await self.refresh()

    async def on_weather(self, update: WeatherUpdate) -> ReevaluationResult:
        weather = update.weather if update.weather is not None else weather_from_wmo_code(update.wmo_code)
        self.context.set_weather(weather)
        return await self.refresh()

    async def on_weather_fetch(self, fetch: WeatherFetcher) -> ReevaluationResult:
        await self.context.refresh_weather(fetch)
        return await self.refresh()

    async def on_emotion(self, emotion: Emotion) -> ReevaluationResult:
        await self.context.set_emotion(emotion)
        return await self.refresh()
