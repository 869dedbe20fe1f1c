"""Context routes: collaborators push readings here."""

from fastapi import APIRouter

from spark.dependencies import ContextServiceDep, UnlockServiceDep
from spark.models import (
    ContextState,
    EmotionUpdate,
    LocationUpdate,
    ReevaluationResult,
    WeatherUpdate,
)

router = APIRouter()


@router.get("/", response_model=ContextState)
async def get_context(context: ContextServiceDep):
    return context.state()


@router.put("/location", response_model=ReevaluationResult)
async def update_location(body: LocationUpdate, unlock: UnlockServiceDep):
    return await unlock.on_location(body)


@router.put("/weather", response_model=ReevaluationResult)
async def update_weather(body: WeatherUpdate, unlock: UnlockServiceDep):
    return await unlock.on_weather(body)


@router.put("/emotion", response_model=ReevaluationResult)
async def update_emotion(body: EmotionUpdate, unlock: UnlockServiceDep):
    return await unlock.on_emotion(body.emotion)


@router.post("/reevaluate", response_model=ReevaluationResult)
async def reevaluate(unlock: UnlockServiceDep):
    return await unlock.refresh()
