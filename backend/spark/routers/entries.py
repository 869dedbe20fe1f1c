"""Entry routes."""

from typing import Optional

from fastapi import APIRouter, HTTPException

from spark.dependencies import ContextServiceDep, EntryStoreDep
from spark.models import (
    ClearResult,
    Emotion,
    EntryQuery,
    EntryView,
    EntryWriteResponse,
    EntryWriteResult,
    LockFilter,
    SaveResult,
    SortOrder,
    SparkEntryCreate,
    SparkEntryUpdate,
    Weather,
)
from spark.services.conditions import condition_status
from spark.services.demo import build_demo_entries

router = APIRouter()


def _write_response(result: EntryWriteResult) -> EntryWriteResponse:
    return EntryWriteResponse(
        entry=EntryView.from_entry(result.entry),
        persisted=result.save.success,
        storage_error=result.save.error,
    )


@router.get("/", response_model=list[EntryView])
async def list_entries(
    store: EntryStoreDep,
    search: Optional[str] = None,
    lock_state: LockFilter = LockFilter.ALL,
    emotion: Optional[Emotion] = None,
    weather: Optional[Weather] = None,
    sort: SortOrder = SortOrder.NEWEST,
):
    filters = EntryQuery(search=search, lock_state=lock_state, emotion=emotion, weather=weather, sort=sort)
    return [EntryView.from_entry(e) for e in store.query(filters)]


@router.post("/", response_model=EntryWriteResponse, status_code=201)
async def create_entry(body: SparkEntryCreate, store: EntryStoreDep):
    try:
        result = await store.add(body.to_entry())
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc
    return _write_response(result)


@router.delete("/", response_model=ClearResult)
async def clear_entries(store: EntryStoreDep):
    return await store.clear_all()


@router.post("/demo", response_model=SaveResult)
async def seed_demo_entries(store: EntryStoreDep):
    return await store.replace_all(build_demo_entries())


@router.get("/{entry_id}", response_model=EntryView)
async def get_entry(entry_id: str, store: EntryStoreDep, context: ContextServiceDep):
    entry = store.get(entry_id)
    if not entry:
        raise HTTPException(404, "Entry not found")
    return EntryView.from_entry(entry, condition_status(entry, context.snapshot()))


@router.put("/{entry_id}", response_model=EntryWriteResponse)
async def update_entry(entry_id: str, body: SparkEntryUpdate, store: EntryStoreDep):
    existing = store.get(entry_id)
    if not existing:
        raise HTTPException(404, "Entry not found")
    result = await store.update(body.apply_to(existing))
    if not result:
        raise HTTPException(404, "Entry not found")
    return _write_response(result)
