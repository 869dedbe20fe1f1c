"""
Dependency injection for FastAPI routes.

Services are constructed once in the app lifespan and held on ``app.state``.
"""

from typing import Annotated
from fastapi import Request, Depends

from spark.services.context import ContextService
from spark.services.entries import EntryStore
from spark.services.unlock import UnlockService


def get_entry_store(request: Request) -> EntryStore:
    return request.app.state.entry_store


def get_context_service(request: Request) -> ContextService:
    return request.app.state.context_service


def get_unlock_service(request: Request) -> UnlockService:
    return request.app.state.unlock_service


EntryStoreDep = Annotated[EntryStore, Depends(get_entry_store)]
ContextServiceDep = Annotated[ContextService, Depends(get_context_service)]
UnlockServiceDep = Annotated[UnlockService, Depends(get_unlock_service)]
