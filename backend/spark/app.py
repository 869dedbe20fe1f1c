"""
Spark - FastAPI Backend
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import socketio

from spark.config import Settings, get_settings
from spark.logging import setup_logging, get_logger
from spark.models import EntryChangeEvent
from spark.routers import context, entries
from spark.services.context import ContextService
from spark.services.demo import build_demo_entries
from spark.services.entries import EntryStore
from spark.services.events import ChangeNotifier
from spark.services.persistence import EntryPersistence
from spark.services.preferences import EmotionPreferenceStore
from spark.services.unlock import UnlockService

logger = get_logger('main')

# Socket.IO server for real-time entry updates
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins='*'
)


@sio.event
async def connect(sid, environ):
    logger.debug(f"Client {sid[:8]}... connected")


@sio.event
async def disconnect(sid):
    logger.debug(f"Client {sid[:8]}... disconnected")


async def broadcast_change(event: EntryChangeEvent) -> None:
    await sio.emit("entries_changed", event.model_dump(mode="json"))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.DEBUG)
        logger.info("Starting Spark API")

        # Initialize services
        notifier = ChangeNotifier()
        store = EntryStore(
            persistence=EntryPersistence(settings.STORAGE_PATH),
            notifier=notifier,
        )
        await store.load()
        if settings.SEED_DEMO_ENTRIES and len(store) == 0:
            await store.replace_all(build_demo_entries())
            logger.info("Seeded demo entries")

        context_service = ContextService(
            preferences=EmotionPreferenceStore(
                settings.PREFERENCES_PATH,
                default=settings.DEFAULT_EMOTION,
            ),
        )
        await context_service.initialize()

        app.state.entry_store = store
        app.state.context_service = context_service
        app.state.unlock_service = UnlockService(
            context=context_service,
            store=store,
        )
        unsubscribe = notifier.subscribe(broadcast_change)
        logger.info("Services initialized")

        yield

        unsubscribe()
        logger.info("Shutting down application")

    app = FastAPI(
        title="Spark API",
        description="Journal entries that unlock by place, weather, mood and time",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(entries.router, prefix="/api/entries", tags=["Entries"])
    app.include_router(context.router, prefix="/api/context", tags=["Context"])

    @app.get("/health")
    async def health_check():
        store = getattr(app.state, "entry_store", None)
        return {
            "status": "healthy",
            "service": "spark",
            "entries": len(store) if store is not None else 0,
        }

    @app.get("/")
    async def root():
        return {
            "name": "Spark API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app


app = create_app()
socket_app = socketio.ASGIApp(sio, other_asgi_app=app)
