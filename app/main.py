"""Mystery Tours - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.core.logging import setup_logging
from app.db.base import Base
from app.db.session import AsyncSessionLocal, engine
from app.routers import play, sync, tours
from app.services.player import InvalidTransitionError, PlaySessionRegistry
from app.services.storage import SqlStorage
from app.services.tour_store import TourStore

settings = get_settings()

setup_logging(settings)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # create the key-value table (alembic manages it outside dev runs)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    store = TourStore(SqlStorage(AsyncSessionLocal), settings)
    await store.load()
    app.state.store = store
    app.state.play_registry = PlaySessionRegistry()
    logger.info("%s ready", settings.app_name)

    yield

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Scavenger-hunt tour builder and player",
    lifespan=lifespan,
)


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


app.include_router(tours.router)
app.include_router(sync.router)
app.include_router(play.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
