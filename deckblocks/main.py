import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deckblocks.api import decks_router, health_router, scryfall_router
from deckblocks.config import settings
from deckblocks.db.database import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    await init_db()
    logger.info("Deck store ready at %s", settings.database_url)
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("deckblocks"),
    lifespan=lifespan,
)

app.include_router(decks_router)
app.include_router(health_router)
app.include_router(scryfall_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
