import logging
from contextlib import asynccontextmanager
from os import environ

from fastapi import FastAPI

from qaforum.api import bookmark, collection, theme_vote
from qaforum.db import DatabaseManager
from qaforum.schemas.responses import HealthCheckResponseSchema

logging.basicConfig(
    level=environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    this_db = DatabaseManager()
    this_db.ensure_schema()
    app.state.driver = this_db.driver
    logger.info("Connected to Neo4j database %s", this_db.database)
    yield
    this_db.close()


app = FastAPI(title="Q&A Forum Bookmarks and Theme Votes", lifespan=lifespan)
app.include_router(bookmark.router)
app.include_router(collection.router)
app.include_router(theme_vote.router)


@app.get("/api/health", response_model=HealthCheckResponseSchema)
async def health_check() -> HealthCheckResponseSchema:
    return HealthCheckResponseSchema(success=True)
