from contextlib import asynccontextmanager

from fastapi import FastAPI
from satledger.core.config import settings
from satledger.core.logging import configure_logging
from satledger.api.api import api_router
from satledger.db.session import engine, init_db
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    init_db(engine)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="TLE ingestion and orbit history for satellite constellations.",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


@app.get("/")
def read_root():
    return {"message": f"Welcome to {settings.PROJECT_NAME} API", "status": "active", "version": "0.1.0"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(api_router, prefix=settings.API_V1_STR)
