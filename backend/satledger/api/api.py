from fastapi import APIRouter
from satledger.api.endpoints import constellations, satellites, ingestion, stats

api_router = APIRouter()

api_router.include_router(constellations.router, prefix="/constellations", tags=["constellations"])
api_router.include_router(satellites.router, prefix="/satellites", tags=["satellites"])
api_router.include_router(ingestion.router, prefix="/ingest", tags=["ingestion"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
