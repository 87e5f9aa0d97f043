from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func
from satledger.db.session import get_db
from satledger.models.constellation import Constellation
from satledger.models.satellite import Satellite
from satledger.models.satellite_orbit import SatelliteOrbit

router = APIRouter()


@router.get("/overview")
def get_overview_stats(db: Session = Depends(get_db)):
    """
    Counts of stored constellations, satellites, orbit snapshots and source files.
    """
    constellation_count = db.query(func.count(Constellation.id)).scalar() or 0
    satellite_count = db.query(func.count(Satellite.catalog_number)).scalar() or 0
    orbit_count = db.query(func.count(SatelliteOrbit.id)).scalar() or 0
    file_count = db.query(func.count(func.distinct(SatelliteOrbit.file_hash))).scalar() or 0
    last_ingested = db.query(func.max(SatelliteOrbit.ingested_at)).scalar()

    return {
        "total_constellations": constellation_count,
        "total_satellites": satellite_count,
        "total_orbits": orbit_count,
        "source_files": file_count,
        "last_ingested_at": last_ingested.isoformat() if last_ingested else None,
    }
