from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from satledger.db.session import get_db
from satledger.models.satellite import Satellite
from satledger.models.satellite_orbit import SatelliteOrbit
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from datetime import date, datetime

router = APIRouter()


class SatelliteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    catalog_number: int
    constellation_id: int
    launch_date: Optional[date] = None


class OrbitOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tle_line0: str
    tle_line1: str
    tle_line2: str
    epoch: datetime
    inclination_deg: Optional[float] = None
    raan_deg: Optional[float] = None
    altitude_km: Optional[float] = None
    period_s: Optional[float] = None
    mean_motion: Optional[float] = None
    element_set_number: Optional[int] = None
    file_hash: str
    source_url: Optional[str] = None
    ingested_at: Optional[datetime] = None


@router.get("/{catalog_number}", response_model=SatelliteOut)
def read_satellite(catalog_number: int, db: Session = Depends(get_db)):
    satellite = db.get(Satellite, catalog_number)
    if satellite is None:
        raise HTTPException(status_code=404, detail="Satellite not found")
    return satellite


@router.get("/{catalog_number}/orbits", response_model=List[OrbitOut])
def read_satellite_orbits(catalog_number: int, limit: int = 100, db: Session = Depends(get_db)):
    """
    Orbit snapshot history of a satellite, newest epoch first.
    """
    if db.get(Satellite, catalog_number) is None:
        raise HTTPException(status_code=404, detail="Satellite not found")

    return (
        db.query(SatelliteOrbit)
        .filter(SatelliteOrbit.catalog_number == catalog_number)
        .order_by(SatelliteOrbit.epoch.desc(), SatelliteOrbit.id.desc())
        .limit(limit)
        .all()
    )
