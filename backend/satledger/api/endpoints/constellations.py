from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import func
from satledger.db.session import get_db
from satledger.models.constellation import Constellation
from satledger.models.satellite import Satellite
from typing import List
from pydantic import BaseModel

router = APIRouter()


class ConstellationOut(BaseModel):
    id: int
    name: str
    satellite_count: int


@router.get("/", response_model=List[ConstellationOut])
def read_constellations(db: Session = Depends(get_db)):
    rows = (
        db.query(Constellation.id, Constellation.name, func.count(Satellite.catalog_number))
        .outerjoin(Satellite, Satellite.constellation_id == Constellation.id)
        .group_by(Constellation.id, Constellation.name)
        .order_by(Constellation.name)
        .all()
    )
    return [ConstellationOut(id=r[0], name=r[1], satellite_count=r[2]) for r in rows]


@router.get("/{constellation_id}/satellites", response_model=List[int])
def read_constellation_satellites(constellation_id: int, db: Session = Depends(get_db)):
    """Catalog numbers of the satellites in a constellation."""
    if db.get(Constellation, constellation_id) is None:
        raise HTTPException(status_code=404, detail="Constellation not found")
    rows = (
        db.query(Satellite.catalog_number)
        .filter(Satellite.constellation_id == constellation_id)
        .order_by(Satellite.catalog_number)
        .all()
    )
    return [r.catalog_number for r in rows]
