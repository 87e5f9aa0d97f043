from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from satledger.models.constellation import Constellation
from satledger.models.satellite import Satellite
from satledger.models.satellite_orbit import SatelliteOrbit
from satledger.services.tle_parser import TLERecord


class OrbitStore:
    """
    Write interface of the relational store used by ingestion.

    Upserts are explicit: look the row up, insert it if absent, and return
    the identifier either way. Nothing is committed here; the caller owns the
    transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def has_source(self, file_hash: str) -> bool:
        """True if any orbit row was already ingested from this file content."""
        return self.db.query(SatelliteOrbit.id).filter(
            SatelliteOrbit.file_hash == file_hash
        ).first() is not None

    def upsert_constellation(self, name: str) -> int:
        existing = self.db.query(Constellation.id).filter(Constellation.name == name).first()
        if existing is not None:
            return existing.id

        constellation = Constellation(name=name)
        self.db.add(constellation)
        self.db.flush()
        return constellation.id

    def upsert_satellite(self, catalog_number: int, constellation_id: int) -> bool:
        """Insert the satellite if absent. Returns True when a row was created."""
        if self.db.get(Satellite, catalog_number) is not None:
            return False

        self.db.add(Satellite(catalog_number=catalog_number, constellation_id=constellation_id))
        self.db.flush()
        return True

    def add_orbit(
        self,
        record: TLERecord,
        file_hash: str,
        source_url: Optional[str],
        ingested_at: datetime,
    ) -> SatelliteOrbit:
        orbit = SatelliteOrbit(
            catalog_number=record.catalog_number,
            tle_line0=record.line0,
            tle_line1=record.line1,
            tle_line2=record.line2,
            epoch=record.epoch,
            inclination_deg=record.inclination_deg,
            raan_deg=record.raan_deg,
            altitude_km=record.orbit.altitude_km,
            period_s=record.orbit.period_s,
            mean_motion=record.mean_motion,
            element_set_number=record.element_set_number,
            file_hash=file_hash,
            source_url=source_url,
            ingested_at=ingested_at,
        )
        self.db.add(orbit)
        return orbit
