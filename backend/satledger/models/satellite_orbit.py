from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from satledger.db.base_class import Base
from datetime import datetime


class SatelliteOrbit(Base):
    """
    One orbit snapshot per satellite and source file content.
    Rows are append-only: a changed source file adds a new set of snapshots.
    """
    id = Column(Integer, primary_key=True, index=True)
    catalog_number = Column(Integer, ForeignKey("satellite.catalog_number"), nullable=False, index=True)

    tle_line0 = Column(String, nullable=False)
    tle_line1 = Column(String, nullable=False)
    tle_line2 = Column(String, nullable=False)

    epoch = Column(DateTime(timezone=True), nullable=False, index=True)
    inclination_deg = Column(Float)
    raan_deg = Column(Float)
    altitude_km = Column(Float)
    period_s = Column(Float)
    mean_motion = Column(Float)  # revolutions per day
    element_set_number = Column(Integer)

    # Source file provenance
    file_hash = Column(String(64), nullable=False, index=True)
    source_url = Column(String)
    ingested_at = Column(DateTime, default=datetime.utcnow)

    satellite = relationship("Satellite", back_populates="orbits")

    __table_args__ = (
        UniqueConstraint("catalog_number", "file_hash", name="_satellite_file_hash_uc"),
    )
