from sqlalchemy import Column, Integer, ForeignKey, DateTime, Date
from sqlalchemy.orm import relationship
from satledger.db.base_class import Base
from datetime import datetime


class Satellite(Base):
    # SATCAT number from TLE line 1
    catalog_number = Column(Integer, primary_key=True, autoincrement=False)
    constellation_id = Column(Integer, ForeignKey("constellation.id"), nullable=False, index=True)
    launch_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    constellation = relationship("Constellation", back_populates="satellites")
    orbits = relationship("SatelliteOrbit", back_populates="satellite", order_by="SatelliteOrbit.epoch")

    def __repr__(self):
        return f"<Satellite {self.catalog_number} constellation={self.constellation_id}>"
