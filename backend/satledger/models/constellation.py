from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from satledger.db.base_class import Base
from datetime import datetime


class Constellation(Base):
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    satellites = relationship("Satellite", back_populates="constellation")

    __table_args__ = (
        CheckConstraint("name <> ''", name="_constellation_name_nonempty"),
    )

    def __repr__(self):
        return f"<Constellation {self.name}>"
