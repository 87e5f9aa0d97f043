# Import all models so SQLAlchemy can resolve relationships
from satledger.models.constellation import Constellation as Constellation
from satledger.models.satellite import Satellite as Satellite
from satledger.models.satellite_orbit import SatelliteOrbit as SatelliteOrbit
