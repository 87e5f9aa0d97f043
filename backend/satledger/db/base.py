# Import Base class and all models so create_all can detect them
from satledger.db.base_class import Base  # noqa
from satledger.models.constellation import Constellation  # noqa
from satledger.models.satellite import Satellite  # noqa
from satledger.models.satellite_orbit import SatelliteOrbit  # noqa
