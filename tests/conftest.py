"""Shared fixtures: an in-memory SQLite store and sample TLE files."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from satledger.db.session import create_db_engine, init_db

STARLINK_1007 = (
    "STARLINK-1007           ",
    "1 44713U 19074A   23053.20743056  .00001103  00000+0  92330-4 0  9992",
    "2 44713  53.0541 107.6423 0001420  87.3698 272.7455 15.06391473181234",
)
STARLINK_1008 = (
    "STARLINK-1008",
    "1 44714U 19074B   23053.18911435  .00001362  00000+0  10966-3 0  9990",
    "2 44714  53.0536 107.7233 0001527  83.9052 276.2101 15.06399003181231",
)
ISS = (
    "ISS (ZARYA)",
    "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927",
    "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537",
)
VANGUARD_1 = (
    "VANGUARD 1",
    "1 00005U 58002B   00179.78495062  .00000023  00000-0  28098-4 0  4753",
    "2 00005  34.2682 348.7242 1859667 331.7664  19.3264 10.82419157413667",
)


def tle_text(*records, trailing_newline: bool = True) -> str:
    text = "\n".join(line for record in records for line in record)
    return text + "\n" if trailing_newline else text


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def starlink_bytes() -> bytes:
    return tle_text(STARLINK_1007, STARLINK_1008).encode()
