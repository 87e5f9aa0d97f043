"""Tests for deduplicated, transactional ingestion into the store."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError

from conftest import ISS, STARLINK_1007, STARLINK_1008, VANGUARD_1, tle_text
from satledger.core.errors import FieldPolicy, SourceReadFailure, StoreFailure
from satledger.models import Constellation, Satellite, SatelliteOrbit
from satledger.services.celestrak import CatalogSource
from satledger.services.fingerprint import content_fingerprint
from satledger.services.ingestion import IngestStatus, ingest_file, ingest_source, ingest_sources
from satledger.services.store import OrbitStore

STARLINK = CatalogSource(name="Starlink", url="https://celestrak.org/sup-gp.php?FILE=starlink&FORMAT=tle")
STATIONS = CatalogSource(name="Stations", url="https://celestrak.org/sup-gp.php?FILE=iss&FORMAT=tle")


def _orbit_rows(db):
    return db.query(
        SatelliteOrbit.catalog_number, SatelliteOrbit.file_hash, SatelliteOrbit.id
    ).order_by(SatelliteOrbit.id).all()


class TestIngestSource:
    def test_creates_all_rows(self, db, starlink_bytes) -> None:
        result = ingest_source(db, STARLINK, starlink_bytes)

        assert result.status is IngestStatus.INGESTED
        assert result.file_hash == content_fingerprint(starlink_bytes)
        assert result.records_parsed == 2
        assert result.satellites_created == 2
        assert result.orbits_inserted == 2

        constellation = db.query(Constellation).one()
        assert constellation.name == "Starlink"
        assert {s.catalog_number for s in db.query(Satellite)} == {44713, 44714}
        assert all(s.constellation_id == constellation.id for s in db.query(Satellite))

    def test_orbit_row_contents(self, db, starlink_bytes) -> None:
        ingest_source(db, STARLINK, starlink_bytes)
        orbit = db.query(SatelliteOrbit).filter_by(catalog_number=44713).one()

        assert orbit.tle_line0 == "STARLINK-1007"
        assert orbit.tle_line1 == STARLINK_1007[1]
        assert orbit.tle_line2 == STARLINK_1007[2]
        assert orbit.epoch.year == 2023
        assert orbit.inclination_deg == pytest.approx(53.0541)
        assert orbit.raan_deg == pytest.approx(107.6423)
        assert orbit.mean_motion == pytest.approx(15.06391473)
        assert orbit.period_s == pytest.approx(86400.0 / 15.06391473)
        assert 500.0 < orbit.altitude_km < 600.0
        assert orbit.element_set_number == 999
        assert orbit.file_hash == content_fingerprint(starlink_bytes)
        assert orbit.source_url == STARLINK.url
        assert orbit.ingested_at is not None

    def test_idempotent(self, db, starlink_bytes) -> None:
        ingest_source(db, STARLINK, starlink_bytes)
        before = _orbit_rows(db)

        result = ingest_source(db, STARLINK, starlink_bytes)

        assert result.status is IngestStatus.DUPLICATE
        assert result.orbits_inserted == 0
        assert _orbit_rows(db) == before
        assert db.query(Constellation).count() == 1

    def test_changed_file_is_additive(self, db, starlink_bytes) -> None:
        ingest_source(db, STARLINK, starlink_bytes)
        before = _orbit_rows(db)

        changed = starlink_bytes.replace(b"STARLINK-1008", b"STARLINK-1009")
        result = ingest_source(db, STARLINK, changed)

        assert result.status is IngestStatus.INGESTED
        assert result.satellites_created == 0
        after = _orbit_rows(db)
        assert after[:len(before)] == before
        assert len(after) == 4
        assert db.query(Satellite).count() == 2
        assert db.query(SatelliteOrbit.file_hash).distinct().count() == 2

    def test_satellite_not_reassigned(self, db) -> None:
        ingest_source(db, STATIONS, tle_text(ISS).encode())
        ingest_source(db, STARLINK, tle_text(ISS, STARLINK_1007).encode())

        stations = db.query(Constellation).filter_by(name="Stations").one()
        assert db.get(Satellite, 25544).constellation_id == stations.id
        assert db.query(SatelliteOrbit).filter_by(catalog_number=25544).count() == 2

    def test_referential_integrity(self, db) -> None:
        ingest_source(db, STATIONS, tle_text(ISS, VANGUARD_1).encode())
        ingest_source(db, STARLINK, tle_text(STARLINK_1007, STARLINK_1008).encode())

        for orbit in db.query(SatelliteOrbit):
            satellite = db.get(Satellite, orbit.catalog_number)
            assert satellite is not None
            assert satellite.constellation is not None
            assert db.query(Constellation).filter_by(id=satellite.constellation_id).count() == 1

    def test_partial_file(self, db) -> None:
        content = tle_text(STARLINK_1007, STARLINK_1008, trailing_newline=False) + "\nSTARLINK-1009\n"
        result = ingest_source(db, STARLINK, content.encode())
        assert result.records_parsed == 2
        assert db.query(SatelliteOrbit).count() == 2

    def test_rejected_records_reported(self, db) -> None:
        bad_line2 = ISS[2][:52] + " 0.00000000" + ISS[2][63:]
        content = tle_text(STARLINK_1007, (ISS[0], ISS[1], bad_line2)).encode()

        result = ingest_source(db, STARLINK, content)

        assert result.orbits_inserted == 1
        assert len(result.rejections) == 1
        assert db.get(Satellite, 25544) is None

    def test_strict_policy(self, db) -> None:
        bad_line1 = ISS[1][:18] + "2x264.51782528" + ISS[1][32:]
        content = tle_text(STARLINK_1007, (ISS[0], bad_line1, ISS[2])).encode()

        zero_filled = ingest_source(db, STATIONS, content, FieldPolicy.ZERO_FILL)
        assert zero_filled.orbits_inserted == 2

        strict = ingest_source(db, STARLINK, content + b"\n", FieldPolicy.STRICT)
        assert strict.orbits_inserted == 1
        assert "epoch" in strict.rejections[0].reason

    def test_duplicate_catalog_number_in_file(self, db) -> None:
        content = tle_text(STARLINK_1007, STARLINK_1008, STARLINK_1007).encode()
        result = ingest_source(db, STARLINK, content)

        assert result.orbits_inserted == 2
        assert len(result.rejections) == 1
        assert db.query(SatelliteOrbit).count() == 2

    def test_empty_file(self, db) -> None:
        result = ingest_source(db, STARLINK, b"")
        assert result.status is IngestStatus.INGESTED
        assert result.orbits_inserted == 0
        assert db.query(Constellation).count() == 1


class TestAtomicity:
    def test_failure_rolls_back_everything(self, db, monkeypatch) -> None:
        content = tle_text(STARLINK_1007, STARLINK_1008, ISS).encode()
        original_add_orbit = OrbitStore.add_orbit
        calls = []

        def failing_add_orbit(self, record, *args, **kwargs):
            calls.append(record.catalog_number)
            if len(calls) == 3:
                raise OperationalError("INSERT INTO satelliteorbit", {}, Exception("disk I/O error"))
            return original_add_orbit(self, record, *args, **kwargs)

        monkeypatch.setattr(OrbitStore, "add_orbit", failing_add_orbit)

        with pytest.raises(StoreFailure):
            ingest_source(db, STARLINK, content)

        assert db.query(SatelliteOrbit).count() == 0
        assert db.query(Satellite).count() == 0
        assert db.query(Constellation).count() == 0

    def test_retry_after_failure(self, db, monkeypatch) -> None:
        content = tle_text(STARLINK_1007, STARLINK_1008).encode()

        def broken(self, *args, **kwargs):
            raise OperationalError("INSERT INTO satelliteorbit", {}, Exception("database is locked"))

        with monkeypatch.context() as m:
            m.setattr(OrbitStore, "add_orbit", broken)
            with pytest.raises(StoreFailure):
                ingest_source(db, STARLINK, content)

        result = ingest_source(db, STARLINK, content)
        assert result.status is IngestStatus.INGESTED
        assert db.query(SatelliteOrbit).count() == 2

    def test_earlier_commits_untouched(self, db, monkeypatch, starlink_bytes) -> None:
        ingest_source(db, STATIONS, tle_text(ISS).encode())

        def broken(self, *args, **kwargs):
            raise OperationalError("INSERT INTO satelliteorbit", {}, Exception("disk full"))

        monkeypatch.setattr(OrbitStore, "add_orbit", broken)
        with pytest.raises(StoreFailure):
            ingest_source(db, STARLINK, starlink_bytes)

        assert [c.name for c in db.query(Constellation)] == ["Stations"]
        assert db.query(SatelliteOrbit).count() == 1


class TestIngestFiles:
    def _write(self, tmp_path: Path, name: str, *records) -> CatalogSource:
        path = tmp_path / f"{name}.txt"
        path.write_text(tle_text(*records))
        return CatalogSource(name=name, url=f"https://example.org/{name}", path=path)

    def test_ingest_file(self, db, tmp_path) -> None:
        source = self._write(tmp_path, "Stations", ISS)
        assert ingest_file(db, source).orbits_inserted == 1

    def test_missing_file(self, db, tmp_path) -> None:
        with pytest.raises(SourceReadFailure):
            ingest_file(db, CatalogSource(name="Gone", path=tmp_path / "gone.txt"))

    def test_no_path(self, db) -> None:
        with pytest.raises(SourceReadFailure):
            ingest_file(db, CatalogSource(name="Nowhere"))

    def test_failure_isolated_per_source(self, db, tmp_path) -> None:
        sources = [
            self._write(tmp_path, "Starlink", STARLINK_1007, STARLINK_1008),
            CatalogSource(name="Gone", path=tmp_path / "gone.txt"),
            self._write(tmp_path, "Stations", ISS),
        ]

        results = ingest_sources(db, sources)

        assert [r.status for r in results] == [
            IngestStatus.INGESTED,
            IngestStatus.FAILED,
            IngestStatus.INGESTED,
        ]
        assert results[1].error
        assert db.query(SatelliteOrbit).count() == 3

    def test_store_failure_isolated(self, db, tmp_path, monkeypatch) -> None:
        sources = [
            self._write(tmp_path, "Starlink", STARLINK_1007),
            self._write(tmp_path, "Stations", ISS),
        ]
        original_upsert = OrbitStore.upsert_constellation

        def flaky_upsert(self, name):
            if name == "Starlink":
                raise OperationalError("INSERT INTO constellation", {}, Exception("locked"))
            return original_upsert(self, name)

        monkeypatch.setattr(OrbitStore, "upsert_constellation", flaky_upsert)
        results = ingest_sources(db, sources)

        assert [r.status for r in results] == [IngestStatus.FAILED, IngestStatus.INGESTED]
        assert [c.name for c in db.query(Constellation)] == ["Stations"]

    def test_rerun_is_noop(self, db, tmp_path) -> None:
        sources = [self._write(tmp_path, "Stations", ISS, VANGUARD_1)]
        ingest_sources(db, sources)
        results = ingest_sources(db, sources)
        assert results[0].status is IngestStatus.DUPLICATE
        assert db.query(SatelliteOrbit).count() == 2
