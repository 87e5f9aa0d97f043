"""
TLE ingestion into the relational store.

Each source (one constellation's TLE file) is ingested exactly once per
distinct file content: the SHA-256 of the raw bytes is checked against the
orbit rows already stored, and an unchanged file is skipped. A new file is
written in a single transaction (constellation, satellites, orbit snapshots)
that is rolled back as a whole on any store error.
"""
import enum
import logging
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from satledger.core.config import Settings, settings as default_settings
from satledger.core.errors import FieldPolicy, SourceReadFailure, StoreFailure
from satledger.services.celestrak import CatalogSource, download_source, fetch_catalog
from satledger.services.fingerprint import content_fingerprint
from satledger.services.orbit import EARTH, CentralBody
from satledger.services.store import OrbitStore
from satledger.services.tle_parser import RecordRejection, parse_tle_text

logger = logging.getLogger(__name__)


class IngestStatus(str, enum.Enum):
    INGESTED = "ingested"
    DUPLICATE = "duplicate"
    FAILED = "failed"


@dataclass
class IngestionResult:
    source: str
    status: IngestStatus
    file_hash: Optional[str] = None
    records_parsed: int = 0
    satellites_created: int = 0
    orbits_inserted: int = 0
    rejections: List[RecordRejection] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self):
        return {
            "source": self.source,
            "status": self.status.value,
            "file_hash": self.file_hash,
            "records_parsed": self.records_parsed,
            "satellites_created": self.satellites_created,
            "orbits_inserted": self.orbits_inserted,
            "rejected": len(self.rejections),
            "error": self.error,
        }


def ingest_source(
    db: Session,
    source: CatalogSource,
    content: bytes,
    policy: Union[FieldPolicy, str] = FieldPolicy.ZERO_FILL,
    body: CentralBody = EARTH,
) -> IngestionResult:
    """
    Ingest one constellation's raw TLE file content.

    Returns a DUPLICATE result without writing anything when the content was
    ingested before.

    Raises:
        StoreFailure: The transaction could not complete; nothing was written.
    """
    file_hash = content_fingerprint(content)
    store = OrbitStore(db)

    try:
        if store.has_source(file_hash):
            db.rollback()
            logger.info(f"Skipping {source.name!r}: file {file_hash[:12]} already ingested")
            return IngestionResult(source=source.name, status=IngestStatus.DUPLICATE, file_hash=file_hash)

        outcome = parse_tle_text(content.decode("utf-8", errors="replace"), policy, body)
        result = IngestionResult(
            source=source.name,
            status=IngestStatus.INGESTED,
            file_hash=file_hash,
            records_parsed=len(outcome.records),
            rejections=list(outcome.rejections),
        )

        ingested_at = datetime.utcnow()
        constellation_id = store.upsert_constellation(source.name)

        seen = set()
        for record in outcome.records:
            # (catalog_number, file_hash) admits a single snapshot per file
            if record.catalog_number in seen:
                reason = f"Duplicate catalog number {record.catalog_number} in file, keeping first record"
                logger.warning(f"{source.name}: {reason}")
                result.rejections.append(RecordRejection(title=record.line0, reason=reason))
                continue
            seen.add(record.catalog_number)

            if store.upsert_satellite(record.catalog_number, constellation_id):
                result.satellites_created += 1
            store.add_orbit(record, file_hash, source.url, ingested_at)
            result.orbits_inserted += 1

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Ingestion of {source.name!r} rolled back: {e}")
        raise StoreFailure(f"Could not store {source.name!r}: {e}") from e
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Ingested {source.name!r}: {result.orbits_inserted} orbits, "
        f"{result.satellites_created} new satellites, {len(result.rejections)} rejected records"
    )
    return result


def ingest_file(
    db: Session,
    source: CatalogSource,
    policy: Union[FieldPolicy, str] = FieldPolicy.ZERO_FILL,
    body: CentralBody = EARTH,
) -> IngestionResult:
    """Read `source.path` and ingest it.

    Raises:
        SourceReadFailure: The file is missing or unreadable.
        StoreFailure: See ingest_source.
    """
    if source.path is None:
        raise SourceReadFailure(f"No downloaded file for {source.name!r}")
    try:
        content = Path(source.path).read_bytes()
    except OSError as e:
        raise SourceReadFailure(f"Could not read {source.path}: {e}") from e
    return ingest_source(db, source, content, policy, body)


def ingest_sources(
    db: Session,
    sources: Iterable[CatalogSource],
    policy: Union[FieldPolicy, str] = FieldPolicy.ZERO_FILL,
    body: CentralBody = EARTH,
) -> List[IngestionResult]:
    """
    Ingest sources one after another.

    A read or store failure is logged and recorded for that source only;
    the remaining sources are still ingested.
    """
    results = []
    for source in sources:
        try:
            results.append(ingest_file(db, source, policy, body))
        except (SourceReadFailure, StoreFailure) as e:
            logger.error(f"Ingestion failed for {source.name!r}: {e}")
            results.append(IngestionResult(source=source.name, status=IngestStatus.FAILED, error=str(e)))

    ingested = sum(1 for r in results if r.status is IngestStatus.INGESTED)
    skipped = sum(1 for r in results if r.status is IngestStatus.DUPLICATE)
    failed = len(results) - ingested - skipped
    logger.info(f"Ingestion run complete: {ingested} ingested, {skipped} unchanged, {failed} failed")
    return results


def scrape_and_ingest(db: Session, settings: Settings = default_settings) -> List[IngestionResult]:
    """
    Fetch the CelesTrak supplemental catalog, download every TLE file into a
    temporary directory and ingest them.

    Raises:
        CatalogError: The catalog index could not be fetched.
    """
    sources = fetch_catalog(settings.CELESTRAK_SUPPLEMENTAL_URL, timeout=settings.REQUEST_TIMEOUT_SECONDS)
    logger.info(f"Finished web scraping. Found {len(sources)} items")

    results = []
    with tempfile.TemporaryDirectory(prefix="satledger-") as tmp_dir:
        logger.debug(f"Created temporary dir {tmp_dir}")
        downloaded = []
        for index, source in enumerate(sources):
            try:
                downloaded.append(
                    download_source(source, tmp_dir, timeout=settings.REQUEST_TIMEOUT_SECONDS, index=index)
                )
            except SourceReadFailure as e:
                logger.error(f"Download failed for {source.name!r}: {e}")
                results.append(IngestionResult(source=source.name, status=IngestStatus.FAILED, error=str(e)))

        results.extend(ingest_sources(db, downloaded, settings.FIELD_POLICY))

    return results
