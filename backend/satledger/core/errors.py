"""
Error taxonomy for TLE parsing and ingestion.

Per-record problems (MalformedField, InvalidOrbitalElements) are handled by
the ingestion loop and never abort a file. Per-file problems (StoreFailure,
SourceReadFailure) abort that file only and are reported to the caller.
"""
import enum
from typing import Optional


class FieldPolicy(str, enum.Enum):
    ZERO_FILL = "zero_fill"
    STRICT = "strict"


class SatLedgerError(Exception):
    """Base class for all errors raised by satledger."""


class MalformedField(SatLedgerError, ValueError):
    """A fixed-column TLE field could not be parsed as the expected type."""

    def __init__(self, field: str, raw: str, message: Optional[str] = None):
        self.field = field
        self.raw = raw
        super().__init__(message or f"Malformed TLE field {field}: {raw!r}")


class MalformedEpoch(MalformedField):
    def __init__(self, raw: str, message: Optional[str] = None):
        super().__init__("epoch", raw, message or f"Malformed TLE epoch: {raw!r}")


class InvalidOrbitalElements(SatLedgerError, ValueError):
    """Degenerate input to orbit derivation, e.g. zero mean motion."""


class StoreFailure(SatLedgerError):
    """A transactional write could not complete. Retrying is safe."""


class SourceReadFailure(SatLedgerError):
    """The raw TLE file could not be obtained or read."""


class CatalogError(SatLedgerError):
    """The catalog index page could not be fetched."""
