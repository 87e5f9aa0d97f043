"""TLE (Two-Line Element) record parsing.

Records are read from fixed columns (1-indexed, inclusive):

    line 1: catalog number [3-7], epoch [19-32], element set number [65-68]
    line 2: inclination [9-16], RAAN [18-25], mean motion [53-63]

A source file is a plain sequence of three-line records (title, line 1,
line 2); a trailing partial record is discarded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple, Union

from satledger.core.errors import FieldPolicy, InvalidOrbitalElements, MalformedField
from satledger.services.epoch import decode_epoch
from satledger.services.fields import coerce_field
from satledger.services.orbit import EARTH, CentralBody, OrbitParameters, derive_orbit

logger = logging.getLogger(__name__)

# 0-indexed, end-exclusive slices of the columns above
CATALOG_NUMBER = slice(2, 7)
EPOCH = slice(18, 32)
ELEMENT_SET_NUMBER = slice(64, 68)
INCLINATION = slice(8, 16)
RAAN = slice(17, 25)
MEAN_MOTION = slice(52, 63)


@dataclass(frozen=True)
class TLERecord:
    """A parsed three-line TLE record with its derived orbit.

    Attributes:
        line0: Title line, trimmed.
        line1: Raw TLE line 1.
        line2: Raw TLE line 2.
        catalog_number: SATCAT number.
        epoch: Epoch as an aware UTC datetime.
        inclination_deg: Inclination in degrees.
        raan_deg: Right ascension of the ascending node in degrees.
        mean_motion: Mean motion in revolutions per day.
        element_set_number: Element set number.
        orbit: Period, semi-major axis and altitude derived from mean motion.
    """

    line0: str
    line1: str
    line2: str
    catalog_number: int
    epoch: datetime
    inclination_deg: float
    raan_deg: float
    mean_motion: float
    element_set_number: int
    orbit: OrbitParameters = field(compare=False)


@dataclass(frozen=True)
class RecordRejection:
    title: str
    reason: str
    # Position of the record in the source file, when known
    index: Optional[int] = None


@dataclass
class ParseOutcome:
    records: List[TLERecord] = field(default_factory=list)
    rejections: List[RecordRejection] = field(default_factory=list)


def _strip_eol(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


def parse_tle_record(
    line0: str,
    line1: str,
    line2: str,
    policy: Union[FieldPolicy, str] = FieldPolicy.ZERO_FILL,
    body: CentralBody = EARTH,
) -> TLERecord:
    """Parse one three-line TLE record and derive its orbit.

    Raises:
        MalformedField: A field is unparseable and the policy is STRICT.
        InvalidOrbitalElements: The mean motion cannot yield an orbit.
    """
    line1 = _strip_eol(line1)
    line2 = _strip_eol(line2)

    catalog_number = coerce_field(line1[CATALOG_NUMBER], "catalog_number", int, policy)
    epoch = decode_epoch(line1[EPOCH], policy)
    element_set_number = coerce_field(line1[ELEMENT_SET_NUMBER], "element_set_number", int, policy)
    inclination = coerce_field(line2[INCLINATION], "inclination", float, policy)
    raan = coerce_field(line2[RAAN], "raan", float, policy)
    mean_motion = coerce_field(line2[MEAN_MOTION], "mean_motion", float, policy)

    orbit = derive_orbit(mean_motion, body)

    return TLERecord(
        line0=line0.strip(),
        line1=line1,
        line2=line2,
        catalog_number=catalog_number,
        epoch=epoch,
        inclination_deg=inclination,
        raan_deg=raan,
        mean_motion=mean_motion,
        element_set_number=element_set_number,
        orbit=orbit,
    )


def split_tle_groups(text: str) -> List[Tuple[str, str, str]]:
    """Split raw file text into floor(line_count / 3) consecutive line triples."""
    lines = text.split("\n")
    n_records = len(lines) // 3
    return [tuple(lines[i * 3:i * 3 + 3]) for i in range(n_records)]


def parse_tle_text(
    text: str,
    policy: Union[FieldPolicy, str] = FieldPolicy.ZERO_FILL,
    body: CentralBody = EARTH,
) -> ParseOutcome:
    """Parse every record in a TLE file.

    A record that fails to parse is reported in ``rejections`` and logged;
    it never stops the remaining records from being parsed.
    """
    outcome = ParseOutcome()
    for index, (line0, line1, line2) in enumerate(split_tle_groups(text)):
        try:
            outcome.records.append(parse_tle_record(line0, line1, line2, policy, body))
        except (MalformedField, InvalidOrbitalElements) as e:
            title = line0.strip()
            logger.warning(f"Rejected TLE record {index} ({title!r}): {e}")
            outcome.rejections.append(RecordRejection(index=index, title=title, reason=str(e)))

    logger.debug(f"Parsed {len(outcome.records)} TLE records, rejected {len(outcome.rejections)}")
    return outcome
