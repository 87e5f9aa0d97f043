from datetime import datetime, timedelta, timezone
from typing import Union

from satledger.core.errors import FieldPolicy, MalformedEpoch
from satledger.services.fields import coerce_field

# Two-digit TLE years above this pivot belong to the 1900s
YEAR_PIVOT = 56


def decode_epoch(field: str, policy: Union[FieldPolicy, str] = FieldPolicy.ZERO_FILL) -> datetime:
    """
    Convert a TLE epoch field (YYDDD.DDDDDDDD) into an aware UTC datetime.

    Day 1.0 is midnight of January 1st, so the timestamp is midnight of
    "day zero" (December 31st of the previous year) plus the fractional day.
    """
    text = field.strip()
    year = coerce_field(text[:2], "epoch_year", int, policy, error=MalformedEpoch)
    day_of_year = coerce_field(text[2:], "epoch_day", float, policy, error=MalformedEpoch)

    if year > YEAR_PIVOT:
        year += 1900
    else:
        year += 2000

    day_zero = datetime(year, 1, 1, tzinfo=timezone.utc) - timedelta(days=1)
    try:
        return day_zero + timedelta(days=day_of_year)
    except OverflowError as e:
        raise MalformedEpoch(field, f"TLE epoch day out of range: {field!r}") from e
