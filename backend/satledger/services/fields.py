"""
Fixed-column numeric field coercion shared by the epoch decoder and the TLE parser.
"""
import logging
import math
from typing import Callable, Type, TypeVar, Union

from satledger.core.errors import FieldPolicy, MalformedField

logger = logging.getLogger(__name__)

N = TypeVar("N", int, float)


def coerce_field(
    raw: str,
    field: str,
    cast: Callable[[str], N],
    policy: Union[FieldPolicy, str] = FieldPolicy.ZERO_FILL,
    error: Type[MalformedField] = MalformedField,
) -> N:
    """
    Parse a trimmed fixed-column field with `cast`.

    Under ZERO_FILL an unparseable field becomes 0 and a warning is logged;
    under STRICT the `error` exception is raised.
    """
    text = raw.strip()
    try:
        value = cast(text)
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"non-finite value {text!r}")
        return value
    except ValueError as e:
        if FieldPolicy(policy) is FieldPolicy.STRICT:
            if error is MalformedField:
                raise MalformedField(field, raw) from e
            raise error(raw) from e
        logger.warning(f"Zero-filling malformed field {field}: {raw!r}")
        return cast("0")
