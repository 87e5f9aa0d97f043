"""
Orbit Derivation Service

Derives period, semi-major axis and altitude from TLE mean motion using
two-body Keplerian mechanics.

NOT a propagator: the orbit is treated as circular (eccentricity ignored),
so altitude is the semi-major axis minus the mean body radius.
"""

import math
from dataclasses import dataclass

from satledger.core.errors import InvalidOrbitalElements

SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class CentralBody:
    """Gravitational parameter (km^3/s^2) and mean radius (km) of the body being orbited."""
    name: str
    mu_km3_s2: float
    radius_km: float


EARTH = CentralBody("Earth", mu_km3_s2=398600.4418, radius_km=6371.0)
MARS = CentralBody("Mars", mu_km3_s2=42828.37, radius_km=3389.5)


@dataclass(frozen=True)
class OrbitParameters:
    period_s: float
    semi_major_axis_km: float
    altitude_km: float


def derive_orbit(mean_motion: float, body: CentralBody = EARTH) -> OrbitParameters:
    """
    Compute orbital period, semi-major axis and altitude from mean motion.

    Kepler's third law: a = (sqrt(mu) * T / 2pi) ^ (2/3)

    Args:
        mean_motion: Revolutions per day.
        body: Central body constants.

    Raises:
        InvalidOrbitalElements: If mean motion is zero, negative or not finite.
    """
    if not math.isfinite(mean_motion) or mean_motion <= 0.0:
        raise InvalidOrbitalElements(f"Mean motion must be a positive number, got {mean_motion!r}")

    period_s = SECONDS_PER_DAY / mean_motion
    semi_major_axis_km = ((math.sqrt(body.mu_km3_s2) * period_s) / (2.0 * math.pi)) ** (2.0 / 3.0)
    altitude_km = semi_major_axis_km - body.radius_km

    return OrbitParameters(
        period_s=period_s,
        semi_major_axis_km=semi_major_axis_km,
        altitude_km=altitude_km,
    )
