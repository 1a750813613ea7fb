"""
Orbital elements representation for solar system bodies.
"""
import math
from typing import NamedTuple, Optional

from solar_ephemeris.constants import (
    CIRCULAR_ECCENTRICITY, DAYS_PER_CENTURY, DAYS_PER_YEAR, PARABOLIC_TOLERANCE
)
from solar_ephemeris.epoch import Epoch


def wrap_to_180(angle: float) -> float:
    """Normalize an angle in degrees to the range [-180, 180]."""
    angle = math.fmod(angle, 360.0)
    if angle > 180.0:
        angle -= 360.0
    elif angle < -180.0:
        angle += 360.0
    return angle


class ElementRates(NamedTuple):
    """
    Rates of change of the six orbital elements, per Julian century.

    Attributes:
        a_rate: Semi-major axis rate (AU/century)
        e_rate: Eccentricity rate (1/century)
        i_rate: Inclination rate (deg/century)
        L_rate: Mean longitude rate (deg/century), roughly the mean motion
        varpi_rate: Longitude of perihelion rate (deg/century)
        Omega_rate: Longitude of ascending node rate (deg/century)
    """
    a_rate: float
    e_rate: float
    i_rate: float
    L_rate: float
    varpi_rate: float
    Omega_rate: float


class OrbitalElements(NamedTuple):
    """
    Keplerian orbital elements in the form used by JPL's approximate planetary
    positions (mean longitude and longitude of perihelion instead of mean
    anomaly and argument of periapsis).

    All angular quantities are in degrees. The semi-major axis is in AU for
    heliocentric bodies and in km for moons.

    Attributes:
        a: Semi-major axis (AU or km)
        e: Eccentricity (dimensionless, 0 <= e < 1 for elliptical orbits)
        i: Inclination relative to the ecliptic (deg)
        L: Mean longitude (deg)
        varpi: Longitude of perihelion (deg)
        Omega: Longitude of the ascending node (deg)
        epoch: Epoch at which these values hold
        rates: Optional per-century rates; None means time-invariant elements

    Note:
        - For elliptical orbits: 0 <= e < 1
        - For parabolic orbits: e = 1
        - For hyperbolic orbits: e > 1
        Only elliptical orbits are propagated; the other cases are reported by
        the classification properties.

    Examples:
        >>> earth = OrbitalElements(
        ...     a=1.00000261, e=0.01671123, i=-0.00001531,
        ...     L=100.46457166, varpi=102.93768193, Omega=0.0,
        ...     epoch=J2000,
        ... )
        >>> round(earth.mean_anomaly_normalized, 8)
        -2.47311027
    """
    a: float  # semi-major axis (AU or km)
    e: float  # eccentricity
    i: float  # inclination (deg)
    L: float  # mean longitude (deg)
    varpi: float  # longitude of perihelion (deg)
    Omega: float  # longitude of ascending node (deg)
    epoch: Epoch  # epoch of validity
    rates: Optional[ElementRates] = None  # per-century rates

    @property
    def omega(self) -> float:
        """Argument of perihelion (deg): varpi - Omega."""
        return self.varpi - self.Omega

    @property
    def mean_anomaly(self) -> float:
        """Mean anomaly (deg): L - varpi."""
        return self.L - self.varpi

    @property
    def mean_anomaly_normalized(self) -> float:
        """Mean anomaly wrapped to [-180, 180] degrees."""
        return wrap_to_180(self.mean_anomaly)

    @property
    def perihelion_distance(self) -> float:
        """q = a(1 - e), same unit as a."""
        return self.a * (1.0 - self.e)

    @property
    def aphelion_distance(self) -> float:
        """Q = a(1 + e), same unit as a. Only meaningful for elliptical orbits."""
        return self.a * (1.0 + self.e)

    @property
    def period_years(self) -> float:
        """Heliocentric orbital period from Kepler's third law, T^2 = a^3 (a in AU)."""
        return math.sqrt(abs(self.a) ** 3)

    @property
    def period_days(self) -> float:
        return self.period_years * DAYS_PER_YEAR

    @property
    def is_elliptical(self) -> bool:
        return 0.0 <= self.e < 1.0

    @property
    def is_circular(self) -> bool:
        return self.e < CIRCULAR_ECCENTRICITY

    @property
    def is_parabolic(self) -> bool:
        return abs(self.e - 1.0) < PARABOLIC_TOLERANCE

    @property
    def is_hyperbolic(self) -> bool:
        return self.e > 1.0

    def at(self, epoch: Epoch) -> 'OrbitalElements':
        """
        Return the elements linearly extrapolated to another epoch.

        element(T) = element_0 + rate * T, with T the Julian centuries from
        ``self.epoch`` to ``epoch``. Without rates the values are unchanged and
        only the epoch is restamped. No range check is applied; the bundled
        rates are fitted for 1800-2050 AD.

        Args:
            epoch: Target epoch

        Returns:
            New OrbitalElements valid at ``epoch``
        """
        if self.rates is None:
            return self._replace(epoch=epoch)

        T = (epoch.julian_date - self.epoch.julian_date) / DAYS_PER_CENTURY
        r = self.rates
        return OrbitalElements(
            a=self.a + r.a_rate * T,
            e=self.e + r.e_rate * T,
            i=self.i + r.i_rate * T,
            L=self.L + r.L_rate * T,
            varpi=self.varpi + r.varpi_rate * T,
            Omega=self.Omega + r.Omega_rate * T,
            epoch=epoch,
            rates=r,
        )

    def __str__(self) -> str:
        return (
            f"OrbitalElements(epoch: JD {self.epoch.julian_date})\n"
            f"  a = {self.a:.6f}\n"
            f"  e = {self.e:.6f}\n"
            f"  i = {self.i:.4f} deg\n"
            f"  L = {self.L:.4f} deg\n"
            f"  varpi = {self.varpi:.4f} deg\n"
            f"  Omega = {self.Omega:.4f} deg"
        )


def propagate_elements(elements: OrbitalElements, epoch: Epoch) -> OrbitalElements:
    """Propagate ``elements`` to ``epoch`` by linear rate extrapolation."""
    return elements.at(epoch)
