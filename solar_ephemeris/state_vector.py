"""
State vector representation in Cartesian coordinates.
"""
from typing import NamedTuple

import numpy as np

from solar_ephemeris.constants import AU
from solar_ephemeris.epoch import Epoch
from solar_ephemeris.frames import ReferenceFrame


class StateVector(NamedTuple):
    """
    Cartesian position and velocity of a body at an epoch.

    Distances are in meters and velocities in meters per second. The frame tag
    says how to read the components: for ecliptic J2000, x points at the
    vernal equinox and z at the ecliptic north pole.

    Attributes:
        r: Position vector [x, y, z] in m
        v: Velocity vector [vx, vy, vz] in m/s
        epoch: Epoch at which the state holds
        frame: Reference frame of the components

    Examples:
        >>> state = StateVector(
        ...     r=np.array([1.0 * AU, 0.0, 0.0]),
        ...     v=np.array([0.0, 29780.0, 0.0]),
        ...     epoch=J2000,
        ...     frame=ReferenceFrame.ECLIPTIC_J2000,
        ... )
        >>> state.distance_au
        1.0
    """
    r: np.ndarray  # position [x, y, z] (m)
    v: np.ndarray  # velocity [vx, vy, vz] (m/s)
    epoch: Epoch
    frame: ReferenceFrame = ReferenceFrame.ECLIPTIC_J2000

    @property
    def distance(self) -> float:
        """Distance from the origin (m)."""
        return float(np.linalg.norm(self.r))

    @property
    def distance_km(self) -> float:
        return self.distance / 1000.0

    @property
    def distance_au(self) -> float:
        return self.distance / AU

    @property
    def speed(self) -> float:
        """Magnitude of the velocity (m/s)."""
        return float(np.linalg.norm(self.v))

    @property
    def speed_km_s(self) -> float:
        return self.speed / 1000.0

    @property
    def position_direction(self) -> np.ndarray:
        """Unit vector from the origin toward the body."""
        return self.r / np.linalg.norm(self.r)

    @property
    def velocity_direction(self) -> np.ndarray:
        """Unit vector along the direction of motion."""
        return self.v / np.linalg.norm(self.v)

    @property
    def specific_angular_momentum(self) -> np.ndarray:
        """h = r x v (m^2/s), normal to the orbital plane."""
        return np.cross(self.r, self.v)

    @property
    def specific_angular_momentum_magnitude(self) -> float:
        return float(np.linalg.norm(self.specific_angular_momentum))

    @property
    def radial_velocity(self) -> float:
        """Velocity component along the position direction (positive outward)."""
        return float(np.dot(self.position_direction, self.v))

    @property
    def transverse_velocity(self) -> float:
        """Magnitude of the velocity component perpendicular to the position."""
        v_radial = self.radial_velocity * self.position_direction
        return float(np.linalg.norm(self.v - v_radial))

    @property
    def x(self) -> float:
        return float(self.r[0])

    @property
    def y(self) -> float:
        return float(self.r[1])

    @property
    def z(self) -> float:
        return float(self.r[2])

    @property
    def vx(self) -> float:
        return float(self.v[0])

    @property
    def vy(self) -> float:
        return float(self.v[1])

    @property
    def vz(self) -> float:
        return float(self.v[2])

    def transform(self, frame: ReferenceFrame) -> 'StateVector':
        """Return this state expressed in ``frame``."""
        from solar_ephemeris.frames import transform

        return transform(self, frame)

    def __str__(self) -> str:
        return (
            f"StateVector(epoch: JD {self.epoch.julian_date}, frame: {self.frame.value})\n"
            f"  r = [{self.x:.3e}, {self.y:.3e}, {self.z:.3e}] m\n"
            f"  v = [{self.vx:.3f}, {self.vy:.3f}, {self.vz:.3f}] m/s\n"
            f"  |r| = {self.distance_au:.6f} AU\n"
            f"  |v| = {self.speed_km_s:.3f} km/s"
        )
