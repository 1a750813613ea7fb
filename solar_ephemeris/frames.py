"""
Coordinate reference frames and the rotations between them.

Supported frames are ecliptic J2000 (the plane of Earth's orbit at J2000.0,
in which the bundled elements are given) and equatorial J2000 (Earth's mean
equator at J2000.0). ICRF is treated as numerically identical to equatorial
J2000 and the heliocentric-ecliptic tag as an alias of ecliptic J2000, so the
only real rotation between frames is the one about the shared x-axis (the
vernal equinox direction) by the obliquity.
"""
import logging
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from solar_ephemeris.constants import ARCSEC_PER_DEG, OBLIQUITY_J2000

if TYPE_CHECKING:
    from solar_ephemeris.epoch import Epoch
    from solar_ephemeris.state_vector import StateVector

logger = logging.getLogger(__name__)


class ReferenceFrame(str, Enum):
    """Closed set of output frames."""
    ICRF = 'ICRF'
    ECLIPTIC_J2000 = 'ECLIPJ2000'
    EQUATORIAL_J2000 = 'J2000'
    HELIOCENTRIC_ECLIPTIC = 'HCI'

    @property
    def canonical(self) -> 'ReferenceFrame':
        """The frame this one is numerically identical to."""
        if self is ReferenceFrame.HELIOCENTRIC_ECLIPTIC:
            return ReferenceFrame.ECLIPTIC_J2000
        if self is ReferenceFrame.ICRF:
            return ReferenceFrame.EQUATORIAL_J2000
        return self


def rotation_matrix_x(angle: float) -> np.ndarray:
    """Right-handed rotation by ``angle`` radians about the x-axis."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [1.0, 0.0, 0.0],
        [0.0, c, -s],
        [0.0, s, c],
    ])


def rotation_matrix_y(angle: float) -> np.ndarray:
    """Right-handed rotation by ``angle`` radians about the y-axis."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [c, 0.0, s],
        [0.0, 1.0, 0.0],
        [-s, 0.0, c],
    ])


def rotation_matrix_z(angle: float) -> np.ndarray:
    """Right-handed rotation by ``angle`` radians about the z-axis."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [c, -s, 0.0],
        [s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])


_ECLIPTIC_TO_EQUATORIAL = rotation_matrix_x(OBLIQUITY_J2000)
_EQUATORIAL_TO_ECLIPTIC = rotation_matrix_x(-OBLIQUITY_J2000)


def _apply(matrix: np.ndarray, vectors) -> np.ndarray:
    # Works for a single (3,) vector and for (n, 3) stacks.
    return np.asarray(vectors, dtype=float) @ matrix.T


def ecliptic_to_equatorial(vector) -> np.ndarray:
    """
    Rotate ecliptic J2000 vector(s) into equatorial J2000.

        x' = x
        y' = cos(eps) * y - sin(eps) * z
        z' = sin(eps) * y + cos(eps) * z

    Args:
        vector: Array of shape (3,) or (n, 3)

    Returns:
        Rotated array of the same shape
    """
    return _apply(_ECLIPTIC_TO_EQUATORIAL, vector)


def equatorial_to_ecliptic(vector) -> np.ndarray:
    """Rotate equatorial J2000 vector(s) into ecliptic J2000 (inverse of ecliptic_to_equatorial)."""
    return _apply(_EQUATORIAL_TO_ECLIPTIC, vector)


def frame_rotation(from_frame: ReferenceFrame, to_frame: ReferenceFrame) -> np.ndarray:
    """
    3x3 matrix taking vectors in ``from_frame`` to ``to_frame``.

    Raises:
        ValueError: if either argument is not a ReferenceFrame value
    """
    source = ReferenceFrame(from_frame).canonical
    target = ReferenceFrame(to_frame).canonical
    if source is target:
        return np.eye(3)
    if source is ReferenceFrame.ECLIPTIC_J2000:
        return _ECLIPTIC_TO_EQUATORIAL
    return _EQUATORIAL_TO_ECLIPTIC


def transform(state: 'StateVector', to: ReferenceFrame) -> 'StateVector':
    """
    Express a state vector in another reference frame.

    Position and velocity are rotated with the same matrix. A state already in
    the target frame is returned as is; aliases (ICRF/J2000, HCI/ECLIPJ2000)
    only change the frame tag.

    Args:
        state: State to transform
        to: Target frame

    Returns:
        StateVector tagged with ``to``
    """
    to = ReferenceFrame(to)
    if state.frame is to:
        return state

    matrix = frame_rotation(state.frame, to)
    logger.debug("Transforming state from %s to %s", state.frame.value, to.value)
    return state._replace(r=_apply(matrix, state.r), v=_apply(matrix, state.v), frame=to)


def precession_matrix(epoch: 'Epoch') -> np.ndarray:
    """
    IAU 1976 precession matrix from mean equator and equinox of J2000 to
    the mean equator and equinox of ``epoch``.

    The angles are cubic polynomials in T, the Julian centuries since J2000
    (Meeus, Astronomical Algorithms, eq. 21.3), in arcseconds:

        zeta  = 2306.2181 T + 0.30188 T^2 + 0.017998 T^3
        z     = 2306.2181 T + 1.09468 T^2 + 0.018203 T^3
        theta = 2004.3109 T - 0.42665 T^2 - 0.041833 T^3

    and P = R3(-z) R2(theta) R3(-zeta) in the passive (frame rotation)
    convention, which equals Rz(z) Ry(-theta) Rz(zeta) with the active
    matrices of this module.

    Args:
        epoch: Target epoch

    Returns:
        3x3 rotation matrix (identity at J2000)
    """
    T = epoch.centuries_since_j2000
    zeta = (2306.2181 * T + 0.30188 * T**2 + 0.017998 * T**3) / ARCSEC_PER_DEG
    z = (2306.2181 * T + 1.09468 * T**2 + 0.018203 * T**3) / ARCSEC_PER_DEG
    theta = (2004.3109 * T - 0.42665 * T**2 - 0.041833 * T**3) / ARCSEC_PER_DEG

    return (rotation_matrix_z(np.deg2rad(z))
            @ rotation_matrix_y(-np.deg2rad(theta))
            @ rotation_matrix_z(np.deg2rad(zeta)))


def convert_j2000_to_jnow(vector, epoch: 'Epoch') -> np.ndarray:
    """
    Precess an equatorial J2000 vector to the mean equator of date (JNow).

    Low-precision model, good to better than an arcminute over a few
    centuries; enough for planetarium use and telescope pointing.

    Args:
        vector: Equatorial J2000 vector(s), shape (3,) or (n, 3)
        epoch: Date of the target equator and equinox

    Returns:
        Vector(s) in the JNow frame
    """
    return _apply(precession_matrix(epoch), vector)


def cartesian_to_spherical(vector) -> tuple[float, float, float]:
    """
    Convert a Cartesian vector to (r, longitude, latitude).

    Returns:
        r in the input unit, longitude in [0, 360) deg measured from the x-axis
        in the x-y plane, latitude in [-90, 90] deg from the x-y plane.
        The zero vector maps to (0, 0, 0).
    """
    x, y, z = (float(c) for c in vector)
    r = float(np.sqrt(x * x + y * y + z * z))
    if r == 0.0:
        return 0.0, 0.0, 0.0

    lat = float(np.rad2deg(np.arcsin(z / r)))
    lon = float(np.rad2deg(np.arctan2(y, x)))
    if lon < 0.0:
        lon += 360.0
    return r, lon, lat


def spherical_to_cartesian(r: float, longitude: float, latitude: float) -> np.ndarray:
    """Convert (r, longitude deg, latitude deg) to a Cartesian vector."""
    lon = np.deg2rad(longitude)
    lat = np.deg2rad(latitude)
    cos_lat = np.cos(lat)
    return np.array([
        r * cos_lat * np.cos(lon),
        r * cos_lat * np.sin(lon),
        r * np.sin(lat),
    ])


def cartesian_to_radec(equatorial) -> tuple[float, float, float]:
    """Equatorial Cartesian vector to (right ascension deg, declination deg, distance)."""
    r, lon, lat = cartesian_to_spherical(equatorial)
    return lon, lat, r


def radec_to_cartesian(ra: float, dec: float, distance: float) -> np.ndarray:
    """Right ascension/declination (deg) and distance to an equatorial Cartesian vector."""
    return spherical_to_cartesian(distance, ra, dec)
