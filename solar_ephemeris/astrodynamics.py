import logging
from functools import partial

import jax
import jax.numpy as jnp
from jax import lax
import numpy as np

from .constants import AU, DAY, GM_SUN, KM, KEPLER_MAX_ITER, KEPLER_TOLERANCE
from .epoch import Epoch
from .frames import ReferenceFrame
from .orbital_elements import OrbitalElements, wrap_to_180
from .state_vector import StateVector

logger = logging.getLogger(__name__)


def solve_kepler(M: float, e: float, tol: float = KEPLER_TOLERANCE,
                 max_iter: int = KEPLER_MAX_ITER) -> float:
    """
    Solve Kepler's equation M = E - e* sin(E) for the eccentric anomaly E,
    working in degrees with the scaled eccentricity e* = e * 180/pi.

    Newton-Raphson iteration starting from E0 = M + e* sin(M):

        dM = M - (E - e* sin(E))
        dE = dM / (1 - e cos(E))
        E  = E + dE

    until |dE| <= tol or max_iter iterations have run; the last E is returned
    either way. Accuracy is best for M in [-180, 180].

    Args:
        M: Mean anomaly (deg)
        e: Eccentricity, 0 <= e < 1
        tol: Convergence tolerance on dE (deg)
        max_iter: Iteration cap

    Returns:
        Eccentric anomaly E (deg)
    """
    if e == 0.0:
        return M

    e_star = np.rad2deg(e)
    E = M + e_star * np.sin(np.deg2rad(M))

    for _ in range(max_iter):
        E_rad = np.deg2rad(E)
        dM = M - (E - e_star * np.sin(E_rad))
        dE = dM / (1.0 - e * np.cos(E_rad))
        E += dE
        if abs(dE) <= tol:
            break

    return float(E)


@partial(jax.jit, static_argnames=('max_iter',))
def solve_kepler_vec(M, e, tol=KEPLER_TOLERANCE, max_iter=KEPLER_MAX_ITER):
    """
    Vectorized version of solve_kepler that handles arrays of M and e.

    The Newton iteration runs under ``jax.lax.while_loop`` until every element
    has converged or ``max_iter`` is reached.

    Parameters
    ----------
    M : jnp.ndarray
        Array of mean anomalies (deg)
    e : jnp.ndarray or float
        Eccentricities, broadcast against M
    tol : float, optional
        Tolerance for convergence (deg)
    max_iter : int, optional
        Maximum number of iterations

    Returns
    -------
    E : jnp.ndarray
        Array of eccentric anomalies (deg)
    """
    M = jnp.asarray(M, dtype=jnp.float64)
    e = jnp.broadcast_to(jnp.asarray(e, dtype=jnp.float64), M.shape)
    e_star = jnp.rad2deg(e)
    E0 = M + e_star * jnp.sin(jnp.deg2rad(M))

    def cond_fn(carry):
        _, err, k = carry
        return (err > tol) & (k < max_iter)

    def body_fn(carry):
        E, _, k = carry
        E_rad = jnp.deg2rad(E)
        dM = M - (E - e_star * jnp.sin(E_rad))
        dE = dM / (1.0 - e * jnp.cos(E_rad))
        return E + dE, jnp.max(jnp.abs(dE), initial=0.0), k + 1

    init = (E0, jnp.asarray(jnp.inf, dtype=jnp.float64), jnp.asarray(0))
    E, _, _ = lax.while_loop(cond_fn, body_fn, init)

    # Circular orbits take the shortcut exactly.
    return jnp.where(e == 0.0, M, E)


def true_anomaly(E: float, e: float) -> float:
    """
    Convert eccentric anomaly to true anomaly.

    tan(nu/2) = sqrt((1 + e) / (1 - e)) * tan(E/2), with nu shifted by 360
    degrees where needed so it stays in the same half-plane as E.

    Args:
        E: Eccentric anomaly (deg)
        e: Eccentricity, 0 <= e < 1

    Returns:
        True anomaly nu (deg)
    """
    if e == 0.0:
        return E

    factor = np.sqrt((1.0 + e) / (1.0 - e))
    nu = float(np.rad2deg(2.0 * np.arctan(factor * np.tan(np.deg2rad(E) / 2.0))))

    if E > 90.0:
        if nu < 0.0:
            nu += 360.0
    elif -270.0 <= E < -90.0:
        if nu > 0.0:
            nu -= 360.0

    return nu


def orbital_plane_position(a: float, e: float, E: float) -> tuple[float, float]:
    """
    Position in the orbital plane, x' toward periapsis and z' = 0.

        x' = a (cos E - e)
        y' = a sqrt(1 - e^2) sin E

    Returns:
        (x', y') in the unit of ``a``
    """
    E_rad = np.deg2rad(E)
    x_p = a * (np.cos(E_rad) - e)
    y_p = a * np.sqrt(1.0 - e * e) * np.sin(E_rad)
    return float(x_p), float(y_p)


def orbital_plane_velocity(a: float, e: float, E: float, mu: float,
                           length_scale: float = AU) -> tuple[float, float]:
    """
    Velocity in the orbital plane, from dE/dt = n / (1 - e cos E).

    Args:
        a: Semi-major axis in the catalog unit (AU or km)
        e: Eccentricity
        E: Eccentric anomaly (deg)
        mu: Gravitational parameter of the central body (m^3/s^2)
        length_scale: Meters per unit of ``a`` (AU for planets, 1000 for moons)

    Returns:
        (vx', vy') in m/s
    """
    E_rad = np.deg2rad(E)
    a_m = a * length_scale

    n = np.sqrt(mu / a_m**3)
    dE_dt = n / (1.0 - e * np.cos(E_rad))

    vx_p = -a_m * np.sin(E_rad) * dE_dt
    vy_p = a_m * np.sqrt(1.0 - e * e) * np.cos(E_rad) * dE_dt
    return float(vx_p), float(vy_p)


def perifocal_matrix(omega: float, Omega: float, i: float) -> np.ndarray:
    """
    First two columns of Rz(-Omega) Rx(-i) Rz(-omega), angles in degrees.

    The orbital-plane input always has z' = 0, so the third column is never
    needed.

    Returns:
        3x2 array [[m11, m12], [m21, m22], [m31, m32]]
    """
    w, W, inc = np.deg2rad(omega), np.deg2rad(Omega), np.deg2rad(i)
    cos_w, sin_w = np.cos(w), np.sin(w)
    cos_W, sin_W = np.cos(W), np.sin(W)
    cos_i, sin_i = np.cos(inc), np.sin(inc)

    m11 = cos_w * cos_W - sin_w * sin_W * cos_i
    m12 = -sin_w * cos_W - cos_w * sin_W * cos_i
    m21 = cos_w * sin_W + sin_w * cos_W * cos_i
    m22 = -sin_w * sin_W + cos_w * cos_W * cos_i
    m31 = sin_w * sin_i
    m32 = cos_w * sin_i

    return np.array([[m11, m12], [m21, m22], [m31, m32]])


def rotate_to_reference(matrix: np.ndarray, xy, scale: float = 1.0) -> np.ndarray:
    """Rotate an orbital-plane (x', y') pair into the reference plane and scale it."""
    return (matrix @ np.asarray(xy, dtype=float)) * scale


def _plane_to_state(a, e, E, mu, omega, Omega, i, length_scale, epoch,
                    retrograde=False) -> StateVector:
    x_p, y_p = orbital_plane_position(a, e, E)
    vx_p, vy_p = orbital_plane_velocity(a, e, E, mu, length_scale=length_scale)
    if retrograde:
        vx_p, vy_p = -vx_p, -vy_p

    matrix = perifocal_matrix(omega, Omega, i)
    r = rotate_to_reference(matrix, (x_p, y_p), scale=length_scale)
    v = rotate_to_reference(matrix, (vx_p, vy_p))
    return StateVector(r=r, v=v, epoch=epoch, frame=ReferenceFrame.ECLIPTIC_J2000)


def elements_to_state(elements: OrbitalElements, mu: float = GM_SUN) -> StateVector:
    """
    Heliocentric ecliptic J2000 state from elements already valid at the
    requested epoch (see OrbitalElements.at).

    Args:
        elements: Elements with a in AU
        mu: Gravitational parameter of the central body (m^3/s^2)

    Returns:
        StateVector in m and m/s, stamped with ``elements.epoch``
    """
    M = elements.mean_anomaly_normalized
    E = solve_kepler(M, elements.e)
    return _plane_to_state(elements.a, elements.e, E, mu,
                           elements.omega, elements.Omega, elements.i,
                           AU, elements.epoch)


def moon_mean_anomaly(elements: OrbitalElements, period_days: float, epoch: Epoch) -> float:
    """
    Mean anomaly (deg, wrapped to [-180, 180]) of a moon at ``epoch``.

    The moon advances at n = 2 pi / P from its mean anomaly at the element
    epoch. The elapsed time is converted from days to seconds once, here.
    """
    n = 2.0 * np.pi / (period_days * DAY)  # rad/s
    elapsed = epoch.seconds_since(elements.epoch)
    return wrap_to_180(elements.mean_anomaly + float(np.rad2deg(n * elapsed)))


def moon_relative_state(elements: OrbitalElements, period_days: float, retrograde: bool,
                        mu_parent: float, epoch: Epoch) -> StateVector:
    """
    State of a moon relative to its parent, in ecliptic J2000.

    Moons do not use element rates: the mean anomaly is advanced with the
    period-derived mean motion and all other elements stay fixed.

    Args:
        elements: Moon elements, a in km
        period_days: Orbital period (days)
        retrograde: Negate the orbital-plane velocity
        mu_parent: Gravitational parameter of the parent body (m^3/s^2)
        epoch: Target epoch

    Returns:
        StateVector relative to the parent body
    """
    M = moon_mean_anomaly(elements, period_days, epoch)
    E = solve_kepler(M, elements.e)
    logger.debug("Moon mean anomaly %.6f deg, eccentric anomaly %.6f deg", M, E)
    return _plane_to_state(elements.a, elements.e, E, mu_parent,
                           elements.omega, elements.Omega, elements.i,
                           KM, epoch, retrograde=retrograde)
