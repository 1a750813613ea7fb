"""
Batch state evaluation on JAX arrays.

The functions here evaluate one body at many epochs in a single pass, using
the same element conventions as the scalar path in ``astrodynamics``
(degrees, L/varpi elements, Rz(-Omega) Rx(-i) Rz(-omega) rotation).
"""
import jax.numpy as jnp

from solar_ephemeris.astrodynamics import solve_kepler_vec
from solar_ephemeris.constants import AU, DAY, DAYS_PER_CENTURY, GM_SUN, KM
from solar_ephemeris.orbital_elements import OrbitalElements


def wrap_to_180(angle):
    """Normalize angles in degrees to [-180, 180)."""
    return jnp.mod(angle + 180.0, 360.0) - 180.0


def keplerian_states(a, e, inc, Omega, omega, M, mu, length_scale,
                     retrograde: bool = False) -> tuple[jnp.ndarray, jnp.ndarray]:
    """
    Cartesian states from elliptical elements, vectorized over epochs.

    Args:
        a: Semi-major axis in the catalog unit, scalar or (n,)
        e: Eccentricity, scalar or (n,)
        inc, Omega, omega: Inclination, node and argument of periapsis (deg)
        M: Mean anomaly (deg), shape (n,)
        mu: Gravitational parameter of the central body (m^3/s^2)
        length_scale: Meters per unit of ``a``
        retrograde: Negate the orbital-plane velocity

    Returns:
        (r, v) arrays of shape (n, 3) in m and m/s
    """
    M = jnp.atleast_1d(jnp.asarray(M, dtype=jnp.float64))
    shape = M.shape
    a = jnp.broadcast_to(jnp.asarray(a, dtype=jnp.float64), shape)
    e = jnp.broadcast_to(jnp.asarray(e, dtype=jnp.float64), shape)

    E = jnp.deg2rad(solve_kepler_vec(M, e))
    cos_E, sin_E = jnp.cos(E), jnp.sin(E)
    sqrt_1me2 = jnp.sqrt(1.0 - e * e)

    a_m = a * length_scale
    x_p = a_m * (cos_E - e)
    y_p = a_m * sqrt_1me2 * sin_E

    n = jnp.sqrt(mu / a_m**3)
    dE_dt = n / (1.0 - e * cos_E)
    vx_p = -a_m * sin_E * dE_dt
    vy_p = a_m * sqrt_1me2 * cos_E * dE_dt
    if retrograde:
        vx_p, vy_p = -vx_p, -vy_p

    w, W, i = jnp.deg2rad(omega), jnp.deg2rad(Omega), jnp.deg2rad(inc)
    cos_w, sin_w = jnp.cos(w), jnp.sin(w)
    cos_W, sin_W = jnp.cos(W), jnp.sin(W)
    cos_i, sin_i = jnp.cos(i), jnp.sin(i)

    m11 = cos_w * cos_W - sin_w * sin_W * cos_i
    m12 = -sin_w * cos_W - cos_w * sin_W * cos_i
    m21 = cos_w * sin_W + sin_w * cos_W * cos_i
    m22 = -sin_w * sin_W + cos_w * cos_W * cos_i
    m31 = sin_w * sin_i
    m32 = cos_w * sin_i

    r = jnp.stack([m11 * x_p + m12 * y_p,
                   m21 * x_p + m22 * y_p,
                   m31 * x_p + m32 * y_p], axis=-1)
    v = jnp.stack([m11 * vx_p + m12 * vy_p,
                   m21 * vx_p + m22 * vy_p,
                   m31 * vx_p + m32 * vy_p], axis=-1)
    return r, v


def heliocentric_states(elements: OrbitalElements, days, mu: float = GM_SUN):
    """
    Heliocentric ecliptic J2000 states of a body at many epochs.

    Elements are extrapolated linearly with their per-century rates, exactly
    as ``OrbitalElements.at`` does for a single epoch.

    Args:
        elements: Base elements (a in AU)
        days: Days since ``elements.epoch``, shape (n,)
        mu: Gravitational parameter of the Sun (m^3/s^2)

    Returns:
        (r, v) arrays of shape (n, 3) in m and m/s
    """
    days = jnp.atleast_1d(jnp.asarray(days, dtype=jnp.float64))
    T = days / DAYS_PER_CENTURY

    a, e, inc = elements.a, elements.e, elements.i
    L, varpi, Omega = elements.L, elements.varpi, elements.Omega
    rates = elements.rates
    if rates is not None:
        a = a + rates.a_rate * T
        e = e + rates.e_rate * T
        inc = inc + rates.i_rate * T
        L = L + rates.L_rate * T
        varpi = varpi + rates.varpi_rate * T
        Omega = Omega + rates.Omega_rate * T

    M = wrap_to_180((L - varpi) + jnp.zeros_like(T))
    return keplerian_states(a, e, inc, Omega, varpi - Omega, M, mu, AU)


def moon_relative_states(elements: OrbitalElements, period_days: float, retrograde: bool,
                         mu_parent: float, days):
    """
    Parent-relative ecliptic J2000 states of a moon at many epochs.

    Args:
        elements: Moon elements (a in km), without rates
        period_days: Orbital period (days)
        retrograde: Negate the orbital-plane velocity
        mu_parent: Gravitational parameter of the parent (m^3/s^2)
        days: Days since ``elements.epoch``, shape (n,)

    Returns:
        (r, v) arrays of shape (n, 3) in m and m/s
    """
    days = jnp.atleast_1d(jnp.asarray(days, dtype=jnp.float64))
    n = 2.0 * jnp.pi / (period_days * DAY)  # rad/s
    M = wrap_to_180(elements.mean_anomaly + jnp.rad2deg(n * days * DAY))
    return keplerian_states(elements.a, elements.e, elements.i, elements.Omega,
                            elements.omega, M, mu_parent, KM, retrograde=retrograde)
