# Configure JAX to use double precision (64-bit floats) throughout the package
import jax
jax.config.update("jax_enable_x64", True)

from .epoch import (
    Epoch,
    CalendarDate,
    J2000,
    UNIX_EPOCH,
    epoch_to_days,
    days_between,
    centuries_between,
)
from .orbital_elements import OrbitalElements, ElementRates, propagate_elements
from .state_vector import StateVector
from .frames import (
    ReferenceFrame,
    ecliptic_to_equatorial,
    equatorial_to_ecliptic,
    transform,
    convert_j2000_to_jnow,
    cartesian_to_radec,
    radec_to_cartesian,
)

from .constants import (
    # Constants
    AU,
    KMPAU,
    DAY,
    YEAR,
    GM_SUN,
    GM_EARTH,
    JD_J2000,
    OBLIQUITY_J2000_DEG,
)

from .astrodynamics import (
    # Functions
    solve_kepler,
    solve_kepler_vec,
    true_anomaly,
    elements_to_state,
    moon_relative_state,
)

from .errors import (
    EphemerisError,
    BodyNotFound,
    MoonNotFound,
    ParentNotFound,
    CatalogError,
)

from .bodies import (
    # Catalog records
    HeliocentricBody,
    Moon,
    PhysicalParameters,
    Catalog,
    load_catalog,
)

from .ephemeris import Ephemeris, Trajectory
from .config import configure_logging

__all__ = [
    # Constants
    "AU",
    "KMPAU",
    "DAY",
    "YEAR",
    "GM_SUN",
    "GM_EARTH",
    "JD_J2000",
    "OBLIQUITY_J2000_DEG",

    # Time
    "Epoch",
    "CalendarDate",
    "J2000",
    "UNIX_EPOCH",
    "epoch_to_days",
    "days_between",
    "centuries_between",

    # Named tuples
    "OrbitalElements",
    "ElementRates",
    "StateVector",
    "Trajectory",

    # Frames
    "ReferenceFrame",
    "ecliptic_to_equatorial",
    "equatorial_to_ecliptic",
    "transform",
    "convert_j2000_to_jnow",
    "cartesian_to_radec",
    "radec_to_cartesian",

    # Functions
    "propagate_elements",
    "solve_kepler",
    "solve_kepler_vec",
    "true_anomaly",
    "elements_to_state",
    "moon_relative_state",

    # Catalog
    "HeliocentricBody",
    "Moon",
    "PhysicalParameters",
    "Catalog",
    "load_catalog",

    # Engine
    "Ephemeris",

    # Errors
    "EphemerisError",
    "BodyNotFound",
    "MoonNotFound",
    "ParentNotFound",
    "CatalogError",

    "configure_logging",
]
