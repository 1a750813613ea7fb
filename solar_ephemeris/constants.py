"""
Physical, astronomical and numerical constants for solar_ephemeris.

All values are SI unless noted otherwise.
"""
import numpy as np

# Basic astronomical and time constants
AU = 149597870700.0  # m per AU (IAU 2012, exact)
KMPAU = AU / 1000.0  # km per AU
KM = 1000.0  # m per km
DAY = 86400.0  # seconds per day
DAYS_PER_YEAR = 365.25  # days per Julian year
DAYS_PER_CENTURY = 36525.0  # days per Julian century
YEAR = DAYS_PER_YEAR * DAY  # seconds per Julian year

# Reference epochs (Julian Date)
JD_J2000 = 2451545.0  # 2000-Jan-01 12:00:00 TT
JD_UNIX_EPOCH = 2440587.5  # 1970-Jan-01 00:00:00 UTC
MJD_OFFSET = 2400000.5

# Gravitational parameters (m^3/s^2)
GM_SUN = 1.32712440041939e20  # DE440
GM_EARTH = 3.986004418e14  # IERS 2010

# Obliquity of the ecliptic at J2000 (IAU 2006)
OBLIQUITY_J2000_DEG = 23.439291111
OBLIQUITY_J2000 = np.deg2rad(OBLIQUITY_J2000_DEG)

ARCSEC_PER_DEG = 3600.0

# Kepler solver defaults
KEPLER_TOLERANCE = 1.0e-8  # degrees
KEPLER_MAX_ITER = 50

# Orbit classification thresholds
CIRCULAR_ECCENTRICITY = 0.001
PARABOLIC_TOLERANCE = 0.001
