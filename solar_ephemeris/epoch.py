"""
Time representation based on Julian Date.
"""
import math
from datetime import datetime, timedelta, timezone
from typing import NamedTuple

from solar_ephemeris.constants import (
    DAY, DAYS_PER_CENTURY, JD_J2000, JD_UNIX_EPOCH, MJD_OFFSET
)


class CalendarDate(NamedTuple):
    """Calendar components of an epoch (Gregorian after 1582-10-15, Julian before)."""
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: float


class Epoch(NamedTuple):
    """
    A point in time expressed as a Julian Date.

    Julian Date is a continuous count of days since noon UT on January 1,
    4713 BC (proleptic Julian calendar). It avoids calendar reforms and varying
    month lengths, which makes differences between epochs plain subtraction.

    Attributes:
        julian_date: Days (with fraction) since JD 0

    Examples:
        >>> epoch = Epoch.from_calendar(2025, 3, 15, 14, 30)
        >>> epoch.centuries_since_j2000
        0.2520...
        >>> J2000.add_days(30.0).days_since(J2000)
        30.0
    """
    julian_date: float

    @classmethod
    def from_mjd(cls, mjd: float) -> 'Epoch':
        """Create an epoch from a Modified Julian Date (MJD = JD - 2400000.5)."""
        return cls(mjd + MJD_OFFSET)

    @classmethod
    def from_calendar(cls, year: int, month: int, day: int,
                      hour: int = 0, minute: int = 0, second: float = 0.0) -> 'Epoch':
        """
        Create an epoch from calendar components.

        Uses the Gregorian calendar for dates on or after 1582-10-15 and the
        Julian calendar before that (Meeus, Astronomical Algorithms, ch. 7).

        Args:
            year: Astronomical year (0 = 1 BC, negative for earlier years)
            month: Month 1-12
            day: Day of month
            hour, minute, second: Time of day (UT)

        Returns:
            Epoch for the given instant
        """
        y, m = year, month
        if m <= 2:
            y -= 1
            m += 12

        if (year, month, day) >= (1582, 10, 15):
            a = math.floor(y / 100)
            b = 2 - a + math.floor(a / 4)
        else:
            b = 0

        jd = (math.floor(365.25 * (y + 4716)) + math.floor(30.6001 * (m + 1))
              + day + b - 1524.5)
        day_fraction = (hour + minute / 60.0 + second / 3600.0) / 24.0
        return cls(jd + day_fraction)

    @classmethod
    def from_datetime(cls, dt: datetime) -> 'Epoch':
        """Create an epoch from a datetime. Naive datetimes are taken as UTC."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return cls(JD_UNIX_EPOCH + dt.timestamp() / DAY)

    @property
    def mjd(self) -> float:
        """Modified Julian Date."""
        return self.julian_date - MJD_OFFSET

    @property
    def centuries_since_j2000(self) -> float:
        """Julian centuries since J2000.0 (negative before)."""
        return (self.julian_date - JD_J2000) / DAYS_PER_CENTURY

    @property
    def calendar(self) -> CalendarDate:
        """Calendar date and time of day for this epoch."""
        jd = self.julian_date + 0.5
        z = math.floor(jd)
        f = jd - z

        if z < 2299161:
            a = z
        else:
            alpha = math.floor((z - 1867216.25) / 36524.25)
            a = z + 1 + alpha - math.floor(alpha / 4)

        b = a + 1524
        c = math.floor((b - 122.1) / 365.25)
        d = math.floor(365.25 * c)
        e = math.floor((b - d) / 30.6001)

        day = b - d - math.floor(30.6001 * e)
        month = e - 1 if e < 14 else e - 13
        year = c - 4716 if month > 2 else c - 4715

        total_hours = f * 24.0
        hour = int(total_hours)
        total_minutes = (total_hours - hour) * 60.0
        minute = int(total_minutes)
        second = (total_minutes - minute) * 60.0
        return CalendarDate(year, month, day, hour, minute, second)

    def to_datetime(self) -> datetime:
        """UTC datetime for this epoch."""
        return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(
            days=self.julian_date - JD_UNIX_EPOCH
        )

    def add_days(self, days: float) -> 'Epoch':
        """Return a new epoch offset by ``days`` (may be negative)."""
        return Epoch(self.julian_date + days)

    def days_since(self, other: 'Epoch') -> float:
        """Days elapsed since ``other`` (positive if this epoch is later)."""
        return self.julian_date - other.julian_date

    def seconds_since(self, other: 'Epoch') -> float:
        """Seconds elapsed since ``other``."""
        return self.days_since(other) * DAY

    def centuries_since(self, other: 'Epoch') -> float:
        """Julian centuries elapsed since ``other``."""
        return self.days_since(other) / DAYS_PER_CENTURY

    def __str__(self) -> str:
        cal = self.calendar
        return (f"{cal.year:04d}-{cal.month:02d}-{cal.day:02d} "
                f"{cal.hour:02d}:{cal.minute:02d}:{cal.second:05.2f} "
                f"(JD {self.julian_date:.5f})")


J2000 = Epoch(JD_J2000)
UNIX_EPOCH = Epoch(JD_UNIX_EPOCH)


def epoch_to_days(epoch: Epoch) -> float:
    """Days since J2000.0."""
    return epoch.days_since(J2000)


def days_between(a: Epoch, b: Epoch) -> float:
    """Days from ``b`` to ``a``."""
    return a.days_since(b)


def centuries_between(a: Epoch, b: Epoch) -> float:
    """Julian centuries from ``b`` to ``a``."""
    return a.centuries_since(b)
