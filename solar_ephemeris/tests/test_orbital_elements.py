import unittest

import pytest

from solar_ephemeris.epoch import J2000, Epoch
from solar_ephemeris.orbital_elements import (
    ElementRates,
    OrbitalElements,
    propagate_elements,
    wrap_to_180,
)

MARS_RATES = ElementRates(
    a_rate=0.00001847, e_rate=0.00007882, i_rate=-0.00813131,
    L_rate=19140.30268499, varpi_rate=0.44441088, Omega_rate=-0.29257343,
)


def make_mars(rates=MARS_RATES):
    return OrbitalElements(
        a=1.52371034, e=0.09339410, i=1.84969142,
        L=-4.55343205, varpi=-23.94362959, Omega=49.55953891,
        epoch=J2000, rates=rates,
    )


@pytest.mark.parametrize('angle, expected', [
    (0.0, 0.0),
    (180.0, 180.0),
    (-180.0, -180.0),
    (200.0, -160.0),
    (-200.0, 160.0),
    (725.0, 5.0),
    (-1085.0, -5.0),
])
def test_wrap_to_180(angle, expected):
    assert wrap_to_180(angle) == pytest.approx(expected)


class TestOrbitalElements(unittest.TestCase):

    def test_derived_angles(self):
        mars = make_mars()
        self.assertAlmostEqual(mars.omega, -23.94362959 - 49.55953891)
        self.assertAlmostEqual(mars.mean_anomaly, -4.55343205 + 23.94362959)
        self.assertAlmostEqual(mars.mean_anomaly_normalized, 19.39019754)

    def test_earth_mean_anomaly(self):
        earth = OrbitalElements(
            a=1.00000261, e=0.01671123, i=-0.00001531,
            L=100.46457166, varpi=102.93768193, Omega=0.0,
            epoch=J2000,
        )
        self.assertEqual(round(earth.mean_anomaly_normalized, 8), -2.47311027)

    def test_normalized_mean_anomaly_wraps(self):
        elements = make_mars()._replace(L=250.0, varpi=10.0)
        self.assertAlmostEqual(elements.mean_anomaly, 240.0)
        self.assertAlmostEqual(elements.mean_anomaly_normalized, -120.0)

    def test_apsides(self):
        mars = make_mars()
        self.assertAlmostEqual(mars.perihelion_distance, 1.52371034 * (1 - 0.09339410))
        self.assertAlmostEqual(mars.aphelion_distance, 1.52371034 * (1 + 0.09339410))

    def test_period(self):
        elements = make_mars()._replace(a=4.0)
        self.assertAlmostEqual(elements.period_years, 8.0)
        self.assertAlmostEqual(elements.period_days, 8.0 * 365.25)

    def test_classification(self):
        base = make_mars(rates=None)
        self.assertTrue(base.is_elliptical)
        self.assertFalse(base.is_circular)
        self.assertTrue(base._replace(e=0.0005).is_circular)

        parabolic = base._replace(e=1.0)
        self.assertTrue(parabolic.is_parabolic)
        self.assertFalse(parabolic.is_elliptical)

        hyperbolic = base._replace(e=1.5)
        self.assertTrue(hyperbolic.is_hyperbolic)
        self.assertFalse(hyperbolic.is_parabolic)

    def test_str(self):
        self.assertIn('a = 1.523710', str(make_mars()))


class TestPropagation(unittest.TestCase):

    def test_without_rates_only_restamps_epoch(self):
        base = make_mars(rates=None)
        target = Epoch.from_calendar(2030, 5, 17)
        moved = base.at(target)
        self.assertEqual(moved.epoch, target)
        self.assertEqual(moved._replace(epoch=J2000), base)

    def test_one_century(self):
        mars = make_mars()
        later = mars.at(J2000.add_days(36525.0))
        self.assertAlmostEqual(later.a, mars.a + MARS_RATES.a_rate)
        self.assertAlmostEqual(later.e, mars.e + MARS_RATES.e_rate)
        self.assertAlmostEqual(later.i, mars.i + MARS_RATES.i_rate)
        self.assertAlmostEqual(later.L, mars.L + MARS_RATES.L_rate, places=8)
        self.assertAlmostEqual(later.varpi, mars.varpi + MARS_RATES.varpi_rate)
        self.assertAlmostEqual(later.Omega, mars.Omega + MARS_RATES.Omega_rate)
        self.assertEqual(later.rates, MARS_RATES)

    def test_backwards_in_time(self):
        mars = make_mars()
        earlier = mars.at(J2000.add_days(-36525.0 / 2.0))
        self.assertAlmostEqual(earlier.L, mars.L - MARS_RATES.L_rate / 2.0, places=8)

    def test_linear_superposition(self):
        mars = make_mars()
        t1 = J2000.add_days(1234.5)
        t2 = J2000.add_days(-8765.25)
        chained = mars.at(t1).at(t2)
        direct = mars.at(t2)
        for name in ('a', 'e', 'i', 'L', 'varpi', 'Omega'):
            self.assertAlmostEqual(getattr(chained, name), getattr(direct, name), places=9)

    def test_propagate_elements_matches_at(self):
        mars = make_mars()
        epoch = Epoch.from_calendar(2040, 1, 1)
        self.assertEqual(propagate_elements(mars, epoch), mars.at(epoch))


if __name__ == '__main__':
    unittest.main()
