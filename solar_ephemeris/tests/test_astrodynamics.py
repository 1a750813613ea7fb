"""
Tests for the Kepler solver, orbital-plane vectors and element-to-state conversion.
"""
import unittest

import numpy as np
import pytest

from solar_ephemeris.astrodynamics import (
    elements_to_state,
    moon_mean_anomaly,
    moon_relative_state,
    orbital_plane_position,
    orbital_plane_velocity,
    perifocal_matrix,
    rotate_to_reference,
    solve_kepler,
    solve_kepler_vec,
    true_anomaly,
)
from solar_ephemeris.constants import AU, GM_EARTH, GM_SUN, KM
from solar_ephemeris.epoch import J2000
from solar_ephemeris.orbital_elements import OrbitalElements


@pytest.mark.parametrize('e', [0.0, 0.1, 0.5, 0.9, 0.99])
@pytest.mark.parametrize('M', np.linspace(-180.0, 180.0, 13))
def test_kepler_residual(M, e):
    """E - e* sin(E) reproduces M to within 1e-5 degrees."""
    E = solve_kepler(M, e)
    M_back = E - np.rad2deg(e) * np.sin(np.deg2rad(E))
    assert abs(M_back - M) < 1e-5


class TestSolveKepler(unittest.TestCase):

    def test_circular_returns_mean_anomaly(self):
        for M in (-170.0, -3.2, 0.0, 45.0, 179.9):
            self.assertEqual(solve_kepler(M, 0.0), M)

    def test_fixed_points(self):
        self.assertAlmostEqual(solve_kepler(0.0, 0.5), 0.0, places=12)
        self.assertAlmostEqual(solve_kepler(180.0, 0.5), 180.0, places=10)
        self.assertAlmostEqual(solve_kepler(-180.0, 0.5), -180.0, places=10)

    def test_eccentric_anomaly_leads_mean_anomaly(self):
        # For 0 < M < 180 the eccentric anomaly is ahead of the mean anomaly
        E = solve_kepler(60.0, 0.3)
        self.assertGreater(E, 60.0)
        self.assertLess(E, 180.0)

    def test_iteration_cap_returns_last_estimate(self):
        E = solve_kepler(30.0, 0.5, max_iter=1)
        self.assertTrue(np.isfinite(E))

    def test_vectorized_matches_scalar(self):
        M = np.linspace(-180.0, 180.0, 37)
        for e in (0.0, 0.0167, 0.3, 0.9):
            E_vec = np.asarray(solve_kepler_vec(M, e))
            E_ref = np.array([solve_kepler(m, e) for m in M])
            np.testing.assert_allclose(E_vec, E_ref, atol=1e-9)

    def test_vectorized_empty(self):
        E = np.asarray(solve_kepler_vec(np.array([]), 0.3))
        self.assertEqual(E.shape, (0,))

    def test_vectorized_per_element_eccentricity(self):
        M = np.array([10.0, 10.0, 10.0])
        e = np.array([0.0, 0.2, 0.6])
        E = np.asarray(solve_kepler_vec(M, e))
        self.assertEqual(E[0], 10.0)
        self.assertAlmostEqual(E[1], solve_kepler(10.0, 0.2), places=9)
        self.assertAlmostEqual(E[2], solve_kepler(10.0, 0.6), places=9)


class TestTrueAnomaly(unittest.TestCase):

    def test_circular(self):
        self.assertEqual(true_anomaly(123.4, 0.0), 123.4)

    def test_known_value(self):
        # tan(nu/2) = sqrt(3) * tan(45 deg) -> nu = 120 deg
        self.assertAlmostEqual(true_anomaly(90.0, 0.5), 120.0, places=10)

    def test_stays_in_half_plane_of_E(self):
        nu = true_anomaly(200.0, 0.3)
        self.assertGreater(nu, 180.0)
        self.assertLess(nu, 360.0)

        nu = true_anomaly(-120.0, 0.3)
        self.assertLess(nu, -90.0)
        self.assertGreater(nu, -180.0)

    def test_apsides(self):
        self.assertAlmostEqual(true_anomaly(0.0, 0.4), 0.0, places=12)
        self.assertAlmostEqual(true_anomaly(180.0, 0.4) % 360.0, 180.0, places=8)


class TestOrbitalPlane(unittest.TestCase):

    def test_position_at_apsides(self):
        a, e = 2.0, 0.25
        x, y = orbital_plane_position(a, e, 0.0)
        self.assertAlmostEqual(x, a * (1.0 - e))
        self.assertAlmostEqual(y, 0.0)

        x, y = orbital_plane_position(a, e, 180.0)
        self.assertAlmostEqual(x, -a * (1.0 + e))
        self.assertAlmostEqual(y, 0.0, places=12)

    def test_circular_velocity(self):
        vx, vy = orbital_plane_velocity(1.0, 0.0, 0.0, GM_SUN)
        self.assertAlmostEqual(vx, 0.0)
        self.assertAlmostEqual(vy, np.sqrt(GM_SUN / AU), places=6)

    def test_vis_viva(self):
        a, e, E = 1.5, 0.3, 71.0
        x, y = orbital_plane_position(a, e, E)
        vx, vy = orbital_plane_velocity(a, e, E, GM_SUN)
        r = np.hypot(x, y) * AU
        v2 = vx**2 + vy**2
        self.assertAlmostEqual(v2 / (GM_SUN * (2.0 / r - 1.0 / (a * AU))), 1.0, places=10)

    def test_length_scale_for_km(self):
        vx, vy = orbital_plane_velocity(384400.0, 0.0, 0.0, GM_EARTH, length_scale=KM)
        self.assertAlmostEqual(vy, np.sqrt(GM_EARTH / 384400.0e3), places=8)


class TestPerifocalMatrix(unittest.TestCase):

    def test_zero_angles(self):
        np.testing.assert_allclose(perifocal_matrix(0.0, 0.0, 0.0),
                                   [[1.0, 0.0], [0.0, 1.0], [0.0, 0.0]], atol=1e-15)

    def test_columns_orthonormal(self):
        m = perifocal_matrix(37.0, 122.0, 63.0)
        self.assertEqual(m.shape, (3, 2))
        np.testing.assert_allclose(m.T @ m, np.eye(2), atol=1e-14)

    def test_inclination_tilts_y_axis(self):
        m = perifocal_matrix(0.0, 0.0, 90.0)
        # With i = 90 deg the orbit's y' axis points along ecliptic z
        np.testing.assert_allclose(m[:, 1], [0.0, 0.0, 1.0], atol=1e-15)

    def test_rotate_to_reference_scales(self):
        m = perifocal_matrix(0.0, 0.0, 0.0)
        np.testing.assert_allclose(rotate_to_reference(m, (1.0, 2.0), scale=KM),
                                   [1000.0, 2000.0, 0.0])


class TestElementsToState(unittest.TestCase):

    def setUp(self):
        self.earth = OrbitalElements(
            a=1.00000261, e=0.01671123, i=-0.00001531,
            L=100.46457166, varpi=102.93768193, Omega=0.0,
            epoch=J2000,
        )

    def test_earth_at_j2000(self):
        state = elements_to_state(self.earth)
        self.assertGreater(state.distance_au, 0.98)
        self.assertLess(state.distance_au, 1.02)
        self.assertGreater(state.speed_km_s, 29.0)
        self.assertLess(state.speed_km_s, 31.0)
        self.assertEqual(state.epoch, J2000)

    def test_prograde_angular_momentum(self):
        state = elements_to_state(self.earth)
        self.assertGreater(state.specific_angular_momentum[2], 0.0)

    def test_energy_matches_semi_major_axis(self):
        state = elements_to_state(self.earth)
        energy = state.speed**2 / 2.0 - GM_SUN / state.distance
        a = -GM_SUN / (2.0 * energy)
        self.assertAlmostEqual(a / AU, self.earth.a, places=9)


class TestMoonRelativeState(unittest.TestCase):

    def setUp(self):
        self.moon = OrbitalElements(
            a=384400.0, e=0.0549, i=5.145,
            L=218.316, varpi=83.353, Omega=125.045,
            epoch=J2000,
        )
        self.period = 27.321661

    def test_mean_anomaly_repeats_after_one_period(self):
        M0 = moon_mean_anomaly(self.moon, self.period, J2000)
        M1 = moon_mean_anomaly(self.moon, self.period, J2000.add_days(self.period))
        self.assertAlmostEqual(M0, M1, places=6)
        self.assertAlmostEqual(M0, self.moon.mean_anomaly_normalized, places=12)

    def test_mean_anomaly_quarter_period(self):
        M0 = moon_mean_anomaly(self.moon, self.period, J2000)
        M1 = moon_mean_anomaly(self.moon, self.period, J2000.add_days(self.period / 4.0))
        self.assertAlmostEqual((M1 - M0) % 360.0, 90.0, places=6)

    def test_distance_range(self):
        state = moon_relative_state(self.moon, self.period, False, GM_EARTH, J2000)
        self.assertGreater(state.distance_km, 350_000.0)
        self.assertLess(state.distance_km, 410_000.0)
        self.assertGreater(state.speed_km_s, 0.9)
        self.assertLess(state.speed_km_s, 1.1)

    def test_retrograde_negates_velocity(self):
        epoch = J2000.add_days(3.0)
        pro = moon_relative_state(self.moon, self.period, False, GM_EARTH, epoch)
        retro = moon_relative_state(self.moon, self.period, True, GM_EARTH, epoch)
        np.testing.assert_allclose(retro.r, pro.r)
        np.testing.assert_allclose(retro.v, -pro.v)


if __name__ == '__main__':
    unittest.main()
