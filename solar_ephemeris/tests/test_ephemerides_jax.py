import unittest

import jax.numpy as jnp
import numpy as np

from solar_ephemeris.astrodynamics import elements_to_state, moon_relative_state
from solar_ephemeris.constants import AU, GM_EARTH, GM_SUN
from solar_ephemeris.ephemerides_jax import (
    heliocentric_states,
    keplerian_states,
    moon_relative_states,
    wrap_to_180,
)
from solar_ephemeris.epoch import J2000
from solar_ephemeris.orbital_elements import ElementRates, OrbitalElements


class TestEphemeridesJax(unittest.TestCase):

    def setUp(self):
        self.venus = OrbitalElements(
            a=0.72333566, e=0.00677672, i=3.39467605,
            L=181.97909950, varpi=131.60246718, Omega=76.67984255,
            epoch=J2000,
            rates=ElementRates(0.00000390, -0.00004107, -0.00078890,
                               58517.81538729, 0.00268329, -0.27769418),
        )
        self.moon = OrbitalElements(
            a=384400.0, e=0.0549, i=5.145,
            L=218.316, varpi=83.353, Omega=125.045,
            epoch=J2000,
        )

    def test_wrap_to_180(self):
        wrapped = np.asarray(wrap_to_180(jnp.array([0.0, 190.0, -190.0, 540.0, 179.5])))
        np.testing.assert_allclose(wrapped, [0.0, -170.0, 170.0, -180.0, 179.5])

    def test_output_shapes(self):
        r, v = heliocentric_states(self.venus, jnp.linspace(0.0, 1000.0, 11))
        self.assertEqual(r.shape, (11, 3))
        self.assertEqual(v.shape, (11, 3))

    def test_scalar_days(self):
        r, v = heliocentric_states(self.venus, 0.0)
        self.assertEqual(r.shape, (1, 3))

    def test_heliocentric_matches_scalar(self):
        days = np.array([-20000.0, -365.25, 0.0, 42.0, 9000.0])
        r, v = heliocentric_states(self.venus, days)
        for k, d in enumerate(days):
            state = elements_to_state(self.venus.at(J2000.add_days(d)), mu=GM_SUN)
            np.testing.assert_allclose(np.asarray(r[k]), state.r, rtol=1e-9, atol=1.0)
            np.testing.assert_allclose(np.asarray(v[k]), state.v, rtol=1e-9, atol=1e-6)

    def test_moon_matches_scalar(self):
        days = np.array([-1000.0, 0.0, 3.3, 27.321661, 5000.0])
        r, v = moon_relative_states(self.moon, 27.321661, False, GM_EARTH, days)
        for k, d in enumerate(days):
            state = moon_relative_state(self.moon, 27.321661, False, GM_EARTH, J2000.add_days(d))
            np.testing.assert_allclose(np.asarray(r[k]), state.r, rtol=1e-9, atol=1e-3)
            np.testing.assert_allclose(np.asarray(v[k]), state.v, rtol=1e-9, atol=1e-9)

    def test_retrograde(self):
        days = np.array([0.0, 1.0])
        r_pro, v_pro = moon_relative_states(self.moon, 27.321661, False, GM_EARTH, days)
        r_ret, v_ret = moon_relative_states(self.moon, 27.321661, True, GM_EARTH, days)
        np.testing.assert_allclose(np.asarray(r_ret), np.asarray(r_pro))
        np.testing.assert_allclose(np.asarray(v_ret), -np.asarray(v_pro))

    def test_circular_orbit(self):
        M = jnp.linspace(-180.0, 180.0, 9)
        r, v = keplerian_states(1.0, 0.0, 0.0, 0.0, 0.0, M, GM_SUN, AU)
        np.testing.assert_allclose(np.linalg.norm(np.asarray(r), axis=1), AU, rtol=1e-14)
        np.testing.assert_allclose(np.linalg.norm(np.asarray(v), axis=1), np.sqrt(GM_SUN / AU),
                                   rtol=1e-14)
        np.testing.assert_allclose(np.asarray(r)[:, 2], 0.0, atol=1e-3)


if __name__ == '__main__':
    unittest.main()
