"""
The ephemeris engine: positions and velocities of solar-system bodies.

Planets and dwarf planets are propagated from JPL's approximate Keplerian
elements about the Sun. Moons are propagated about their parent and added to
the parent's heliocentric state, so a moon's heliocentric position is always
parent + moon-relative.

Examples:
    >>> eph = Ephemeris()
    >>> earth = eph.state_of('earth', J2000)
    >>> round(earth.distance_au, 2)
    0.98
    >>> moon = eph.state_of_relative('moon', J2000, 'earth')
    >>> 350_000 < moon.distance_km < 410_000
    True
"""
import logging
from typing import NamedTuple, Optional, Sequence, Union

import numpy as np

from solar_ephemeris.astrodynamics import elements_to_state, moon_relative_state
from solar_ephemeris.bodies import Catalog, HeliocentricBody, Moon, is_sun, load_catalog
from solar_ephemeris.constants import AU
from solar_ephemeris.ephemerides_jax import heliocentric_states, moon_relative_states
from solar_ephemeris.epoch import J2000, Epoch
from solar_ephemeris.errors import BodyNotFound, ParentNotFound
from solar_ephemeris.frames import ReferenceFrame, frame_rotation, transform
from solar_ephemeris.orbital_elements import OrbitalElements
from solar_ephemeris.state_vector import StateVector

logger = logging.getLogger(__name__)

BodyId = Union[str, int]


class Trajectory(NamedTuple):
    """
    States of one body at many epochs.

    Attributes:
        epochs: The requested epochs, in order
        r: Positions, shape (n, 3) (m)
        v: Velocities, shape (n, 3) (m/s)
        frame: Reference frame of r and v
    """
    epochs: tuple[Epoch, ...]
    r: np.ndarray
    v: np.ndarray
    frame: ReferenceFrame

    def state(self, index: int) -> StateVector:
        """The ``index``-th sample as a StateVector."""
        return StateVector(r=self.r[index], v=self.v[index],
                           epoch=self.epochs[index], frame=self.frame)


class Ephemeris:
    """
    Computes body states from the bundled catalog.

    The catalog is loaded once at construction (unless one is injected) and
    never changes afterwards; an Ephemeris can be shared freely between
    threads.

    Args:
        catalog: Catalog to use; loaded from the configured data path if None
        output_frame: Frame in which all returned states are expressed
    """

    def __init__(self, catalog: Optional[Catalog] = None,
                 output_frame: ReferenceFrame = ReferenceFrame.ECLIPTIC_J2000):
        self.catalog = catalog if catalog is not None else load_catalog()
        self.output_frame = ReferenceFrame(output_frame)

    def __repr__(self) -> str:
        return f"Ephemeris(bodies={len(self.catalog)}, output_frame={self.output_frame.value})"

    # Single-epoch states

    def state_of(self, body_id: BodyId, epoch: Epoch) -> StateVector:
        """
        Heliocentric state of a body in the output frame.

        Args:
            body_id: Name (case-insensitive) or NAIF id
            epoch: Epoch of the state

        Returns:
            StateVector relative to the Sun

        Raises:
            BodyNotFound: unknown body, or the Sun itself
            ParentNotFound: a moon whose parent is missing from the catalog
        """
        entry = self.catalog.lookup(body_id)
        logger.debug("Computing state of %s at JD %.5f", entry.name, epoch.julian_date)
        return transform(self._heliocentric(entry, epoch), self.output_frame)

    def moon_state(self, moon_id: BodyId, epoch: Epoch) -> StateVector:
        """
        State of a moon relative to its parent body, in the output frame.

        Raises:
            MoonNotFound: ``moon_id`` is not a moon
            ParentNotFound: the parent's GM is not in the catalog
        """
        moon = self.catalog.moon(moon_id)
        return transform(self._moon_relative(moon, epoch), self.output_frame)

    def state_of_relative(self, body_id: BodyId, epoch: Epoch,
                          reference_id: BodyId) -> StateVector:
        """
        State of ``body_id`` as seen from ``reference_id``.

        A moon seen from its own parent uses the parent-relative solution
        directly; every other pair is the difference of the two heliocentric
        states. The Sun as reference (``"sun"`` or NAIF id 10) gives the
        heliocentric state.
        """
        if is_sun(reference_id):
            return self.state_of(body_id, epoch)

        entry = self.catalog.lookup(body_id)
        reference = self.catalog.lookup(reference_id)
        if isinstance(entry, Moon) and entry.parent == reference.key:
            return self.moon_state(entry.key, epoch)

        target = self.state_of(entry.key, epoch)
        origin = self.state_of(reference.key, epoch)
        return target._replace(r=target.r - origin.r, v=target.v - origin.v)

    def position_of(self, body_id: BodyId, epoch: Epoch) -> np.ndarray:
        """Heliocentric position (m) in the output frame."""
        return self.state_of(body_id, epoch).r

    def distance_of(self, body_id: BodyId, epoch: Epoch) -> float:
        """Distance from the Sun in AU."""
        return self.state_of(body_id, epoch).distance_au

    def states_of(self, body_ids: Sequence[BodyId], epoch: Epoch) -> dict:
        """Heliocentric states for several bodies, keyed by the given ids."""
        return {body_id: self.state_of(body_id, epoch) for body_id in body_ids}

    def all_planet_states(self, epoch: Epoch) -> dict:
        """Heliocentric states of the eight planets."""
        return self.states_of(self.catalog.planets, epoch)

    def relative_position(self, target_id: BodyId, observer_id: BodyId,
                          epoch: Epoch) -> np.ndarray:
        """Vector from the observer to the target (m)."""
        return self.state_of_relative(target_id, epoch, observer_id).r

    def distance_between(self, body_a: BodyId, body_b: BodyId, epoch: Epoch) -> float:
        """Distance between two bodies (m)."""
        return float(np.linalg.norm(self.relative_position(body_a, body_b, epoch)))

    def distance_between_au(self, body_a: BodyId, body_b: BodyId, epoch: Epoch) -> float:
        return self.distance_between(body_a, body_b, epoch) / AU

    def orbital_elements(self, body_id: BodyId, epoch: Epoch = J2000) -> OrbitalElements:
        """Heliocentric elements of a planet or dwarf planet at ``epoch``."""
        return self.catalog.elements_at(body_id, epoch)

    # Catalog queries

    @property
    def available_bodies(self) -> list[str]:
        return self.catalog.heliocentric_bodies

    @property
    def available_moons(self) -> list[str]:
        return self.catalog.moons

    @property
    def all_bodies(self) -> list[str]:
        return self.available_bodies + self.available_moons

    def moons_of(self, parent_id: BodyId) -> list[str]:
        return self.catalog.moons_of(parent_id)

    @property
    def data_source(self) -> str:
        return self.catalog.metadata.source

    @property
    def valid_range(self) -> str:
        return self.catalog.metadata.valid_range

    # Batch evaluation

    def trajectory(self, body_id: BodyId, epochs: Sequence[Epoch]) -> Trajectory:
        """
        Heliocentric states of one body at many epochs, in one JAX batch.

        Matches ``state_of`` at each epoch to floating-point accuracy.

        Args:
            body_id: Name or NAIF id
            epochs: Epochs to evaluate

        Returns:
            Trajectory with (n, 3) position and velocity arrays
        """
        entry = self.catalog.lookup(body_id)
        epochs = tuple(epochs)
        logger.debug("Computing %d-point trajectory of %s", len(epochs), entry.name)
        if not epochs:
            return Trajectory(epochs=(), r=np.empty((0, 3)), v=np.empty((0, 3)),
                              frame=self.output_frame)

        jd = np.array([epoch.julian_date for epoch in epochs], dtype=float)
        r, v = self._heliocentric_batch(entry, jd)

        rotation = frame_rotation(ReferenceFrame.ECLIPTIC_J2000, self.output_frame)
        r = np.asarray(r) @ rotation.T
        v = np.asarray(v) @ rotation.T
        return Trajectory(epochs=epochs, r=r, v=v, frame=self.output_frame)

    # Internals: everything below works in ecliptic J2000

    def _parent(self, moon: Moon) -> Union[HeliocentricBody, Moon]:
        try:
            return self.catalog.lookup(moon.parent)
        except BodyNotFound as exc:
            raise ParentNotFound(moon.name, moon.parent) from exc

    def _heliocentric(self, entry, epoch: Epoch) -> StateVector:
        if isinstance(entry, HeliocentricBody):
            return elements_to_state(entry.elements.at(epoch), mu=self.catalog.sun.gm)

        parent = self._parent(entry)
        parent_state = self._heliocentric(parent, epoch)
        relative = moon_relative_state(entry.elements, entry.period_days, entry.retrograde,
                                       parent.physical.gm, epoch)
        return StateVector(r=parent_state.r + relative.r, v=parent_state.v + relative.v,
                           epoch=epoch, frame=ReferenceFrame.ECLIPTIC_J2000)

    def _moon_relative(self, moon: Moon, epoch: Epoch) -> StateVector:
        mu_parent = self._parent(moon).physical.gm
        return moon_relative_state(moon.elements, moon.period_days, moon.retrograde,
                                   mu_parent, epoch)

    def _heliocentric_batch(self, entry, jd: np.ndarray):
        if isinstance(entry, HeliocentricBody):
            days = jd - entry.elements.epoch.julian_date
            return heliocentric_states(entry.elements, days, mu=self.catalog.sun.gm)

        parent = self._parent(entry)
        parent_r, parent_v = self._heliocentric_batch(parent, jd)
        days = jd - entry.elements.epoch.julian_date
        r, v = moon_relative_states(entry.elements, entry.period_days, entry.retrograde,
                                    parent.physical.gm, days)
        return parent_r + r, parent_v + v
