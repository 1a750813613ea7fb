import csv
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Annotated, Literal, Mapping, Optional, Union

import pydantic
from pydantic import ConfigDict, Field

from solar_ephemeris.config import get_data_path
from solar_ephemeris.epoch import J2000, Epoch
from solar_ephemeris.errors import BodyNotFound, CatalogError, MoonNotFound
from solar_ephemeris.orbital_elements import ElementRates, OrbitalElements

logger = logging.getLogger(__name__)

PLANETS_FILE = 'planets.csv'
MOONS_FILE = 'moons.csv'
METADATA_FILE = 'catalog.json'

SUN_KEY = 'sun'
SUN_NAIF_ID = 10


def is_sun(body_id: Union[str, int]) -> bool:
    """True if ``body_id`` names the Sun, by name or NAIF id."""
    return str(body_id).strip().lower() in (SUN_KEY, str(SUN_NAIF_ID))


class PhysicalParameters(pydantic.BaseModel):
    """
    Physical parameters of a body.

    Attributes:
        gm: Gravitational parameter GM (m^3/s^2)
        mass: Mass (kg)
        radius_km: Mean radius (km)
    """
    model_config = ConfigDict(frozen=True)

    gm: float = Field(gt=0.0)
    mass: float = Field(gt=0.0)
    radius_km: float = Field(gt=0.0)


class Metadata(pydantic.BaseModel):
    """Provenance of the bundled elements."""
    model_config = ConfigDict(frozen=True)

    source: str
    url: str
    valid_range: str
    reference_frame: str
    epoch: str


class _ElementsModel(pydantic.BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)  # Allow OrbitalElements (NamedTuple)

    name: str
    naif_id: int
    elements: OrbitalElements
    physical: PhysicalParameters

    @pydantic.field_validator('elements')
    @classmethod
    def _check_elliptical(cls, elements: OrbitalElements) -> OrbitalElements:
        if not elements.is_elliptical:
            raise ValueError(f"eccentricity must be in [0, 1), got {elements.e}")
        return elements

    @property
    def key(self) -> str:
        """Catalog key (lower-case name)."""
        return self.name.lower()


class HeliocentricBody(_ElementsModel):
    """
    A body orbiting the Sun directly: a planet or a dwarf planet.

    Attributes:
        name: Display name (e.g. "Mars")
        naif_id: NAIF integer code (e.g. 499)
        category: "planet" or "dwarf_planet"
        elements: J2000 elements with a in AU and per-century rates
        physical: Physical parameters
    """
    kind: Literal['heliocentric'] = 'heliocentric'
    category: Literal['planet', 'dwarf_planet']

    def __str__(self) -> str:
        return f"{self.name} (NAIF {self.naif_id})"


class Moon(_ElementsModel):
    """
    A natural satellite, described relative to its parent body.

    Attributes:
        name: Display name (e.g. "Titan")
        naif_id: NAIF integer code (e.g. 606)
        parent: Catalog key of the body it orbits
        elements: J2000 elements with a in km and no rates
        period_days: Orbital period (days), drives the mean anomaly
        retrograde: Orbits against the parent's rotation
        physical: Physical parameters
    """
    kind: Literal['moon'] = 'moon'
    parent: str
    period_days: float = Field(gt=0.0)
    retrograde: bool = False

    def __str__(self) -> str:
        return f"{self.name} (NAIF {self.naif_id}, moon of {self.parent.capitalize()})"


Body = Annotated[Union[HeliocentricBody, Moon], Field(discriminator='kind')]


class Catalog(pydantic.BaseModel):
    """
    Read-only table of every body the ephemeris knows about.

    Entries are keyed by lower-case name and can also be found by NAIF id.
    The Sun is not an entry; only its physical parameters are kept.
    ``entries`` is stored as a read-only mapping view.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    entries: Mapping[str, Body]
    sun: PhysicalParameters
    metadata: Metadata

    @pydantic.field_validator('entries')
    @classmethod
    def _read_only_entries(cls, entries: Mapping) -> Mapping:
        return MappingProxyType(dict(entries))

    def lookup(self, body_id: Union[str, int]) -> Union[HeliocentricBody, Moon]:
        """
        Find a body by name (case-insensitive) or NAIF id.

        Raises:
            BodyNotFound: if no entry matches
        """
        key = str(body_id).strip().lower()
        entry = self.entries.get(key)
        if entry is not None:
            return entry

        if key.lstrip('-').isdigit():
            naif_id = int(key)
            for entry in self.entries.values():
                if entry.naif_id == naif_id:
                    return entry

        raise BodyNotFound(body_id)

    def elements(self, body_id: Union[str, int]) -> OrbitalElements:
        """Base J2000 elements of a heliocentric body."""
        entry = self.lookup(body_id)
        if not isinstance(entry, HeliocentricBody):
            raise BodyNotFound(body_id)
        return entry.elements

    def elements_at(self, body_id: Union[str, int], epoch: Epoch) -> OrbitalElements:
        """Elements of a heliocentric body extrapolated to ``epoch``."""
        return self.elements(body_id).at(epoch)

    def gm(self, body_id: Union[str, int]) -> float:
        """Gravitational parameter (m^3/s^2) of any entry, the Sun included."""
        if is_sun(body_id):
            return self.sun.gm
        return self.lookup(body_id).physical.gm

    def moon(self, moon_id: Union[str, int]) -> Moon:
        """
        Raises:
            MoonNotFound: if ``moon_id`` is unknown or not a moon
        """
        try:
            entry = self.lookup(moon_id)
        except BodyNotFound as exc:
            raise MoonNotFound(moon_id) from exc
        if not isinstance(entry, Moon):
            raise MoonNotFound(moon_id)
        return entry

    def moons_of(self, parent_id: Union[str, int]) -> list[str]:
        parent = str(parent_id).strip().lower()
        if parent not in self.entries and parent.lstrip('-').isdigit():
            parent = self.lookup(parent_id).key
        return sorted(key for key, entry in self.entries.items()
                      if isinstance(entry, Moon) and entry.parent == parent)

    @property
    def heliocentric_bodies(self) -> list[str]:
        return sorted(key for key, entry in self.entries.items()
                      if isinstance(entry, HeliocentricBody))

    @property
    def planets(self) -> list[str]:
        return sorted(key for key, entry in self.entries.items()
                      if isinstance(entry, HeliocentricBody) and entry.category == 'planet')

    @property
    def moons(self) -> list[str]:
        return sorted(key for key, entry in self.entries.items() if isinstance(entry, Moon))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, body_id) -> bool:
        try:
            self.lookup(body_id)
        except BodyNotFound:
            return False
        return True


class _CatalogHeader(pydantic.BaseModel):
    metadata: Metadata
    sun: PhysicalParameters


def _physical(row: dict) -> PhysicalParameters:
    return PhysicalParameters(
        gm=float(row['GM (m3/s2)']),
        mass=float(row['Mass (kg)']),
        radius_km=float(row['Radius (km)']),
    )


def _read_rows(filepath: Path) -> list[dict]:
    if not filepath.exists():
        raise CatalogError(f"Catalog file not found: {filepath}")
    with open(filepath, 'r', encoding='utf-8') as f:
        return list(csv.DictReader(f))


def _parse_planet(row: dict) -> HeliocentricBody:
    rates = ElementRates(
        a_rate=float(row['a Rate (AU/cy)']),
        e_rate=float(row['e Rate (1/cy)']),
        i_rate=float(row['i Rate (deg/cy)']),
        L_rate=float(row['L Rate (deg/cy)']),
        varpi_rate=float(row['varpi Rate (deg/cy)']),
        Omega_rate=float(row['Omega Rate (deg/cy)']),
    )
    elements = OrbitalElements(
        a=float(row['Semi-Major Axis (AU)']),
        e=float(row['Eccentricity ()']),
        i=float(row['Inclination (deg)']),
        L=float(row['Mean Longitude (deg)']),
        varpi=float(row['Longitude of Perihelion (deg)']),
        Omega=float(row['Longitude of the Ascending Node (deg)']),
        epoch=J2000,
        rates=rates,
    )
    return HeliocentricBody(
        name=row['Name'],
        naif_id=int(row['NAIF ID']),
        category=row['Category'],
        elements=elements,
        physical=_physical(row),
    )


def _parse_moon(row: dict) -> Moon:
    elements = OrbitalElements(
        a=float(row['Semi-Major Axis (km)']),
        e=float(row['Eccentricity ()']),
        i=float(row['Inclination (deg)']),
        L=float(row['Mean Longitude (deg)']),
        varpi=float(row['Longitude of Periapsis (deg)']),
        Omega=float(row['Longitude of the Ascending Node (deg)']),
        epoch=J2000,
    )
    return Moon(
        name=row['Name'],
        naif_id=int(row['NAIF ID']),
        parent=row['Parent'].strip().lower(),
        elements=elements,
        period_days=float(row['Period (days)']),
        retrograde=row['Retrograde'].strip().lower() in ('true', '1', 'yes'),
        physical=_physical(row),
    )


def load_catalog(data_dir: Optional[Path] = None) -> Catalog:
    """
    Load the body catalog from CSV element tables and the JSON header.

    Args:
        data_dir: Directory holding planets.csv, moons.csv and catalog.json.
            Defaults to the configured data path (see ``config.get_data_path``).

    Returns:
        Catalog of all heliocentric bodies and moons

    Raises:
        CatalogError: if a file is missing or a row cannot be read
        pydantic.ValidationError: if a record fails validation
    """
    data_dir = Path(data_dir) if data_dir is not None else get_data_path()

    header_path = data_dir / METADATA_FILE
    if not header_path.exists():
        raise CatalogError(f"Catalog file not found: {header_path}")
    header = _CatalogHeader.model_validate_json(header_path.read_text(encoding='utf-8'))

    entries = {}
    for filename, parse in ((PLANETS_FILE, _parse_planet), (MOONS_FILE, _parse_moon)):
        filepath = data_dir / filename
        for line, row in enumerate(_read_rows(filepath), start=2):
            try:
                body = parse(row)
            except (KeyError, TypeError) as exc:
                raise CatalogError(f"{filepath.name}:{line}: missing column {exc}") from exc
            except pydantic.ValidationError:
                raise
            except ValueError as exc:
                raise CatalogError(f"{filepath.name}:{line}: {exc}") from exc
            entries[body.key] = body

    catalog = Catalog(entries=entries, sun=header.sun, metadata=header.metadata)
    logger.info("Loaded %d heliocentric bodies and %d moons from %s",
                len(catalog.heliocentric_bodies), len(catalog.moons), data_dir)
    return catalog
