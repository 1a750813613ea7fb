"""
Exceptions raised by catalog lookups and the ephemeris engine.
"""


class EphemerisError(LookupError):
    """Base class for all ephemeris lookup failures."""

    def __init__(self, message: str, body_id=None):
        super().__init__(message)
        self.body_id = body_id


class BodyNotFound(EphemerisError):
    """The body has no heliocentric entry (or no entry at all) in the catalog."""

    def __init__(self, body_id):
        super().__init__(f"Body '{body_id}' not found in ephemeris data", body_id)


class MoonNotFound(EphemerisError):
    """The identifier does not name a moon in the catalog."""

    def __init__(self, body_id):
        super().__init__(f"Moon '{body_id}' not found in ephemeris data", body_id)


class ParentNotFound(EphemerisError):
    """The parent body of a moon is missing from the catalog."""

    def __init__(self, body_id, parent_id=None):
        super().__init__(
            f"Parent body '{parent_id}' for '{body_id}' not found in ephemeris data",
            body_id,
        )
        self.parent_id = parent_id


class CatalogError(EphemerisError):
    """Bundled data files are missing or malformed."""
