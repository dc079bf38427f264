"""The rupture value produced by enumerating a source."""

import dataclasses

from seismic_sources.surfaces import RuptureSurface


@dataclasses.dataclass(frozen=True)
class Rupture:
    """A possible earthquake rupture of a source.

    Attributes
    ----------
    magnitude : float
        The moment magnitude of the rupture.
    rate : float
        The annual rate of the rupture.
    rake : float
        The rake of the rupture (degrees).
    surface : RuptureSurface
        The geometry of the rupture.
    """

    magnitude: float
    rate: float
    rake: float
    surface: RuptureSurface
