"""The contract shared by every seismic source.

A source has an identity, a type, magnitude-frequency content and a
finite collection of ruptures. Consumers ask a source for its size,
iterate its ruptures and query each rupture surface for distances to
a site.
"""

from collections.abc import Iterator
from enum import StrEnum, auto
from typing import Protocol, runtime_checkable

import numpy as np

from seismic_sources.mfd import MagnitudeFrequencyDistribution
from seismic_sources.rupture import Rupture


class SourceType(StrEnum):
    """Enumeration of source types."""

    FAULT = auto()
    INTERFACE = auto()
    CLUSTER = auto()
    GRID = auto()
    AREA = auto()
    SLAB = auto()


@runtime_checkable
class Source(Protocol):
    """A seismic source.

    Attributes
    ----------
    name : str
        The display name of the source.
    id : int
        The identifier of the source, -1 if it has none.
    type : SourceType
        The type of the source.
    """

    name: str
    id: int
    type: SourceType

    def size(self) -> int:  # numpydoc ignore=RT01
        """Return the number of ruptures of the source."""
        ...

    def __len__(self) -> int: ...  # numpydoc ignore=GL08

    def location(self, site: np.ndarray) -> np.ndarray:  # numpydoc ignore=PR01,RT01
        """Return the location of the source nearest `site`."""
        ...

    def mfds(self) -> list[MagnitudeFrequencyDistribution]:  # numpydoc ignore=RT01
        """Return the magnitude-frequency distributions of the source."""
        ...

    def __iter__(self) -> Iterator[Rupture]: ...  # numpydoc ignore=GL08
