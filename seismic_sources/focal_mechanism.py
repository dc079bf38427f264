"""Focal mechanisms and rake classification."""

from enum import Enum, auto

from seismic_sources.errors import ConfigurationError


class RakeType(Enum):
    """Enumeration of rake types."""

    NORMAL = auto()
    REVERSE = auto()
    STRIKE_SLIP = auto()
    REVERSE_OBLIQUE = auto()
    NORMAL_OBLIQUE = auto()
    UNDEFINED = auto()


def rake_type(rake: float) -> RakeType:
    """Determine the rake type of a fault given its rake.

    Parameters
    ----------
    rake : float
        Rake of the fault (degrees).

    Returns
    -------
    RakeType
        Type of rake of the fault.
    """
    if -30 <= rake <= 30 or 150 <= rake <= 210 or -210 <= rake <= -150:
        return RakeType.STRIKE_SLIP
    elif 60 <= rake <= 120:
        return RakeType.REVERSE
    elif -120 <= rake <= -60:
        return RakeType.NORMAL
    elif -150 < rake < -120 or -60 < rake < -30:
        return RakeType.NORMAL_OBLIQUE
    elif 30 < rake < 60 or 120 < rake < 150:
        return RakeType.REVERSE_OBLIQUE

    return RakeType.UNDEFINED


class FocalMechanism(Enum):
    """Generic focal mechanisms used to model point sources.

    The value of each member is its (dip, rake) pair in degrees.
    """

    STRIKE_SLIP = (90.0, 0.0)
    REVERSE = (50.0, 90.0)
    NORMAL = (50.0, -90.0)

    @property
    def dip(self) -> float:  # numpydoc ignore=RT01
        """float: The dip of the mechanism (degrees)."""
        return self.value[0]

    @property
    def rake(self) -> float:  # numpydoc ignore=RT01
        """float: The rake of the mechanism (degrees)."""
        return self.value[1]

    @classmethod
    def from_rake(cls, rake: float) -> "FocalMechanism":
        """Find the focal mechanism matching a rake.

        Oblique rakes map to their dip-slip sense.

        Parameters
        ----------
        rake : float
            The rake (degrees).

        Returns
        -------
        FocalMechanism
            The mechanism for the rake.

        Raises
        ------
        ConfigurationError
            If the rake cannot be classified.
        """
        kind = rake_type(rake)
        if kind == RakeType.STRIKE_SLIP:
            return cls.STRIKE_SLIP
        elif kind in (RakeType.REVERSE, RakeType.REVERSE_OBLIQUE):
            return cls.REVERSE
        elif kind in (RakeType.NORMAL, RakeType.NORMAL_OBLIQUE):
            return cls.NORMAL
        raise ConfigurationError(f"Cannot classify rake {rake}.")
