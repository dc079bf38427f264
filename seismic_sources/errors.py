"""Exceptions raised while building and querying seismic sources."""


class ConfigurationError(ValueError):
    """Exception raised for invalid or incomplete source configuration.

    Raised by builders when a required field is missing, set twice or
    out of range, when a builder is reused, and when a source ends up
    with no ruptures.
    """

    pass


class UnsupportedCapabilityError(NotImplementedError):
    """Exception raised when a capability is not defined for an object.

    Examples are asking a point surface for its strike, or asking a
    cluster source for a flat stream of ruptures.
    """

    pass
