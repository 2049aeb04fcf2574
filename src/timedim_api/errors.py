"""Exceptions raised while resolving the time dimension of a layer."""


class TimeDimensionError(Exception):
    """Base class for all time dimension lookup failures."""


class CatalogError(TimeDimensionError):
    """The catalog document is missing or invalid."""


class NotFoundError(TimeDimensionError):
    """A layer, resource or feature type is absent from the catalog."""


class InvalidLayerNameError(TimeDimensionError):
    """A layer name is not of the form ``namespace:localName``."""


class UnsupportedStoreError(TimeDimensionError):
    """The backing store is neither a relational nor a file store."""


class DirectoryNotFoundError(TimeDimensionError):
    """The coverage directory does not exist."""


class AmbiguousOrMissingIndexError(TimeDimensionError):
    """A coverage directory holds zero or several index shapefiles."""


class TimeAttributeNotFoundError(TimeDimensionError):
    """No coverage properties file declares a ``TimeAttribute``."""


class StoreAccessError(TimeDimensionError):
    """Reading from the backing store failed."""
