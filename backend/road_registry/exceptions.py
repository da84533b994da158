"""
Road Registry - Exceptions

Business rejections are returned as tagged OperationResults; only
persistence faults travel as exceptions.
"""


class RoadRegistryError(Exception):
    """Base class for registry errors."""


class StorageError(RoadRegistryError):
    """The underlying record store could not complete a read or write."""
