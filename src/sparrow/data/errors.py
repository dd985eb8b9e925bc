"""Data layer error hierarchy.

Query failures are deliberately absent: driver exceptions reach the
caller unchanged.
"""

from sparrow.errors import SparrowError


class DataError(SparrowError):
    """Base for all sparrow.data errors."""


class DriverNotInstalledError(DataError):
    """Raised when the configured driver's package is not installed."""
