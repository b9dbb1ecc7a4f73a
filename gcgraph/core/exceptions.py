"""Custom exceptions for the dashboard."""


class ConfigurationError(Exception):
    """Raised when settings describe an unusable dashboard."""

    pass


class MetricSourceError(Exception):
    """Raised when a metric source fails to produce numeric values."""

    pass


class InvalidScaleError(Exception):
    """Raised when a requested window scale is missing, zero or not an integer."""

    pass
