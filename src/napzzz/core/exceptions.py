"""
napzzz exception hierarchy.

All napzzz exceptions inherit from NapzzzError, making it easy for consumers
to catch library-level errors while still distinguishing specific failure modes.

Invalid recorder transitions (stopping while idle, starting twice) are not
errors and never raise.
"""


class NapzzzError(Exception):
    """Base exception class for all napzzz errors."""


class ConfigurationError(NapzzzError):
    """Raised for configuration errors (missing keys, invalid values)."""


class SchedulingError(NapzzzError):
    """Raised when a sampler scheduler backend cannot start or accept jobs."""
