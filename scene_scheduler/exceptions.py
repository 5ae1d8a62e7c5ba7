"""Exception hierarchy for the scene scheduler.

Usage:
    from scene_scheduler.exceptions import ConfigurationError

    raise ConfigurationError("day_budget_hours must be positive")
"""


class SchedulerError(Exception):
    """Base exception for all scene scheduler errors."""
    pass


class ConfigurationError(SchedulerError, ValueError):
    """Raised when configuration is invalid or missing.

    Examples:
        - Non-positive day budget
        - Unknown packing strategy or inclusion policy
        - Missing OpenAI API key
    """
    pass


class DocumentError(SchedulerError, ValueError):
    """Raised when an uploaded script cannot be read as a PDF."""
    pass


class ExtractionError(SchedulerError):
    """Raised when the scene extractor service cannot process a fragment.

    Examples:
        - Network or authentication failure
        - File upload rejected
    """
    pass
