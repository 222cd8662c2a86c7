"""
Error types for the Weekly Event Scheduler
"""


class SchedulerError(Exception):
    """Base class for scheduler failures"""


class ConfigurationError(SchedulerError):
    """A calendar or template definition cannot be resolved. Fatal for the run."""


class TransientApiError(SchedulerError):
    """A single calendar API call failed. Logged, never retried."""

    def __init__(self, message: str, status: int = None):
        super().__init__(message)
        self.status = status
