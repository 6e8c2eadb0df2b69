"""
Errors raised by the enrollment workflow.

Lookups and removals of unknown ids are not errors: they return None.
"""


class EnrollmentError(Exception):
    """Base class for workflow errors."""


class ValidationError(EnrollmentError, ValueError):
    """Input rejected before any mutation (missing evidence, blank note, unknown field path)."""


class StateError(EnrollmentError):
    """Transition not allowed from the entity's current status."""

    def __init__(self, message: str, current_status=None):
        super().__init__(message)
        self.current_status = current_status
