"""
Error taxonomy shared by the services and the HTTP layer.
"""
from typing import Dict, List, Optional


class JobTrackerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    message = "Server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class JobValidationError(JobTrackerError):
    """One or more field rules were violated. Carries every violation, not just the first."""

    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors


class JobNotFoundError(JobTrackerError):
    """The record is absent or owned by someone else; both look the same to the caller."""

    status_code = 404
    message = "Job not found"
