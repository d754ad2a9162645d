"""
Error types raised by the provisioning steps.

Every error carries the name of the step that failed so the command line
entry point can report it without inspecting the exception type.
"""

from typing import Optional


class ProvisionError(Exception):
    """Base class for all provisioning failures."""

    step = "provision"

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if step is not None:
            self.step = step


class AuthError(ProvisionError):
    """No ambient authentication mechanism produced a usable credential."""

    step = "acquire credential"


class ProviderError(ProvisionError):
    """A create/update request was rejected (bad parameters, conflict, quota, permission)."""

    step = "provider request"

    def __init__(
        self,
        message: str,
        step: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message, step=step)
        self.status_code = status_code
        self.error_code = error_code


class OperationError(ProvisionError):
    """A started long-running operation ended in a failed state."""

    step = "long-running operation"
