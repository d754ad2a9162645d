"""
Waiting on long-running provider operations.

``begin_*`` calls in the Azure SDK return an ``LROPoller`` straight away; the
remote work finishes later. ``OperationHandle`` owns that poller and
``poll_until_done`` turns it into either a finished resource or an
``OperationError``.
"""

from enum import Enum
from typing import Callable, Optional

from azure.core.exceptions import AzureError

from .exceptions import OperationError
from .models import FinishedResource
from .utils import get_logger

logger = get_logger(__name__)

_FAILED_STATUSES = {"failed", "canceled", "cancelled"}


class OperationState(Enum):
    PENDING = "Pending"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"

    @classmethod
    def from_status(cls, status: Optional[str]) -> "OperationState":
        """Map an SDK status string onto the three states we care about."""
        if status is None:
            return cls.PENDING
        status = str(status).lower()
        if status == "succeeded":
            return cls.SUCCEEDED
        if status in _FAILED_STATUSES:
            return cls.FAILED
        return cls.PENDING


class OperationHandle:
    """An in-flight create request, owned by the poller until it resolves."""

    def __init__(
        self,
        poller,
        description: str,
        converter: Callable = FinishedResource.from_sdk,
    ):
        self._poller = poller
        self.description = description
        self._converter = converter
        self.state = OperationState.PENDING
        self.resolved = False

    def done(self) -> bool:
        return self._poller.done()

    def refresh(self) -> OperationState:
        self.state = OperationState.from_status(self._poller.status())
        return self.state

    def __repr__(self):
        return f"OperationHandle({self.description!r}, state={self.state.value})"


def _fail(handle: OperationHandle, message: str, cause=None):
    handle.state = OperationState.FAILED
    handle.resolved = True
    logger.error("%s failed: %s", handle.description, message)
    raise OperationError(f"{handle.description} failed: {message}") from cause


def poll_until_done(handle: OperationHandle, wait_interval: Optional[float] = None):
    """
    Block until the operation behind ``handle`` reaches a terminal state.

    The provider decides the polling cadence (``Retry-After``); ``wait_interval``
    only controls how often a progress line is logged. There is no timeout.
    An interrupt while waiting propagates as is: polling is abandoned and the
    remote creation is left running, since it cannot be reliably cancelled.

    Returns:
        FinishedResource for a succeeded operation.

    Raises:
        OperationError: the provider reported the operation as failed, or
            polling it failed.
        RuntimeError: the handle was already resolved.
        ValueError: wait_interval is not positive.
    """
    if wait_interval is not None and wait_interval <= 0:
        raise ValueError(f"wait_interval must be positive, got {wait_interval}")
    if handle.resolved:
        raise RuntimeError(f"{handle!r} has already been resolved")

    poller = handle._poller
    try:
        while not poller.done():
            logger.debug("Waiting for %s (status=%s)", handle.description, poller.status())
            poller.wait(wait_interval)
        result = poller.result()
    except AzureError as e:
        _fail(handle, e.message, e)

    state = handle.refresh()
    if state is OperationState.FAILED:
        _fail(handle, f"operation ended with status {poller.status()}")
    if result is None:
        _fail(handle, "operation returned no resource")

    handle.state = OperationState.SUCCEEDED
    handle.resolved = True
    return handle._converter(result)
