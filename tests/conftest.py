# tests/conftest.py
"""
Pytest configuration and shared fixtures for azprovision tests.

The Azure SDK clients are replaced by small in-memory fakes so that no test
touches the network.
"""
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from types import SimpleNamespace
from typing import List, Optional

import pytest
from azure.core.exceptions import HttpResponseError

from azprovision import ProvisionContext

SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000000"


# ---------------------------------------------------------------------------
# Utility functions
# ---------------------------------------------------------------------------


def http_error(message: str, status_code: Optional[int] = None, code: Optional[str] = None):
    """Build an HttpResponseError the way the SDK surfaces provider rejections."""
    error = HttpResponseError(message=message)
    error.status_code = status_code
    error.error = SimpleNamespace(code=code) if code else None
    return error


def storage_account(name: str, resource_group: str = "sample-resource-group", location: str = "westus"):
    return SimpleNamespace(
        id=(
            f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{resource_group}"
            f"/providers/Microsoft.Storage/storageAccounts/{name}"
        ),
        name=name,
        location=location,
        provisioning_state="Succeeded",
        primary_endpoints=SimpleNamespace(
            blob=f"https://{name}.blob.core.windows.net/",
            queue=f"https://{name}.queue.core.windows.net/",
            table=None,
            file=None,
            web=None,
            dfs=None,
        ),
    )


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakePoller:
    """Stands in for azure.core.polling.LROPoller.

    ``statuses`` are reported one per ``wait`` call; the last one is terminal.
    """

    def __init__(self, statuses: List[str], result=None, error: Exception = None):
        self.statuses = list(statuses)
        self._index = 0
        self._result = result
        self._error = error
        self.wait_calls = []
        self.result_calls = 0

    def status(self):
        return self.statuses[self._index]

    def done(self):
        return self._index >= len(self.statuses) - 1

    def wait(self, timeout=None):
        self.wait_calls.append(timeout)
        if self._index < len(self.statuses) - 1:
            self._index += 1
        if self.done() and self._error is not None:
            raise self._error

    def result(self, timeout=None):
        self.result_calls += 1
        if self._error is not None:
            raise self._error
        return self._result


class FakeResourceGroups:
    """create_or_update keyed by name, so repeated calls return the same group."""

    def __init__(self, error: Exception = None):
        self.groups = {}
        self.calls = []
        self._error = error

    def create_or_update(self, name, parameters):
        self.calls.append((name, parameters))
        if self._error is not None:
            raise self._error
        group = self.groups.get(name)
        if group is None:
            group = SimpleNamespace(
                id=f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{name}",
                name=name,
                location=parameters["location"],
                tags=parameters.get("tags"),
                properties=SimpleNamespace(provisioning_state="Succeeded"),
            )
            self.groups[name] = group
        else:
            group.tags = parameters.get("tags")
        return group


class FakeStorageAccounts:
    def __init__(self, taken=(), begin_error: Exception = None, poller_factory=None):
        self.taken = set(taken)
        self.begin_error = begin_error
        self.poller_factory = poller_factory
        self.name_checks = []
        self.begin_calls = []

    def check_name_availability(self, account_name):
        name = account_name["name"]
        self.name_checks.append(name)
        if name in self.taken:
            return SimpleNamespace(
                name_available=False,
                reason="AlreadyExists",
                message=f"The storage account named {name} is already taken.",
            )
        return SimpleNamespace(name_available=True, reason=None, message=None)

    def begin_create(self, resource_group_name, account_name, parameters):
        self.begin_calls.append((resource_group_name, account_name, parameters))
        if self.begin_error is not None:
            raise self.begin_error
        if self.poller_factory is not None:
            return self.poller_factory(resource_group_name, account_name)
        return FakePoller(
            ["InProgress", "InProgress", "Succeeded"],
            result=storage_account(account_name, resource_group_name, parameters["location"]),
        )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def resource_groups() -> FakeResourceGroups:
    return FakeResourceGroups()


@pytest.fixture
def storage_accounts() -> FakeStorageAccounts:
    return FakeStorageAccounts()


@pytest.fixture
def context(resource_groups, storage_accounts) -> ProvisionContext:
    """A ProvisionContext wired to the in-memory fakes."""
    return ProvisionContext(
        SUBSCRIPTION_ID,
        credential=object(),
        resource_client=SimpleNamespace(resource_groups=resource_groups),
        storage_client=SimpleNamespace(storage_accounts=storage_accounts),
    )


@pytest.fixture(autouse=True)
def _no_subscription_env(monkeypatch):
    """Keep the developer's own subscription out of the tests."""
    monkeypatch.delenv("AZURE_SUBSCRIPTION_ID", raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Scripts enable logging with handlers bound to the captured stderr; drop them."""
    yield
    package_logger = logging.getLogger("azprovision")
    for handler in list(package_logger.handlers):
        handler.close()
    package_logger.handlers.clear()
    package_logger.disabled = True
