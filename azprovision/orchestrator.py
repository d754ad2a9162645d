"""
Create/update calls against the Azure management API.

Clients live on a ``ProvisionContext`` built once per run and passed to every
operation, so nothing here keeps module level client state.
"""

from azure.core.exceptions import AzureError
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.storage import StorageManagementClient

from .exceptions import ProviderError
from .models import ResourceGroupResult, ResourceGroupSpec, StorageAccountSpec
from .poller import OperationHandle
from .utils import get_logger

logger = get_logger(__name__)


class ProvisionContext:
    """Subscription, credential and the management clients for one run."""

    def __init__(self, subscription_id, credential, resource_client=None, storage_client=None):
        if not subscription_id:
            raise ValueError("subscription_id is required")
        self.subscription_id = subscription_id
        self.credential = credential
        self._resource_client = resource_client
        self._storage_client = storage_client

    @property
    def resource_client(self):
        if self._resource_client is None:
            self._resource_client = ResourceManagementClient(self.credential, self.subscription_id)
        return self._resource_client

    @property
    def storage_client(self):
        if self._storage_client is None:
            self._storage_client = StorageManagementClient(self.credential, self.subscription_id)
        return self._storage_client


def _provider_error(step: str, e: AzureError) -> ProviderError:
    # transport failures (ServiceRequestError, ...) carry no status or error body
    error = getattr(e, "error", None)
    error_code = getattr(error, "code", None)
    status_code = getattr(e, "status_code", None)
    logger.error("%s rejected (status=%s, code=%s): %s", step, status_code, error_code, e.message)
    return ProviderError(
        f"{step} rejected: {e.message}",
        step=step,
        status_code=status_code,
        error_code=error_code,
    )


def create_or_update_resource_group(context: ProvisionContext, spec: ResourceGroupSpec):
    """
    Create the resource group, or confirm/update it when it already exists.

    Calling this twice with the same name and location yields the same group id.

    Raises:
        ProviderError: the provider rejected the request or could not be reached.
    """
    step = "create resource group"
    logger.info("Creating Resource Group: %s", spec.name)
    try:
        group = context.resource_client.resource_groups.create_or_update(
            spec.name, spec.to_parameters()
        )
    except AzureError as e:
        raise _provider_error(step, e) from e

    result = ResourceGroupResult.from_sdk(group)
    logger.info("Resource Group Created: %s", result.id)
    return result


def check_account_name(context: ProvisionContext, name: str) -> None:
    """
    Ask the provider whether a storage account name is still free.

    Raises:
        ProviderError: the name is taken or invalid.
    """
    step = "check storage account name"
    try:
        availability = context.storage_client.storage_accounts.check_name_availability(
            {"name": name, "type": "Microsoft.Storage/storageAccounts"}
        )
    except AzureError as e:
        raise _provider_error(step, e) from e

    if not availability.name_available:
        reason = getattr(availability.reason, "value", availability.reason)
        logger.error("Storage account name '%s' unavailable: %s", name, availability.message)
        raise ProviderError(
            f"storage account name '{name}' is not available: {availability.message}",
            step=step,
            status_code=409 if reason == "AlreadyExists" else None,
            error_code=reason,
        )


def begin_create_storage_account(
    context: ProvisionContext,
    resource_group_name: str,
    spec: StorageAccountSpec,
    check_name: bool = True,
) -> OperationHandle:
    """
    Submit the storage account creation and return without waiting.

    Name format and kind/SKU support are checked locally first, so an invalid
    request fails before anything is allocated. Resolve the returned handle
    with ``poll_until_done``.

    Raises:
        ProviderError: validation failed or the provider rejected the request.
    """
    if resource_group_name != spec.resource_group:
        raise ValueError(
            f"resource group '{resource_group_name}' does not match spec ({spec.resource_group})"
        )
    spec.validate()
    if check_name:
        check_account_name(context, spec.name)

    step = "create storage account"
    logger.info("Create Storage Account: %s", spec.name)
    try:
        poller = context.storage_client.storage_accounts.begin_create(
            resource_group_name=resource_group_name,
            account_name=spec.name,
            parameters=spec.to_parameters(),
        )
    except AzureError as e:
        raise _provider_error(step, e) from e

    return OperationHandle(poller, description=f"storage account '{spec.name}'")
