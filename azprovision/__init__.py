import logging

# Add NullHandler to prevent logs when used as library
logging.getLogger(__name__).addHandler(logging.NullHandler())

"""
Provision an Azure resource group and storage account, waiting for the
storage account's long-running creation to finish.
"""

from .credentials import MANAGEMENT_SCOPE, acquire_credential
from .exceptions import AuthError, OperationError, ProviderError, ProvisionError
from .models import (
    FinishedResource,
    Kind,
    ResourceGroupResult,
    ResourceGroupSpec,
    SkuName,
    SkuTier,
    StorageAccountSpec,
    generate_account_name,
)
from .orchestrator import (
    ProvisionContext,
    begin_create_storage_account,
    check_account_name,
    create_or_update_resource_group,
)
from .poller import OperationHandle, OperationState, poll_until_done
from .utils import get_logger  # Export for users
from .utils import setup_logging  # Export for users who want to enable logging
