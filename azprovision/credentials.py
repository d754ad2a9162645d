"""
Credential acquisition for the Azure management API.
"""

from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential

from .exceptions import AuthError
from .utils import get_logger

logger = get_logger(__name__)

MANAGEMENT_SCOPE = "https://management.azure.com/.default"


def acquire_credential(
    probe: bool = True,
    exclude_interactive: bool = True,
    scope: str = MANAGEMENT_SCOPE,
):
    """
    Obtain a credential able to sign management API requests.

    DefaultAzureCredential walks the ambient mechanisms in its own fixed order
    (environment secrets, workload identity, managed identity, shared token
    cache, Azure CLI, ...) and uses the first that works. Building it never
    touches the network, so by default one token is requested up front: a
    machine with no usable identity then fails here, before any resource
    endpoint is called.

    Raises:
        AuthError: no mechanism produced a token.
    """
    try:
        credential = DefaultAzureCredential(
            exclude_interactive_browser_credential=exclude_interactive
        )
        if probe:
            credential.get_token(scope)
    except AzureError as e:
        logger.error("Failed to obtain a credential: %s", e.message)
        raise AuthError(f"failed to obtain a credential: {e.message}") from e
    except ValueError as e:
        # raised for malformed environment configuration
        logger.error("Failed to obtain a credential: %s", e)
        raise AuthError(f"failed to obtain a credential: {e}") from e

    logger.info("Credential acquired (%s)", type(credential).__name__)
    return credential
