import argparse
import os
import sys

from azure.storage.blob import BlobServiceClient

from azprovision import (
    ProvisionContext,
    ProvisionError,
    StorageAccountSpec,
    acquire_credential,
    begin_create_storage_account,
    generate_account_name,
    poll_until_done,
)
from azprovision.config import SUBSCRIPTION_ENV_VAR
from azprovision.utils import get_logger, setup_logging

logger = get_logger("azprovision.storage_account_create")


def create_storage_account(subscription_id, resource_group, storage_account_name, region,
                           kind="StorageV2", sku_name="Standard_LRS", credential=None):
    credential = credential or acquire_credential()
    context = ProvisionContext(subscription_id, credential)

    spec = StorageAccountSpec(
        name=storage_account_name,
        resource_group=resource_group,
        location=region,
        kind=kind,
        sku_name=sku_name,
    )
    handle = begin_create_storage_account(context, resource_group, spec)
    account = poll_until_done(handle)
    logger.info("Storage Account Created: %s", account.id)
    return account


def connect_to_blob_service(account, credential):
    """List the containers of a new account to confirm its blob endpoint answers."""
    account_url = account.primary_endpoints.get(
        "blob", f"https://{account.name}.blob.core.windows.net/"
    )
    blob_service_client = BlobServiceClient(account_url=account_url, credential=credential)
    names = [container["name"] for container in blob_service_client.list_containers()]
    logger.info("Available containers: %s", names or "none")
    return names


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create Azure Storage Account")
    parser.add_argument("--subscription_id", type=str, default=os.environ.get(SUBSCRIPTION_ENV_VAR))
    parser.add_argument("--resource_group", type=str, default="sample-resource-group")
    parser.add_argument("--storage_account_name", type=str, default=None)
    parser.add_argument("--region", type=str, default="westus")
    parser.add_argument("--kind", type=str, default="StorageV2")
    parser.add_argument("--sku_name", type=str, default="Standard_LRS")
    parser.add_argument("--verify_blob", action="store_true", help="List containers after creation")
    args = parser.parse_args(argv)

    setup_logging(enabled=True)

    if not args.subscription_id:
        logger.error("--subscription_id or $%s is required", SUBSCRIPTION_ENV_VAR)
        sys.exit(2)

    try:
        credential = acquire_credential()
        account = create_storage_account(
            args.subscription_id,
            args.resource_group,
            args.storage_account_name or generate_account_name(),
            args.region,
            kind=args.kind,
            sku_name=args.sku_name,
            credential=credential,
        )
    except ProvisionError as e:
        logger.error("%s failed: %s", e.step, e.message)
        sys.exit(1)
    except ValueError as e:
        logger.error("Invalid resource description: %s", e)
        sys.exit(2)

    if args.verify_blob:
        connect_to_blob_service(account, credential)


if __name__ == "__main__":
    main()
