import argparse
import os
import sys

from azprovision import (
    ProvisionContext,
    ProvisionError,
    ResourceGroupSpec,
    acquire_credential,
    create_or_update_resource_group,
)
from azprovision.config import SUBSCRIPTION_ENV_VAR
from azprovision.utils import get_logger, parse_tags, setup_logging


def create_resource_group(subscription_id, resource_group_name, location, tags):
    """
    Create (or update) an Azure Resource Group with optional tags.
    """
    credential = acquire_credential()
    context = ProvisionContext(subscription_id, credential)
    spec = ResourceGroupSpec(name=resource_group_name, location=location, tags=tags)
    return create_or_update_resource_group(context, spec)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create an Azure Resource Group with optional tags.")
    parser.add_argument("--subscription_id", type=str, default=os.environ.get(SUBSCRIPTION_ENV_VAR))
    parser.add_argument("--resource_group_name", type=str, default="sample-resource-group")
    parser.add_argument("--location", type=str, default="westus")
    parser.add_argument("--tags", nargs="*", help="Tags in key=value format (e.g. env=dev owner=ops)")
    args = parser.parse_args(argv)

    setup_logging(enabled=True)
    logger = get_logger("azprovision.resource_group_create")

    if not args.subscription_id:
        logger.error("--subscription_id or $%s is required", SUBSCRIPTION_ENV_VAR)
        sys.exit(2)

    try:
        group = create_resource_group(
            args.subscription_id, args.resource_group_name, args.location, parse_tags(args.tags)
        )
    except ProvisionError as e:
        logger.error("%s failed: %s", e.step, e.message)
        sys.exit(1)

    logger.info("Location: %s", group.location)


if __name__ == "__main__":
    main()


# python azure_components/resource_group_create.py --resource_group_name sample-resource-group --location westus --tags project=sample environment=dev
