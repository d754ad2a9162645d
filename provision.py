# provision.py
import argparse
import sys
import time

from azprovision import (
    ProvisionContext,
    ProvisionError,
    ResourceGroupSpec,
    StorageAccountSpec,
    acquire_credential,
    begin_create_storage_account,
    create_or_update_resource_group,
    poll_until_done,
)
from azprovision.config import DEFAULT_CONFIG_PATH, SUBSCRIPTION_ENV_VAR, build_config
from azprovision.utils import get_logger, parse_tags, save_config_to_yaml, setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Create a resource group and a storage account (args OR config)."
    )
    parser.add_argument(
        "--config",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help="Path to config.yml/.json",
    )
    parser.add_argument(
        "--subscription_id",
        type=str,
        default=None,
        help=f"Azure subscription id (default: ${SUBSCRIPTION_ENV_VAR}).",
    )
    parser.add_argument(
        "--resource_group_name",
        type=str,
        default=None,
        help="Resource group to create or update.",
    )
    parser.add_argument(
        "--location", type=str, default=None, help="Azure region, e.g. westus."
    )
    parser.add_argument(
        "--storage_account_name",
        type=str,
        default=None,
        help="Globally unique account name. Omit to generate samplestor<N>.",
    )
    parser.add_argument(
        "--kind",
        type=str,
        default=None,
        help="Account kind: Storage, StorageV2, BlobStorage, FileStorage, BlockBlobStorage.",
    )
    parser.add_argument(
        "--sku_name", type=str, default=None, help="SKU name, e.g. Standard_LRS."
    )
    parser.add_argument(
        "--sku_tier",
        type=str,
        default=None,
        help="SKU tier (Standard or Premium). Derived from --sku_name when omitted.",
    )
    parser.add_argument(
        "--tags",
        nargs="*",
        default=None,
        help="Tags in key=value format (e.g. env=dev owner=ops)",
    )
    parser.add_argument(
        "--skip_name_check",
        action="store_true",
        default=None,
        help="Do not ask the provider whether the account name is free before creating it.",
    )
    parser.add_argument(
        "--wait_interval",
        type=float,
        default=None,
        help="Seconds between progress messages while waiting for the storage account.",
    )
    parser.add_argument(
        "--save_config",
        type=str,
        default=None,
        help="Write the effective configuration to this YAML file.",
    )
    parser.add_argument(
        "--log_level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO).",
    )
    parser.add_argument(
        "--log_to_file",
        action="store_true",
        default=None,
        help="Also write logs to logs/azprovision_<timestamp>.log.",
    )

    return parser.parse_args(argv)


def build_specs(config):
    tags = config.tags
    if isinstance(tags, (list, tuple)):
        tags = parse_tags(tags)

    group = ResourceGroupSpec(
        name=config.resource_group_name,
        location=config.location,
        tags=dict(tags or {}),
    )
    account = StorageAccountSpec(
        name=config.storage_account_name,
        resource_group=group.name,
        location=config.location,
        kind=config.kind,
        sku_name=config.sku_name,
        sku_tier=config.sku_tier,
        tags=dict(tags or {}),
    )
    return group, account


def run(config, credential_factory=None, context_factory=None):
    """
    Run the provisioning sequence: credential, resource group, storage account.

    The resource group is created before the storage account call is issued.
    Nothing is rolled back on failure.

    Returns:
        (ResourceGroupResult, FinishedResource)
    """
    logger = get_logger("azprovision.provision")
    group_spec, account_spec = build_specs(config)

    credential = (credential_factory or acquire_credential)()
    context = (context_factory or ProvisionContext)(config.subscription_id, credential)

    group = create_or_update_resource_group(context, group_spec)

    handle = begin_create_storage_account(
        context,
        group.name,
        account_spec,
        check_name=not config.skip_name_check,
    )
    account = poll_until_done(handle, wait_interval=config.wait_interval)
    logger.info("Storage Account Created: %s", account.id)
    return group, account


def main(argv=None):
    args = parse_args(argv)

    setup_logging(enabled=True, log_level=args.log_level or "INFO")
    logger = get_logger("azprovision.provision")

    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(2)

    setup_logging(enabled=True, log_level=config.log_level, log_to_file=config.log_to_file)

    if not config.subscription_id:
        logger.error(
            "subscription id is required (via --subscription_id, config or $%s)",
            SUBSCRIPTION_ENV_VAR,
        )
        sys.exit(2)

    if config.save_config:
        save_config_to_yaml(config, config.save_config)
        logger.info("saved: config=%s", config.save_config)

    t0 = time.perf_counter()
    try:
        run(config)
    except ProvisionError as e:
        logger.error("%s failed: %s", e.step, e.message)
        sys.exit(1)
    except ValueError as e:
        logger.error("Invalid resource description: %s", e)
        sys.exit(2)

    logger.info("=== Provisioning done in %.2fs ===", time.perf_counter() - t0)


if __name__ == "__main__":
    main()
