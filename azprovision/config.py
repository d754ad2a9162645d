# azprovision/config.py
import argparse
import json
import os
from pathlib import Path

import yaml
from easydict import EasyDict as edict

from .models import Kind, SkuName, SkuTier, generate_account_name

SUBSCRIPTION_ENV_VAR = "AZURE_SUBSCRIPTION_ID"
DEFAULT_CONFIG_PATH = "config.yml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

DEFAULTS = {
    "subscription_id": None,
    "resource_group_name": "sample-resource-group",
    "location": "westus",
    "storage_account_name": None,
    "account_name_prefix": "samplestor",
    "kind": Kind.STORAGE_V2.value,
    "sku_name": SkuName.STANDARD_LRS.value,
    "sku_tier": None,
    "tags": {},
    "skip_name_check": False,
    "wait_interval": 5.0,
    "log_level": "INFO",
    "log_to_file": False,
    "save_config": None,
}


def load_config(path: str = None):
    if not path:
        return {}
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    try:
        if p.suffix.lower() in {".yml", ".yaml"}:
            cfg = yaml.safe_load(p.read_text()) or {}
        elif p.suffix.lower() == ".json":
            cfg = json.loads(p.read_text())
        else:
            raise ValueError("Config must be .yml/.yaml or .json")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValueError(f"Config {path} could not be parsed: {e}") from e
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {path} must contain a mapping, got {type(cfg).__name__}")
    return cfg


def load_config_if_present(path: str = None):
    # the default config file is optional, an explicitly named one is not
    if path == DEFAULT_CONFIG_PATH and not Path(path).exists():
        return {}
    return load_config(path)


def merge_config(args: argparse.Namespace, config: dict) -> dict:
    """
    Merge command-line arguments with YAML config.
    Args override config values if they are not None.
    """

    merged = config.copy()
    for key, value in vars(args).items():
        if value is not None and key != "config":
            merged[key] = value
    return merged


def pick(*vals):
    # first non-None
    for v in vals:
        if v is not None:
            return v
    return None


def resolve_subscription_id(config: dict, environ=None):
    environ = os.environ if environ is None else environ
    return pick(config.get("subscription_id"), environ.get(SUBSCRIPTION_ENV_VAR)) or None


def build_config(args: argparse.Namespace, environ=None) -> edict:
    """
    Resolve the effective configuration.

    Precedence is CLI flag, then config file, then environment (subscription
    only), then the built-in defaults. Kind and SKU values are normalised so
    a typo fails here rather than at the provider.
    """
    file_cfg = load_config_if_present(getattr(args, "config", None))
    merged = DEFAULTS.copy()
    merged.update({k: v for k, v in file_cfg.items() if v is not None})
    merged = merge_config(args, merged)

    merged["subscription_id"] = resolve_subscription_id(merged, environ)
    if not merged.get("storage_account_name"):
        merged["storage_account_name"] = generate_account_name(
            merged["account_name_prefix"]
        )

    merged["kind"] = Kind.from_value(merged["kind"]).value
    merged["sku_name"] = SkuName.from_value(merged["sku_name"]).value
    if merged.get("sku_tier") is not None:
        merged["sku_tier"] = SkuTier.from_value(merged["sku_tier"]).value

    level = str(merged["log_level"]).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unsupported log_level: {merged['log_level']}. Supported: {list(LOG_LEVELS)}")
    merged["log_level"] = level

    if merged.get("wait_interval") is not None:
        try:
            interval = float(merged["wait_interval"])
        except (TypeError, ValueError):
            raise ValueError(f"wait_interval must be a number, got {merged['wait_interval']!r}")
        if interval <= 0:
            raise ValueError(f"wait_interval must be positive, got {interval}")
        merged["wait_interval"] = interval

    return edict(merged)
