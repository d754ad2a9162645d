"""
Logging and small helpers shared by the provisioning scripts.
"""

import logging
import os
from datetime import datetime
from typing import Dict, Iterable, Optional

import yaml

PACKAGE_LOGGER = "azprovision"


def setup_logging(
    log_level: str = "INFO",
    log_to_file: bool = False,
    log_file_path: Optional[str] = None,
    enable_console: bool = True,
    enabled: bool = False,
) -> logging.Logger:
    """
    Setup logging configuration for applications using this library.

    This function configures only the azprovision logger, not the root logger,
    so the Azure SDK's own loggers keep whatever configuration the host gave them.
    """

    package_logger = logging.getLogger(PACKAGE_LOGGER)

    if not enabled:
        package_logger.disabled = True
        return package_logger

    package_logger.disabled = False
    package_logger.setLevel(getattr(logging, log_level.upper()))

    # Clear existing handlers to avoid duplicates
    package_logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        package_logger.addHandler(console_handler)

    if log_to_file:
        if log_file_path is None:
            os.makedirs("logs", exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file_path = f"logs/azprovision_{timestamp}.log"

        file_handler = logging.FileHandler(log_file_path)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.propagate = False

    package_logger.info(f"azprovision logging initialized - Level: {log_level}")
    if log_to_file:
        package_logger.info(f"Log file: {log_file_path}")

    return package_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger for a specific module within the library.

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        Logger instance for the specified module

    Example:
        >>> from azprovision.utils import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("Polling storage account creation...")
    """
    if name is None:
        name = __name__

    return logging.getLogger(name)


def disable_logging(logger_name: Optional[str] = None) -> None:
    """
    Disable logging for this library or a specific logger.

    Example:
        >>> disable_logging()
        >>> disable_logging("azprovision.poller")
    """
    if logger_name is None:
        logger_name = PACKAGE_LOGGER

    logging.getLogger(logger_name).disabled = True


def enable_logging(logger_name: Optional[str] = None, level: str = "INFO") -> None:
    """Enable logging for this library or a specific logger."""
    if logger_name is None:
        logger_name = PACKAGE_LOGGER

    logger_obj = logging.getLogger(logger_name)
    logger_obj.disabled = False
    logger_obj.setLevel(getattr(logging, level.upper()))


def parse_tags(pairs: Optional[Iterable[str]], logger=None) -> Dict[str, str]:
    """Convert a list of key=value strings into a dictionary."""
    logger = logger or get_logger(__name__)
    tags = {}
    for tag in pairs or []:
        if "=" in tag:
            key, value = tag.split("=", 1)
            tags[key] = value
        else:
            logger.warning("Ignoring malformed tag: '%s' (expected format key=value)", tag)
    return tags


def easydict_to_dict(d):
    from easydict import EasyDict

    if isinstance(d, EasyDict):
        d = {k: easydict_to_dict(v) for k, v in d.items()}
    elif isinstance(d, list):
        d = [easydict_to_dict(v) for v in d]
    return d


def save_config_to_yaml(config: dict, output_path: str):
    """Save the effective configuration as a YAML file."""
    config = easydict_to_dict(config)

    with open(output_path, "w") as f:
        yaml.dump(dict(config), f, default_flow_style=False, sort_keys=False)
