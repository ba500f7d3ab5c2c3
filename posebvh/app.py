"""
Application setup shared by the command-line entry points.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from posebvh.config import AppConfig

_HANDLER_NAME = "posebvh-console"


def setup_logging(level: str = "INFO"):
    """Configure logging for the application."""
    # Create formatter
    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Console handler (for terminal output), installed once
    for handler in root_logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load configuration from a YAML file, falling back to defaults.

    Without an explicit path, ``posebvh.yaml`` in the working directory is
    used when present.
    """
    logger = logging.getLogger(__name__)

    if config_path is None:
        default_path = Path("posebvh.yaml")
        if not default_path.exists():
            logger.debug("Using default configuration")
            return AppConfig()
        config_path = default_path

    logger.info(f"Loading configuration from: {config_path}")
    return AppConfig.from_yaml(config_path)
