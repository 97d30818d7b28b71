import logging
import os
from pathlib import Path
from typing import Optional

import yaml

from execlens_store.filesystem import HISTORY_DIRNAME

logger = logging.getLogger(__name__)

STORE_TYPES = ("file", "sqlite", "memory")

DEFAULT_CONFIG: dict = {
    "store": "file",
    "history_dir": ".execlens/execlog_history",
    "store_path": ".execlens/history.db",
    "output_base": None,  # when set, history lives under <output_base>/execlog_history
    "format": "text",
    "details": False,
    "show_cached": False,
    "color": True,
}


def load_config(config_path: str = ".execlens.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .execlens.yml in the current directory
      3. EXECLENS_OUTPUT_BASE environment variable
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"{config_path} must contain a mapping, got {type(file_config).__name__}")
        config.update(file_config)

    output_base = os.environ.get("EXECLENS_OUTPUT_BASE")
    if output_base:
        config["output_base"] = output_base

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    if config["store"] not in STORE_TYPES:
        logger.warning("Unknown store type %r; falling back to 'file'.", config["store"])
        config["store"] = "file"

    return config


def resolve_history_dir(config: dict) -> Path:
    """Return the directory the file store keeps history in."""
    output_base = config.get("output_base")
    if output_base:
        return Path(output_base) / HISTORY_DIRNAME
    return Path(config["history_dir"])
