"""Runtime settings assembled from CLI arguments, a YAML config file and defaults.

Precedence is CLI > config file > Constants. Extracted from npmsweep.py to
keep the entrypoint slim.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

_STRING_KEYS = ("ioc_file", "paths_file", "log_level", "output", "output_format")
_KNOWN_KEYS = set(_STRING_KEYS) | {"scan_global", "extra_paths"}


class ConfigError(Exception):
    """Raised when an explicitly requested config file is unusable."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"invalid config file {path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass
class ScanSettings:
    """Effective settings for one scan run."""
    ioc_file: str = Constants.DEFAULT_IOC_FILE
    paths_file: Optional[str] = Constants.DEFAULT_PATHS_FILE
    scan_global: bool = True
    extra_paths: List[str] = field(default_factory=list)
    targets: List[str] = field(default_factory=list)
    output: Optional[str] = None
    output_format: Optional[str] = None
    log_level: Optional[str] = None
    log_file: Optional[str] = None
    quiet: bool = False
    config_path: Optional[str] = None


def find_config_file(explicit: Optional[str] = None) -> Tuple[Optional[str], bool]:
    """Locate the config file.

    Returns:
        (path, required) where ``required`` is True when the user asked for
        this file explicitly (CLI or environment) and a missing file is an
        error rather than a silent no-op.
    """
    if explicit:
        return explicit, True
    env_path = os.environ.get(Constants.ENV_CONFIG)
    if env_path:
        return env_path, True

    candidates = list(Constants.CONFIG_FILENAMES)
    user_dir = os.path.expanduser(Constants.USER_CONFIG_DIR)
    candidates.extend(os.path.join(user_dir, name) for name in Constants.CONFIG_FILENAMES)
    for candidate in candidates:
        if os.path.isfile(candidate):
            return candidate, False
    return None, False


def load_config(path: str) -> Dict[str, Any]:
    """Load and validate a YAML config file.

    Raises:
        ConfigError: If the file cannot be read, parsed, or has bad value types.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(path, str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigError(path, f"YAML parse error: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(path, "top level must be a mapping")

    for key in list(data):
        if key not in _KNOWN_KEYS:
            logger.debug("Ignoring unknown config key: %s", key)
            data.pop(key)

    for key in _STRING_KEYS:
        if key in data and data[key] is not None and not isinstance(data[key], str):
            raise ConfigError(path, f"'{key}' must be a string")
    if data.get("output_format") is not None and data["output_format"].lower() not in Constants.OUTPUT_FORMATS:
        raise ConfigError(path, f"'output_format' must be one of {', '.join(Constants.OUTPUT_FORMATS)}")
    if data.get("log_level") is not None and data["log_level"].upper() not in Constants.LOG_LEVELS:
        raise ConfigError(path, f"'log_level' must be one of {', '.join(Constants.LOG_LEVELS)}")
    if "scan_global" in data and not isinstance(data["scan_global"], bool):
        raise ConfigError(path, "'scan_global' must be true or false")
    extra = data.get("extra_paths")
    if extra is not None and (
        not isinstance(extra, list) or not all(isinstance(p, str) for p in extra)
    ):
        raise ConfigError(path, "'extra_paths' must be a list of strings")
    return data


def build_settings(args) -> ScanSettings:
    """Merge parsed CLI arguments with the config file and defaults.

    Raises:
        ConfigError: If an explicitly requested config file is unusable.
    """
    config_path, required = find_config_file(getattr(args, "CONFIG", None))
    config: Dict[str, Any] = {}
    if config_path:
        config = load_config(config_path)
        logger.debug("Loaded %s config from %s", "requested" if required else "discovered", config_path)

    def _pick(cli_value, key, default):
        if cli_value is not None:
            return cli_value
        value = config.get(key)
        return default if value is None else value

    return ScanSettings(
        ioc_file=_pick(getattr(args, "IOC_FILE", None), "ioc_file", Constants.DEFAULT_IOC_FILE),
        paths_file=_pick(getattr(args, "PATHS_FILE", None), "paths_file", Constants.DEFAULT_PATHS_FILE),
        scan_global=_pick(getattr(args, "SCAN_GLOBAL", None), "scan_global", True),
        extra_paths=list(config.get("extra_paths") or []),
        targets=list(getattr(args, "targets", None) or []),
        output=_pick(getattr(args, "OUTPUT", None), "output", None),
        output_format=_pick(getattr(args, "OUTPUT_FORMAT", None), "output_format", None),
        log_level=_pick(getattr(args, "LOG_LEVEL", None), "log_level", None),
        log_file=getattr(args, "LOG_FILE", None),
        quiet=bool(getattr(args, "QUIET", False)),
        config_path=config_path,
    )
