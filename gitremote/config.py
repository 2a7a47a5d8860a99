#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import toml
import yaml

from .exit_codes import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("gitremote")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. GITREMOTE_CONFIG environment variable
    2. ~/.gitremote/ directory
    """
    if 'GITREMOTE_CONFIG' in os.environ:
        path = Path(os.environ['GITREMOTE_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.gitremote'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists() and path.stat().st_size > 0:
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def read_config_file(config_path):
    """Read a JSON, TOML or YAML config file into a dict."""
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ('.yaml', '.yml'):
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            file_config = read_config_file(config_path)
            if isinstance(file_config, dict):
                config = merge_configs(config, file_config)
            else:
                logger.error(f"Ignoring config {config_path}: top level must be a mapping")
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def save_config(config, config_path=None):
    """Save configuration to file."""
    config_path = Path(config_path) if config_path else get_config_path()

    # Create directory if it doesn't exist
    config_path.parent.mkdir(parents=True, exist_ok=True)

    suffix = config_path.suffix.lower()
    with open(config_path, 'w') as f:
        if suffix == '.toml':
            toml.dump(config, f)
        elif suffix in ('.yaml', '.yml'):
            yaml.safe_dump(config, f, default_flow_style=False)
        else:
            json.dump(config, f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def get_default_config():
    """Get default configuration."""
    return {
        "base": {
            "kind": "container",          # "container" or "local"
            "image": "alpine/git:latest", # Any image with git installed
            "runtime": "docker",          # docker, podman, ...
            "pull": "",                   # --pull policy; empty = runtime default
            "git_executable": "git"       # Used when kind = "local"
        },
        "git": {
            "timeout_seconds": 120
        },
        "resolve": {
            "max_concurrent_operations": 4
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        },
        "output": {
            "format": "jsonl"
        }
    }


def configure_logging(config, verbose=False):
    """Apply the logging section of config to the gitremote logger."""
    log_config = config.get("logging", {})
    level_name = "DEBUG" if verbose else str(log_config.get("level", "WARNING")).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        logger.warning(f"Unknown log level {level_name!r}, using WARNING")
        level = logging.WARNING
    logger.setLevel(level)

    log_format = log_config.get("format")
    if log_format:
        formatter = logging.Formatter(log_format)
        for handler in logging.getLogger().handlers:
            handler.setFormatter(formatter)


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def coerce_env_value(value):
    """Turn an environment string into a bool, int, float or leave it as str."""
    if value.lower() in ('true', 'yes', 'on'):
        return True
    if value.lower() in ('false', 'no', 'off'):
        return False
    try:
        return int(value)
    except ValueError:
        pass
    # Only things that look numeric; float() also accepts "nan" and "inf"
    if any(c.isdigit() for c in value):
        try:
            return float(value)
        except ValueError:
            pass
    return value


def config_number(config, section, key, integer=False, minimum=0):
    """
    Read a numeric setting, rejecting values of the wrong type.

    Returns None when the setting is missing, empty or zero.

    Raises:
        ConfigError: The value is not a number, or is below minimum
    """
    value = config.get(section, {}).get(key)
    if value is None or value == "" or value == 0:
        return None
    kind = int if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, kind):
        expected = "an integer" if integer else "a number"
        raise ConfigError(f"{section}.{key} must be {expected}, got {value!r}")
    if value != value or value in (float('inf'), float('-inf')) or value < minimum:
        raise ConfigError(f"{section}.{key} must be a finite number >= {minimum}, got {value!r}")
    return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: GITREMOTE_SECTION_KEY
    For example: GITREMOTE_BASE_KIND=local or GITREMOTE_GIT_TIMEOUT_SECONDS=30
    """
    env_prefix = "GITREMOTE_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "GITREMOTE_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        typed_value = coerce_env_value(value)

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if not isinstance(current_level[matched_key], dict):
                # env var is longer than the config path it matched
                break

            current_level = current_level[matched_key]
            i += best_match_len

    return config
