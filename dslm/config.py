#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import toml
import yaml

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("dslm")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. DSLM_CONFIG environment variable
    2. ~/.dslm/ directory
    """
    if 'DSLM_CONFIG' in os.environ:
        path = Path(os.environ['DSLM_CONFIG'])
        if path.exists():
            return path

    dslm_dir = Path.home() / '.dslm'
    for filename in CONFIG_FILENAMES:
        path = dslm_dir / filename
        if path.exists() and path.stat().st_size > 10:  # Not empty/trivial
            return path

    # If no file exists, return default path for saving
    return dslm_dir / 'config.json'


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    if config_path.exists():
        try:
            suffix = config_path.suffix.lower()
            if suffix == '.toml':
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif suffix in ('.yaml', '.yml'):
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            config = merge_configs(config, file_config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    return apply_env_overrides(config)


def save_config(config):
    """Save configuration to file."""
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        suffix = config_path.suffix.lower()
        if suffix == '.toml':
            with open(config_path, 'w') as f:
                toml.dump(config, f)
        elif suffix in ('.yaml', '.yml'):
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        else:
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)

        logger.info(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Error saving config to {config_path}: {e}")


def get_default_config():
    """Get default configuration."""
    return {
        "general": {
            "base": "",                 # Repository root holding cores/ and dists/
            "write_manifest": False     # Write .dslm-links.json after each switch
        },
        "installation": {
            "marker_files": ["install.php", "update.php", "cron.php"],
            "settings_template": "sites/default/default.settings.php",
            "files_dir": "sites/default/files"
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        }
    }


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
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: DSLM_SECTION_KEY
    For example: DSLM_GENERAL_WRITE_MANIFEST=true
    """
    env_prefix = "DSLM_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'DSLM_CONFIG':
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                # Path conflict: env var is longer but we found a non-dict value
                break

    return config


def configure_logging(config, debug=False):
    """Apply the configured log level and format to the root logger."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            force=True
        )
        return

    log_config = config.get('logging', {})
    level = getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=log_config.get('format', '%(levelname)s: %(message)s'),
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True
    )
