"""Configuration loader with YAML parsing and environment variable substitution."""

import os
import re
from pathlib import Path

import yaml

from .schema import NavigatorConfig


def substitute_env_vars(text: str) -> str:
    """
    Replace ${VAR_NAME} patterns with environment variable values.

    Args:
        text: Text containing ${VAR_NAME} patterns

    Returns:
        Text with environment variables substituted

    Raises:
        ValueError: If a referenced environment variable is not found
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ValueError(f"Environment variable {var_name} not found")
        return value

    return re.sub(r"\$\{([^}]+)\}", replacer, text)


def load_config(path: Path | None = None) -> NavigatorConfig:
    """
    Load configuration from a YAML file with environment variable substitution.

    Without a path, defaults and ``JAVA_STACK_NAV_*`` environment variables
    are used.

    Args:
        path: Path to YAML configuration file, or None

    Returns:
        Validated NavigatorConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If environment variables are missing or config is invalid
        ValidationError: If config doesn't match schema
    """
    if path is None:
        return NavigatorConfig()

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open() as f:
        raw_yaml = f.read()

    # Substitute environment variables
    yaml_with_env = substitute_env_vars(raw_yaml)

    # Parse YAML; an empty file means all defaults
    config_dict = yaml.safe_load(yaml_with_env) or {}
    if not isinstance(config_dict, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")

    config = NavigatorConfig.model_validate(config_dict)

    validate_config(config)

    return config


def validate_config(config: NavigatorConfig) -> None:
    """
    Perform additional cross-field validation.

    Args:
        config: Configuration to validate

    Raises:
        ValueError: If the mappings directory is set but is not a directory
    """
    mappings_dir = config.stack_trace.obfuscation_mappings_dir
    if mappings_dir is not None and not mappings_dir.is_dir():
        raise ValueError(f"Obfuscation mappings directory not found: {mappings_dir}")
