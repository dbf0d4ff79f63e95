"""Configuration loading with environment variable substitution."""

from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import ValidationError

from runner_forge.config.config_data import RunnerForgeConfig
from runner_forge.config.config_utils import substitute_env_vars
from runner_forge.infra.constants import DEFAULT_CONSTANTS

CONFIG_PATH = Path(DEFAULT_CONSTANTS.CONFIG_FILE_NAME)


def load_config(file_path: Path | None = None) -> RunnerForgeConfig:
    """
    Load the deployment configuration.

    When no path is given, ``runner-forge.yaml`` in the working directory is
    used if present; otherwise the built-in defaults are returned.

    Args:
        file_path: Explicit path to a YAML config file

    Returns:
        Validated RunnerForgeConfig

    Raises:
        ValueError: If required environment variables are missing, validation
                   fails, or the YAML structure is invalid (missing 'config' key)
        FileNotFoundError: If an explicitly given file doesn't exist

    YAML Structure Requirements:
        The YAML file must have a top-level 'config:' key containing
        configuration data. ${VAR}, ${VAR:-default} and ${VAR:?message}
        placeholders are substituted before parsing.
    """
    if file_path is None:
        if not CONFIG_PATH.exists():
            logger.debug("No config file found, using built-in defaults")
            return RunnerForgeConfig()
        file_path = CONFIG_PATH

    logger.info(f"Loading configuration from {file_path}")
    with open(file_path) as f:
        content = f.read()

    content = substitute_env_vars(content)

    try:
        loaded: dict[str, Any] | None = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e

    if not isinstance(loaded, dict) or "config" not in loaded:
        raise ValueError("Invalid YAML structure: missing 'config' key")

    try:
        config = RunnerForgeConfig(**(loaded["config"] or {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    logger.debug(
        f"Loaded config for namespace '{config.namespace}', "
        f"release '{config.chart.release_name}'"
    )
    return config


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def apply_overrides(
    config: RunnerForgeConfig, overrides: dict[str, Any]
) -> RunnerForgeConfig:
    """Return a new config with nested overrides applied.

    Keys whose value is None are ignored, so CLI options that were not
    passed never clobber values from the config file.

    Args:
        config: Base configuration
        overrides: Nested dict mirroring the config structure

    Returns:
        New RunnerForgeConfig with overrides applied
    """

    def _prune(data: dict[str, Any]) -> dict[str, Any]:
        pruned: dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(value, dict):
                nested = _prune(value)
                if nested:
                    pruned[key] = nested
            elif value is not None:
                pruned[key] = value
        return pruned

    pruned = _prune(overrides)
    if not pruned:
        return config

    logger.debug(f"Applying CLI overrides: {sorted(pruned)}")
    try:
        return RunnerForgeConfig.model_validate(
            _deep_merge(config.model_dump(), pruned)
        )
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
