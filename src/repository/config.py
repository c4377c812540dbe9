"""Persisted list of repositories and build defaults.

Configuration is searched in the working directory and its parents, using
the first file from Constants.CONFIG_SEARCH_PLACES that exists. JSON and YAML
files are both accepted; saving keeps the format of the target file.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when the configuration cannot be read, validated or updated."""


@dataclass
class Config:
    """Configuration file schema."""

    repositories: List[str] = field(default_factory=list)
    default_output: Optional[str] = None
    report_mode: str = Constants.DEFAULT_REPORT_MODE
    path: Optional[str] = None  # file the config was loaded from, if any

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"repositories": list(self.repositories)}
        if self.default_output is not None:
            data["defaultOutput"] = self.default_output
        data["reportMode"] = self.report_mode
        return data


def _is_yaml(path: str) -> bool:
    return path.lower().endswith(Constants.YAML_EXTENSIONS)


def find_config_file(start_dir: Optional[str] = None) -> Optional[str]:
    """Return the first configuration file found from start_dir upwards."""
    current = os.path.abspath(start_dir or os.getcwd())
    while True:
        for name in Constants.CONFIG_SEARCH_PLACES:
            candidate = os.path.join(current, name)
            if os.path.isfile(candidate):
                return candidate
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def validate_report_mode(mode: str) -> str:
    if mode not in Constants.REPORT_MODES:
        raise ConfigError(
            f'Invalid report mode "{mode}". Use "console" or "file".'
        )
    return mode


def _from_dict(data: Any, path: str) -> Config:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {path} must be a mapping")

    repositories = data.get("repositories", [])
    if repositories is None:
        repositories = []
    if not isinstance(repositories, list) or not all(isinstance(r, str) for r in repositories):
        raise ConfigError(f"'repositories' in {path} must be a list of paths")

    default_output = data.get("defaultOutput")
    if default_output is not None and not isinstance(default_output, str):
        raise ConfigError(f"'defaultOutput' in {path} must be a string")

    report_mode = data.get("reportMode", Constants.DEFAULT_REPORT_MODE)
    try:
        validate_report_mode(report_mode)
    except ConfigError as e:
        raise ConfigError(f"{e} (in {path})") from e

    return Config(
        repositories=list(repositories),
        default_output=default_output,
        report_mode=report_mode,
        path=path,
    )


def load_config(config_path: Optional[str] = None, search_from: Optional[str] = None) -> Config:
    """Load configuration from an explicit path or by searching for one.

    Args:
        config_path: Explicit configuration file; a missing file yields defaults.
        search_from: Directory to start searching from (defaults to cwd).

    Returns:
        Config with file values laid over the defaults.

    Raises:
        ConfigError: If the file cannot be parsed or has invalid values.
    """
    path = os.path.abspath(config_path) if config_path else find_config_file(search_from)
    if not path or not os.path.isfile(path):
        if config_path:
            logger.debug("Config file %s does not exist yet, using defaults", path)
            return Config(path=path)
        return Config()

    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) if _is_yaml(path) else json.load(fh)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read configuration {path}: {e}") from e

    config = _from_dict(data, path)
    logger.debug("Loaded configuration from %s (%d repositories)", path, len(config.repositories))
    return config


def save_config(config: Config, config_path: Optional[str] = None) -> str:
    """Write the configuration and return the path written.

    Target precedence: explicit path, the file the config came from, then
    Constants.CONFIG_FILE in the current directory.
    """
    path = config_path or config.path or os.path.join(os.getcwd(), Constants.CONFIG_FILE)
    path = os.path.abspath(path)
    try:
        with open(path, "w", encoding="utf-8") as fh:
            if _is_yaml(path):
                yaml.safe_dump(config.to_dict(), fh, sort_keys=False)
            else:
                json.dump(config.to_dict(), fh, indent=2)
                fh.write("\n")
    except OSError as e:
        raise ConfigError(f"Failed to write configuration {path}: {e}") from e
    config.path = path
    logger.debug("Configuration saved to %s", path)
    return path


def add_repository(repo_path: str, config_path: Optional[str] = None) -> Config:
    """Validate a repository and append it to the configuration.

    Raises:
        ConfigError: If the path does not exist or has no package.json.
    """
    absolute_path = os.path.abspath(repo_path)
    if not os.path.exists(absolute_path):
        raise ConfigError(f"Repository path does not exist: {absolute_path}")
    if not os.path.isfile(os.path.join(absolute_path, Constants.PACKAGE_JSON_FILE)):
        raise ConfigError(f"No package.json found in: {absolute_path}")

    config = load_config(config_path)
    if absolute_path in config.repositories:
        logger.info("Repository already configured: %s", absolute_path)
        return config

    config.repositories.append(absolute_path)
    save_config(config, config_path)
    return config


def remove_repository(repo_path: str, config_path: Optional[str] = None) -> Config:
    """Remove a repository, matching its absolute path first, then the literal string.

    Raises:
        ConfigError: If the repository is not configured.
    """
    config = load_config(config_path)
    absolute_path = os.path.abspath(repo_path)
    if absolute_path in config.repositories:
        config.repositories.remove(absolute_path)
    elif repo_path in config.repositories:
        config.repositories.remove(repo_path)
    else:
        raise ConfigError(f"Repository not found in config: {repo_path}")

    save_config(config, config_path)
    return config


def list_repositories(config_path: Optional[str] = None) -> List[str]:
    return load_config(config_path).repositories


def update_config(
    default_output: Optional[str] = None,
    report_mode: Optional[str] = None,
    config_path: Optional[str] = None,
) -> Config:
    """Set build defaults; the file is only rewritten when something changed."""
    config = load_config(config_path)
    modified = False
    if default_output:
        config.default_output = default_output
        modified = True
    if report_mode:
        config.report_mode = validate_report_mode(report_mode)
        modified = True
    if modified:
        save_config(config, config_path)
    return config
