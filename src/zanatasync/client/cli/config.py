"""Configuration utilities for the zanata-sync CLI.

This module provides shared configuration functions used across CLI commands:
the project configuration file, option defaults, locale function loading and
the "current" version alias.
"""

from __future__ import annotations

import importlib
import json
import re
import tomllib
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from zanatasync.client.sync.locale import LocaleFunction
from zanatasync.client.sync.types import ConfigurationError

DEFAULT_TRANSLATION_FOLDER = "./translations"
DEFAULT_TMP_DIR = "./tmp/.zanata"
DEFAULT_LOCALES = ("en",)
DEFAULT_EXCLUDE_FILES = ("excluded.pot",)
DEFAULT_PUSH_TYPE = "both"
DEFAULT_PULL_TYPE = "trans"
DEFAULT_TRY_COUNT = 4

CURRENT_VERSION_ALIAS = "current"

# Options that accept several values
MULTIPLE_OPTIONS = ("locales", "exclude_files")


def get_config_file(root: Path | None = None) -> Path:
    """Get the path to the project configuration file.

    Returns:
        Path to config/zanata.json in the project root.
    """
    return (root or Path.cwd()) / "config" / "zanata.json"


def normalize_key(key: str) -> str:
    """Turn camelCase or dash-case keys into option names (snake_case)."""
    key = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key)
    return key.replace("-", "_").lower()


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load the project configuration file.

    Args:
        path: Explicit file; when omitted, config/zanata.json is used if present.

    Returns:
        Settings keyed by option name. Empty when there is no file.

    Raises:
        ConfigurationError: If an explicit file is missing or a file is not valid JSON.
    """
    config_file = path or get_config_file()
    if not config_file.exists():
        if path is not None:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        return {}

    try:
        data = json.loads(config_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid configuration file {config_file}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {config_file} must hold an object")

    config: dict[str, Any] = {}
    for key, value in data.items():
        name = normalize_key(key)
        if name in MULTIPLE_OPTIONS and isinstance(value, str):
            value = [value]
        config[name] = value
    return config


def build_default_map(config: dict[str, Any], commands: Iterable[str]) -> dict[str, Any]:
    """Use the same settings as defaults for every command."""
    return {name: dict(config) for name in commands}


def split_values(values: Iterable[str]) -> list[str]:
    """Flatten repeated and comma-separated option values."""
    result: list[str] = []
    for value in values:
        result.extend(v.strip() for v in value.split(",") if v.strip())
    return result


def load_locale_function(path: str | None) -> LocaleFunction | None:
    """Import a locale function given as "package.module:function".

    Raises:
        ConfigurationError: If the path is malformed or cannot be imported.
    """
    if not path:
        return None

    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(
            f"Locale function must look like 'package.module:function', got '{path}'"
        )
    try:
        module = importlib.import_module(module_name)
        func = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Could not load locale function '{path}': {e}") from e
    if not callable(func):
        raise ConfigurationError(f"Locale function '{path}' is not callable")
    result: LocaleFunction = func
    return result


def get_current_version(root: Path | None = None) -> str | None:
    """Read the version of the project in the working directory.

    Looks at pyproject.toml ([project] or [tool.poetry]) first, then
    package.json.

    Returns:
        The version, or None if none is declared.
    """
    root = root or Path.cwd()

    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        try:
            data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError:
            data = {}
        version = data.get("project", {}).get("version") or (
            data.get("tool", {}).get("poetry", {}).get("version")
        )
        if version:
            return str(version)

    package_json = root / "package.json"
    if package_json.is_file():
        try:
            version = json.loads(package_json.read_text(encoding="utf-8")).get("version")
        except (json.JSONDecodeError, AttributeError):
            return None
        return str(version) if version else None

    return None


def resolve_version(version: str) -> str:
    """Resolve the "current" alias to the project version.

    Raises:
        ConfigurationError: If the alias cannot be resolved.
    """
    if version != CURRENT_VERSION_ALIAS:
        return version
    current = get_current_version()
    if not current:
        raise ConfigurationError(
            "Could not resolve the 'current' version: no version in pyproject.toml or package.json."
        )
    return current
