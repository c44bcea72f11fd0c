"""Resolve a :class:`GelfConfig` from files, the environment and overrides.

Every source yields a flat mapping of :class:`GelfConfig` field names.
Sources are applied in increasing precedence:

1. ``gelfudp.toml`` / ``gelfudp.yaml`` / ``gelfudp.yml`` in the user config dir
2. the same files in the working directory
3. ``[tool.gelfudp]`` in ``./pyproject.toml``
4. ``GELFUDP__<FIELD>`` environment variables
5. explicit overrides

Unknown keys in files or overrides raise :class:`ConfigurationError`;
unknown environment variables are logged and skipped.
"""

from __future__ import annotations

import importlib
import json
import logging
import os
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Mapping

from platformdirs import user_config_dir

from ..core.errors import ConfigurationError
from .schema import DEFAULT_CONFIG, GelfConfig, build_config, default_config

try:  # pragma: no cover
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

try:  # pragma: no cover
    yaml_module = importlib.import_module("yaml")
except ModuleNotFoundError:  # pragma: no cover
    yaml_module = None

yaml: ModuleType | None = yaml_module

logger = logging.getLogger(__name__)

ENV_PREFIX = "GELFUDP__"
CONFIG_FILENAMES = ("gelfudp.toml", "gelfudp.yaml", "gelfudp.yml")
KNOWN_KEYS = frozenset(DEFAULT_CONFIG)


def _read_file(path: Path) -> Mapping[str, Any]:
    if not path.is_file():
        return {}
    if path.suffix == ".toml":
        with path.open("rb") as fh:
            return tomllib.load(fh)
    if yaml is None:
        logger.warning("Ignoring %s: PyYAML is not installed", path)
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"{path} must contain a mapping of settings")
    return data


def _checked(source: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    settings = {str(key): value for key, value in data.items()}
    unknown = sorted(set(settings) - KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown setting(s) in {source}: {', '.join(unknown)}")
    return settings


def _directory_settings(directory: Path) -> Dict[str, Any]:
    settings: Dict[str, Any] = {}
    for filename in CONFIG_FILENAMES:
        path = directory / filename
        settings.update(_checked(str(path), _read_file(path)))
    return settings


def _pyproject_settings() -> Dict[str, Any]:
    path = Path("pyproject.toml")
    if not path.is_file():
        return {}
    tool = _read_file(path).get("tool", {})
    section = tool.get("gelfudp", {}) if isinstance(tool, Mapping) else {}
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"[tool.gelfudp] in {path} must be a table")
    return _checked(f"{path} [tool.gelfudp]", section)


def _coerce_value(value: str) -> Any:
    stripped = value.strip()
    lowered = stripped.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    try:
        return int(stripped)
    except ValueError:
        pass
    if stripped.startswith("["):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass
    return stripped


def _env_settings() -> Dict[str, Any]:
    settings: Dict[str, Any] = {}
    for env_key, raw_value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        key = env_key[len(ENV_PREFIX) :].lower()
        if key not in KNOWN_KEYS:
            logger.warning("Ignoring %s: not a gelfudp setting", env_key)
            continue
        settings[key] = _coerce_value(raw_value)
    return settings


def load_configuration(overrides: Mapping[str, Any] | None = None) -> GelfConfig:
    """Load configuration from supported sources in precedence order."""

    settings = default_config()
    settings.update(_directory_settings(Path(user_config_dir("gelfudp"))))
    settings.update(_directory_settings(Path.cwd()))
    settings.update(_pyproject_settings())
    settings.update(_env_settings())
    settings.update(_checked("overrides", overrides or {}))
    return build_config(settings)
