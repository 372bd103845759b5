from __future__ import annotations

"""Configuration loading and access helpers.

Each section (``editor``, ``logging``) is a YAML file shipped in this package.
A file of the same name in the user directory is merged over it key by key.
The user directory is ``SVG_INSPECTOR_CONFIG_DIR`` when set, otherwise
``~/.svg_inspector``.
"""

import importlib.resources as pkg_resources
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager"]

SECTIONS = {
    "editor": "editor.yml",
    "logging": "logging.yml",
}


def user_config_dir() -> Path:
    override = os.environ.get("SVG_INSPECTOR_CONFIG_DIR")
    return Path(override) if override else Path.home() / ".svg_inspector"


def _read_mapping(text: str) -> Dict[str, Any]:
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"expected a mapping, got {type(data).__name__}")
    return data


def _load_section(filename: str, user_dir: Path) -> Tuple[Dict[str, Any], str]:
    """Return the merged mapping for one section and a short status word."""
    merged: Dict[str, Any] = {}
    try:
        packaged = pkg_resources.files(__package__).joinpath(filename).read_text(encoding="utf-8")
        merged.update(_read_mapping(packaged))
        status = "loaded"
    except (OSError, yaml.YAMLError) as exc:
        logger.error("Invalid packaged config %s: %s", filename, exc)
        status = "invalid"

    user_path = user_dir / filename
    if user_path.exists():
        try:
            merged.update(_read_mapping(user_path.read_text(encoding="utf-8")))
            status += "+overrides"
        except (OSError, yaml.YAMLError) as exc:
            logger.error("Could not parse user config %s: %s", user_path, exc)
    return merged, status


class ConfigManager:
    """Process-wide access to the configuration sections.

    ``ConfigManager()`` always returns the same instance; :meth:`reset` drops
    it so the next call reads the files again.
    """

    _instance: Optional[ConfigManager] = None
    _data: Dict[str, Dict[str, Any]]

    def __new__(cls) -> ConfigManager:
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._data = {}
            user_dir = user_config_dir()
            summary = []
            for key, filename in SECTIONS.items():
                instance._data[key], status = _load_section(filename, user_dir)
                summary.append(f"{key}: {status}")
            logger.info("Config startup: %s", " | ".join(summary))
            cls._instance = instance
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    def get_editor_config(self) -> Dict[str, Any]:
        return self._data.get("editor", {})

    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})
