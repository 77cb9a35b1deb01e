"""Configuration — search roots, editor and scan settings persisted as TOML."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from typing import Any, Optional

import tomli_w

from quickproj.markers import DEFAULT_EXCLUDE_DIRS, DEFAULT_MARKERS

logger = logging.getLogger(__name__)

APP_NAME = "quickproj"
CONFIG_FILE_NAME = "config.toml"
DEFAULT_MAX_DEPTH = 4
DEFAULT_EDITOR = "code"


class ConfigurationError(ValueError):
    """Invalid configuration: unreadable file, wrong types, bad root path."""


def expand_path(path: str | os.PathLike[str]) -> str:
    """Expand a leading ~ to the user's home directory."""
    return os.path.expanduser(os.fspath(path))


def config_path() -> str:
    """Location of the config file.

    $QUICKPROJ_CONFIG wins; otherwise the file lives under
    $XDG_CONFIG_HOME (default ~/.config).
    """
    override = os.environ.get("QUICKPROJ_CONFIG")
    if override:
        return expand_path(override)
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, APP_NAME, CONFIG_FILE_NAME)


def _string_list(data: dict[str, Any], key: str, default: list[str], source: str) -> list[str]:
    value = data.get(key, default)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"'{key}' must be a list of strings in {source}")
    return list(value)


@dataclass
class Config:
    root_paths: list[str] = field(default_factory=list)
    editor: Optional[str] = None
    max_depth: int = DEFAULT_MAX_DEPTH
    project_markers: list[str] = field(default_factory=lambda: list(DEFAULT_MARKERS))
    exclude_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<config>") -> "Config":
        """Build a Config from parsed TOML, filling missing keys with defaults."""
        editor = data.get("editor")
        if editor is not None and not isinstance(editor, str):
            raise ConfigurationError(f"'editor' must be a string in {source}")

        max_depth = data.get("max_depth", DEFAULT_MAX_DEPTH)
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
            raise ConfigurationError(f"'max_depth' must be a non-negative integer in {source}")

        return cls(
            root_paths=_string_list(data, "root_paths", [], source),
            editor=editor,
            max_depth=max_depth,
            project_markers=_string_list(data, "project_markers", list(DEFAULT_MARKERS), source),
            exclude_dirs=_string_list(data, "exclude_dirs", list(DEFAULT_EXCLUDE_DIRS), source),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"root_paths": list(self.root_paths)}
        if self.editor is not None:
            data["editor"] = self.editor
        data["max_depth"] = self.max_depth
        data["project_markers"] = list(self.project_markers)
        data["exclude_dirs"] = list(self.exclude_dirs)
        return data

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Read the config file. A missing file yields the defaults."""
        path = path or config_path()
        if not os.path.exists(path):
            logger.debug("No config file at %s, using defaults", path)
            return cls()

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Failed to parse config file {path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read config file {path}: {e}") from e

        return cls.from_dict(data, source=path)

    def save(self, path: Optional[str] = None) -> str:
        """Write the config file, creating its directory. Returns the path written."""
        path = path or config_path()
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "wb") as f:
                tomli_w.dump(self.to_dict(), f)
        except OSError as e:
            raise ConfigurationError(f"Failed to write config file {path}: {e}") from e
        logger.debug("Saved config to %s", path)
        return path

    def add_root_path(self, path: str | os.PathLike[str]) -> bool:
        """Register a search root. False if it was already registered."""
        expanded = expand_path(path)
        if not os.path.isdir(expanded):
            raise ConfigurationError(f"Path does not exist or is not a directory: {expanded}")

        canonical = os.path.realpath(expanded)
        if canonical in self.root_paths:
            return False

        self.root_paths.append(canonical)
        return True

    def remove_root_path(self, path: str | os.PathLike[str]) -> bool:
        """Unregister a search root. False if it wasn't registered."""
        expanded = expand_path(path)
        target = os.path.realpath(expanded) if os.path.exists(expanded) else os.path.abspath(expanded)

        before = len(self.root_paths)
        self.root_paths = [p for p in self.root_paths if p != target]
        return len(self.root_paths) < before

    def set_editor(self, editor: str) -> None:
        self.editor = editor

    def get_editor(self, cli_editor: Optional[str] = None) -> str:
        """Editor to use: CLI option, then config, then $EDITOR, then 'code'."""
        if cli_editor:
            return cli_editor
        if self.editor:
            return self.editor
        env_editor = os.environ.get("EDITOR")
        if env_editor:
            return env_editor
        return DEFAULT_EDITOR
