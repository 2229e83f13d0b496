"""Pipeline settings for Blogship.

Settings are read from an optional blogship.yaml at the project root and may be
overridden from the command line. Every value has a default matching a plain
Hugo blog whose rendered site lives in public/ and is published to the master
branch of origin.

Key objects:
- Settings: Immutable settings for one pipeline invocation.
- load_settings: Load blogship.yaml and apply overrides.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "blogship.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "generator": "hugo",
    "generator_args": [],
    "server_args": ["server"],
    "output_dir": "public",
    "git": "git",
    "remote": "origin",
    "branch": "master",
    "message": "Rebuild site ({timestamp})",
}

_LIST_KEYS = ("generator_args", "server_args")


class ConfigError(Exception):
    """Raised when blogship.yaml or an override holds an unusable value.

    Attributes:
        key: Name of the offending setting.
        message: Human-readable error message.
    """

    def __init__(self, key: str, message: str):
        self.key = key
        self.message = message
        super().__init__(f"{key}: {message}")


@dataclass(frozen=True)
class Settings:
    """Settings for one pipeline invocation.

    Attributes:
        generator: Generator executable name or path.
        generator_args: Arguments passed to the generator for a build.
        server_args: Arguments that put the generator in preview-server mode.
        output_dir: Output tree, relative to the project root.
        git: Git executable name or path.
        remote: Remote the output tree is pushed to.
        branch: Hosting branch on the remote.
        message: Commit message template with a {timestamp} placeholder.
    """

    generator: str = DEFAULT_CONFIG["generator"]
    generator_args: tuple[str, ...] = ()
    server_args: tuple[str, ...] = ("server",)
    output_dir: str = DEFAULT_CONFIG["output_dir"]
    git: str = DEFAULT_CONFIG["git"]
    remote: str = DEFAULT_CONFIG["remote"]
    branch: str = DEFAULT_CONFIG["branch"]
    message: str = DEFAULT_CONFIG["message"]

    def output_path(self, project_root: Path) -> Path:
        return project_root / self.output_dir


def load_settings(
    project_root: Path, overrides: dict[str, Any] | None = None
) -> Settings:
    """Load settings from blogship.yaml and apply overrides.

    Args:
        project_root: Root directory of the blog.
        overrides: Values that take precedence over the file (typically CLI
            options). Keys whose value is None are ignored.

    Returns:
        Validated Settings.

    Raises:
        ConfigError: If blogship.yaml is not valid YAML, a value has the wrong
            type or the message template lacks a {timestamp} placeholder.
    """
    config = DEFAULT_CONFIG.copy()
    config_path = project_root / CONFIG_FILENAME
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(CONFIG_FILENAME, str(exc)) from exc
            if isinstance(loaded, dict):
                config.update(loaded)
    if overrides:
        config.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(Settings)}
    values: dict[str, Any] = {}
    for key in known:
        value = config[key]
        if key in _LIST_KEYS:
            values[key] = _as_args(key, value)
        else:
            if not isinstance(value, (str, int)) or isinstance(value, bool):
                raise ConfigError(key, f"expected a string, got {type(value).__name__}")
            values[key] = str(value)
            if not values[key]:
                raise ConfigError(key, "must not be empty")

    if "{timestamp}" not in values["message"]:
        raise ConfigError("message", "template must contain a {timestamp} placeholder")
    return replace(Settings(), **values)


def _as_args(key: str, value: Any) -> tuple[str, ...]:
    """Normalize an argument list given as a YAML list or a shell-style string."""
    if value is None:
        return ()
    if isinstance(value, str):
        try:
            return tuple(shlex.split(value))
        except ValueError as exc:
            raise ConfigError(key, str(exc)) from exc
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value)
    raise ConfigError(key, f"expected a list or string, got {type(value).__name__}")
