"""Configuration management for autotagger.

Configuration is read once at process start from the environment (and an
optional config file in the repository) into an immutable ``AppConfig``
that is passed explicitly to whatever needs it.
"""

from __future__ import annotations

import configparser
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from autotagger.errors import ConfigError

# Special code GitHub Actions used to treat as "neutral": no error, but stop
EX_CONFIG = 78
FATAL_EXIT = 1

CONFIG_FILE_NAMES = ("autotagger.ini", ".autotagger.yml", ".autotagger.yaml")
INI_SECTION = "autotagger"

# Environment variable -> (section, key)
_ENV_KEYS: dict[str, tuple[str, str]] = {
    "TAG_PREFIX": ("tagging", "tag_prefix"),
    "FILE_REGEXP": ("tagging", "file_regexp"),
    "BUILD_METADATA": ("tagging", "build_metadata"),
    "NO_EX_CONFIG": ("exits", "no_ex_config"),
    "NEVER_FAIL": ("exits", "never_fail"),
    "GITHUB_TOKEN": ("github", "token"),
    "GITHUB_API_URL": ("github", "api_url"),
    "GITHUB_TIMEOUT": ("github", "timeout"),
    "GITHUB_EVENT_NAME": ("github", "event_name"),
    "GITHUB_EVENT_PATH": ("github", "event_path"),
}

_BOOL_KEYS = frozenset({"build_metadata", "no_ex_config", "never_fail"})

# Regex values keep their `$` anchors; no env expansion
_UNEXPANDED_KEYS = frozenset({"file_regexp"})

# Keys a config file may set; credentials and the trigger stay in the environment
_FILE_KEYS: dict[str, str] = {
    "tag_prefix": "tagging",
    "file_regexp": "tagging",
    "build_metadata": "tagging",
    "no_ex_config": "exits",
    "never_fail": "exits",
}


class ExitCodes(BaseModel):
    """Process exit codes for the three possible outcomes."""

    success: int = 0
    no_op: int = EX_CONFIG
    failure: int = FATAL_EXIT

    model_config = {"frozen": True}


class ExitConfig(BaseModel):
    """Exit status overrides."""

    no_ex_config: bool = False  # Return success instead of EX_CONFIG
    never_fail: bool = False  # Return the no-op code instead of failing

    model_config = {"frozen": True}

    @property
    def codes(self) -> ExitCodes:
        """Get the exit codes these overrides produce."""
        no_op = 0 if self.no_ex_config else EX_CONFIG
        failure = no_op if self.never_fail else FATAL_EXIT
        return ExitCodes(no_op=no_op, failure=failure)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ExitConfig:
        """Build exit overrides from the environment alone.

        Used when the full configuration cannot be loaded, so that the
        failure still honours NEVER_FAIL and NO_EX_CONFIG.
        """
        if environ is None:
            environ = os.environ
        return cls(
            no_ex_config=_parse_bool(environ.get("NO_EX_CONFIG", "")),
            never_fail=_parse_bool(environ.get("NEVER_FAIL", "")),
        )


class TaggingConfig(BaseModel):
    """How tags are matched and named."""

    tag_prefix: str = ""
    file_regexp: str = ".*"
    build_metadata: bool = False  # v1.2.3+date.sha instead of {prefix}v1.2.3

    model_config = {"frozen": True}

    @field_validator("file_regexp")
    @classmethod
    def _check_regexp(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid FILE_REGEXP {value!r}: {e}") from e
        return value

    @property
    def file_pattern(self) -> re.Pattern[str]:
        """Get the compiled file pattern."""
        return re.compile(self.file_regexp)

    @property
    def gated(self) -> bool:
        """Check if tagging depends on which files changed."""
        return not self.build_metadata


class GitHubConfig(BaseModel):
    """GitHub API access and the triggering event."""

    token: str | None = None
    api_url: str = "https://api.github.com"
    timeout: float = 30.0
    event_name: str | None = None
    event_path: Path | None = None

    model_config = {"frozen": True}


class AppConfig(BaseModel):
    """Application configuration."""

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    tagging: TaggingConfig = Field(default_factory=TaggingConfig)
    exits: ExitConfig = Field(default_factory=ExitConfig)

    model_config = {"frozen": True}

    @property
    def exit_codes(self) -> ExitCodes:
        return self.exits.codes


def get_config_paths(environ: Mapping[str, str] | None = None) -> list[Path]:
    """Get list of config file paths to search, in priority order.

    Search order:
    1. The checked-out repository (``GITHUB_WORKSPACE``)
    2. Current working directory

    Returns:
        List of paths to check for config files.
    """
    if environ is None:
        environ = os.environ

    dirs = []
    workspace = environ.get("GITHUB_WORKSPACE")
    if workspace:
        dirs.append(Path(workspace))
    cwd = Path.cwd()
    if cwd not in dirs:  # Avoid duplicates
        dirs.append(cwd)

    return [d / name for d in dirs for name in CONFIG_FILE_NAMES]


def find_config_file(environ: Mapping[str, str] | None = None) -> Path | None:
    """Find the first existing config file.

    Returns:
        Path to config file if found, None otherwise.
    """
    for path in get_config_paths(environ):
        if path.exists():
            return path
    return None


def _expand_env_vars(value: Any, environ: Mapping[str, str] | None = None) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and $VAR syntax.

    Args:
        value: Config value (string, dict, list, or other).
        environ: Variables to expand from. Defaults to os.environ.

    Returns:
        Value with environment variables expanded.
    """
    if environ is None:
        environ = os.environ

    if isinstance(value, str):
        # Pattern matches ${VAR} or $VAR
        pattern = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")

        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1) or match.group(2)
            return environ.get(var_name, "")

        return pattern.sub(replace, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v, environ) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item, environ) for item in value]
    return value


def _parse_bool(value: str | bool | int) -> bool:
    """Parse a boolean value from a string or a YAML scalar.

    Args:
        value: Value to parse (true/false/yes/no/1/0/on/off).

    Returns:
        Boolean value.
    """
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "yes", "1", "on")


def _load_ini_config(path: Path) -> dict[str, Any]:
    """Load the ``[autotagger]`` section of an INI file."""
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(path, encoding="utf-8")
    except configparser.Error as e:
        raise ConfigError(f"could not parse {path}: {e}") from e

    if not parser.has_section(INI_SECTION):
        return {}
    return dict(parser.items(INI_SECTION))


def _load_yaml_config(path: Path) -> dict[str, Any]:
    """Load top-level keys of a YAML file."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"could not parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of settings")
    return data


def _load_file_settings(path: Path, environ: Mapping[str, str]) -> dict[str, dict[str, Any]]:
    """Load a config file into the AppConfig section layout."""
    if path.suffix in (".ini", ".cfg"):
        raw = _load_ini_config(path)
    else:
        raw = _load_yaml_config(path)

    raw = {
        key: value if key in _UNEXPANDED_KEYS else _expand_env_vars(value, environ)
        for key, value in raw.items()
    }

    settings: dict[str, dict[str, Any]] = {}
    for key, value in raw.items():
        section = _FILE_KEYS.get(key)
        if section is None or value is None:
            continue
        if key in _BOOL_KEYS:
            value = _parse_bool(value)
        settings.setdefault(section, {})[key] = value
    return settings


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """Build the configuration for one run.

    File values are applied first; environment variables that are set and
    non-empty take precedence.

    Args:
        path: Explicit config file. If None, searches default locations.
        environ: Environment to read. Defaults to os.environ.

    Returns:
        The immutable configuration.

    Raises:
        ConfigError: If the file or a value is invalid.
    """
    if environ is None:
        environ = os.environ

    if path is None:
        path = find_config_file(environ)

    settings: dict[str, dict[str, Any]] = {}
    if path is not None and path.exists():
        settings = _load_file_settings(path, environ)

    for var, (section, key) in _ENV_KEYS.items():
        value = environ.get(var)
        if not value:
            continue
        settings.setdefault(section, {})[key] = _parse_bool(value) if key in _BOOL_KEYS else value

    try:
        return AppConfig.model_validate(settings)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}") from e


def save_default_config(path: Path | None = None, tag_prefix: str = "") -> Path:
    """Save a default INI config file.

    Args:
        path: Where to save. Defaults to ./autotagger.ini.
        tag_prefix: Initial tag prefix.

    Returns:
        Path to saved config file.
    """
    if path is None:
        path = Path.cwd() / "autotagger.ini"

    default_config = f"""\
# autotagger configuration
# Environment variables (TAG_PREFIX, FILE_REGEXP, ...) override these values.
# You can use environment variables with ${{VAR}} syntax.

[autotagger]
# Prefix for tag names, e.g. "tools/" for a Go module in a subdirectory
tag_prefix = {tag_prefix}
# Only tag when files changed since the last tag match this regex
file_regexp = .*
# Tag as v1.2.3+YYYY-MM-DD.<sha> instead of <prefix>v1.2.3 (disables file_regexp)
build_metadata = false
# Exit 0 instead of 78 when there is nothing to do
no_ex_config = false
# Exit with the "nothing to do" code instead of failing
never_fail = false
"""

    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(default_config)

    return path
