"""Middleware options — defaults, mapping conversion, and YAML loading.

Options may be given with the camelCase names used by pipeline configs
(``jsonRegex``, ``escapeRegex``, ...) or their snake_case field names.

Environment variables:
    COMMON_MIDDLEWARE_CONFIG — YAML options file read by ``load_options``
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from common_middleware.errors import ConfigError

CONFIG_ENV = "COMMON_MIDDLEWARE_CONFIG"

DEFAULT_JSON_REGEX = r"\.(json|jshintrc)$"
DEFAULT_EXT_REGEX = r"\.(md|tmpl)$"

UNESCAPE_PHASES = ("postRender", "preWrite")

# camelCase option name → dataclass field
_ALIASES = {
    "jsonRegex": "json_regex",
    "extRegex": "ext_regex",
    "escapeRegex": "escape_regex",
    "configName": "config_name",
    "unescapePhase": "unescape_phase",
    "frontMatter": "front_matter",
}


def _compile(value: str | re.Pattern, name: str) -> re.Pattern:
    if isinstance(value, re.Pattern):
        return value
    if not isinstance(value, str):
        raise ConfigError(f"'{name}' must be a regex string, got {type(value).__name__}")
    try:
        return re.compile(value)
    except re.error as e:
        raise ConfigError(f"'{name}' is not a valid regex: {e}") from e


@dataclass
class MiddlewareOptions:
    """Path patterns and switches controlling which handlers run where."""

    json_regex: str | re.Pattern = DEFAULT_JSON_REGEX
    ext_regex: str | re.Pattern = DEFAULT_EXT_REGEX
    escape_regex: str | re.Pattern | None = None
    config_name: str | None = None
    unescape_phase: str = "postRender"
    front_matter: bool = True

    json_pattern: re.Pattern = field(init=False, repr=False)
    ext_pattern: re.Pattern = field(init=False, repr=False)
    escape_pattern: re.Pattern = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.unescape_phase not in UNESCAPE_PHASES:
            raise ConfigError(
                f"'unescape_phase' must be one of {', '.join(UNESCAPE_PHASES)}, "
                f"got '{self.unescape_phase}'"
            )
        self.json_pattern = _compile(self.json_regex, "json_regex")
        self.ext_pattern = _compile(self.ext_regex, "ext_regex")
        if self.escape_regex is None:
            self.escape_pattern = self.ext_pattern
        else:
            self.escape_pattern = _compile(self.escape_regex, "escape_regex")


def options_from_mapping(mapping: dict[str, Any] | None) -> MiddlewareOptions:
    """Build options from a plain mapping.

    Args:
        mapping: Option names (camelCase or snake_case) to values.

    Returns:
        Validated MiddlewareOptions.

    Raises:
        ConfigError: On an unknown key or an invalid value.
    """
    if not mapping:
        return MiddlewareOptions()
    known = {f.name for f in fields(MiddlewareOptions) if f.init}
    kwargs: dict[str, Any] = {}
    for key, value in mapping.items():
        name = _ALIASES.get(key, key)
        if name not in known:
            raise ConfigError(f"Unknown option '{key}'")
        kwargs[name] = value
    return MiddlewareOptions(**kwargs)


def load_options(path: Path | str | None = None) -> MiddlewareOptions:
    """Load options from a YAML file.

    Args:
        path: Options file. Defaults to $COMMON_MIDDLEWARE_CONFIG; when
            neither is set, the defaults are returned.

    Returns:
        Validated MiddlewareOptions.
    """
    raw = path or os.environ.get(CONFIG_ENV)
    if not raw:
        return MiddlewareOptions()

    config_path = Path(raw)
    with open(config_path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Options file {config_path} is not valid YAML: {e}") from e

    if data is None:
        return MiddlewareOptions()
    if not isinstance(data, dict):
        raise ConfigError(f"Options file {config_path} is not a YAML mapping")

    return options_from_mapping(data)
