# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Construction of configuration layers from files and environment variables.

A layer is one source of nested key/value data, built fresh for every load
and never cached. There are two kinds:

File Layer:
    The format is chosen from the file extension (case-sensitive):

    - .json -> JSON
    - .yaml, .yml -> YAML
    - .toml -> TOML
    - .ini -> INI
    - anything else, or no extension -> YAML

    There is no content sniffing. INI keys that appear before the first
    section header become top-level keys; every section becomes a nested
    mapping. INI values stay strings and are converted during decoding.

Environment Layer:
    Built from a snapshot of the process environment. A variable named
    ``PREFIX__DB__HOST`` (prefix "PREFIX", separator "__") contributes the
    key path ``db.host``. Segments are lower-cased so they line up with
    file keys. Values go through a coercion ladder (bool, int, float,
    then string). The uncoerced strings are kept alongside, so a string
    field set to "12345" or "true" still decodes as that string.

Error Handling:
    - ConfigFileNotFoundError: The declared file does not exist
    - EnvPrefixNotFoundError: No variable starts with the prefix
    - ConfigLoadError: Unreadable file, parse error, or non-mapping top level

Example:
    ```python
    from pathlib import Path
    from dumbo_config.models import EnvConfig, LoadingParam
    from dumbo_config.sources import build_layers

    layers = build_layers(
        LoadingParam(file=Path("settings.toml"), env_prefix=EnvConfig("MYAPP")),
        environ={"MYAPP__DB__PORT": "5433"},
    )
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
import configparser
from dataclasses import dataclass, field
from enum import Enum
import json
import os
from pathlib import Path
import re
import tomllib
from typing import Any

import yaml

from dumbo_config.exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    EnvPrefixNotFoundError,
)
from dumbo_config.logging import Logger, get_global_logger, log_yaml_content
from dumbo_config.models import EnvConfig, LoadingParam

# Holds keys written before the first section header; the NUL keeps it apart
# from any section name a user can write
_INI_ROOT_SECTION = "\x00root"
_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)(?:[eE][+-]?[0-9]+)?")

# -------------------------------
# Data types
# -------------------------------


class FileFormat(str, Enum):
    """Supported configuration file formats."""

    JSON = "json"
    YAML = "yaml"
    TOML = "toml"
    INI = "ini"


class LayerKind(int, Enum):
    """Layer kinds, valued by merge priority (higher wins)."""

    FILE = 0
    ENV = 1


@dataclass(frozen=True)
class ConfigLayer:
    """One source of configuration data prior to merging.

    Attributes:
        name: Human-readable origin (file path or env prefix).
        kind: Whether the layer is file- or environment-backed.
        format: Parsing strategy for file layers; None for env layers.
        data: The nested key tree read from the source.
        raw: For env layers, the same tree holding the uncoerced strings.
            Decoding falls back to these where a string field received a
            coerced bool or number.
    """

    name: str
    kind: LayerKind
    format: FileFormat | None = None
    data: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)


# -------------------------------
# File layer
# -------------------------------

_EXTENSION_FORMATS: dict[str, FileFormat] = {
    ".json": FileFormat.JSON,
    ".yaml": FileFormat.YAML,
    ".yml": FileFormat.YAML,
    ".toml": FileFormat.TOML,
    ".ini": FileFormat.INI,
}


def get_file_format(path: Path) -> FileFormat:
    """Returns the file format implied by the extension, YAML by default."""
    return _EXTENSION_FORMATS.get(path.suffix, FileFormat.YAML)


def _parse_ini(text: str) -> dict[str, Any]:
    """Parses INI text, keeping keys before the first section at the top level.

    A synthetic header line is prepended for those keys, so line numbers in
    configparser's error messages are one higher than in the file.
    """
    parser = configparser.ConfigParser(
        interpolation=None, default_section="\x00defaults"
    )
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    parser.read_string(f"[{_INI_ROOT_SECTION}]\n{text}")

    data: dict[str, Any] = dict(parser.items(_INI_ROOT_SECTION))
    for section in parser.sections():
        if section == _INI_ROOT_SECTION:
            continue
        data[section] = dict(parser.items(section))
    return data


def _parse_file(path: Path, fmt: FileFormat) -> Any:
    text = path.read_text(encoding="utf-8")
    if fmt is FileFormat.JSON:
        return json.loads(text)
    if fmt is FileFormat.TOML:
        return tomllib.loads(text)
    if fmt is FileFormat.INI:
        return _parse_ini(text)
    data = yaml.safe_load(text)
    # An empty YAML document is an empty configuration
    return {} if data is None else data


def build_file_layer(path: Path, logger: Logger | None = None) -> ConfigLayer:
    """Reads a configuration file into a layer.

    Args:
        path: Path to the configuration file.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        A file layer holding the parsed key tree.

    Raises:
        ConfigFileNotFoundError: If the path does not exist.
        ConfigLoadError: If the file cannot be read or parsed, or its top
            level is not a mapping.
    """
    if logger is None:
        logger = get_global_logger()

    if not path.exists():
        raise ConfigFileNotFoundError(path)

    fmt = get_file_format(path)
    logger.verbose("FILE", f"Reading {path} as {fmt.value.upper()}")

    try:
        data = _parse_file(path, fmt)
    except (
        OSError,
        UnicodeDecodeError,
        yaml.YAMLError,
        json.JSONDecodeError,
        tomllib.TOMLDecodeError,
        configparser.Error,
    ) as err:
        raise ConfigLoadError(f"Error parsing {path}: {err}", err) from err

    if not isinstance(data, dict):
        raise ConfigLoadError(
            f"top-level {fmt.value.upper()} must be a mapping, "
            f"got {type(data).__name__}: {path}"
        )

    logger.debug("FILE", f"--- Content from {path.name} ---")
    log_yaml_content(logger, "FILE", data)
    return ConfigLayer(name=str(path), kind=LayerKind.FILE, format=fmt, data=data)


# -------------------------------
# Environment layer
# -------------------------------


def snapshot_environ() -> dict[str, str]:
    """Returns a point-in-time copy of the process environment."""
    return dict(os.environ)


def coerce_env_value(raw: str) -> bool | int | float | str:
    """Applies the coercion ladder to an environment variable value.

    Tries, in order: boolean ("true"/"false", any case), integer, float.
    Falls back to the original string.
    """
    lowered = raw.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if _INT_RE.fullmatch(raw):
        return int(raw)
    if _FLOAT_RE.fullmatch(raw):
        return float(raw)
    return raw


def _set_path(tree: dict[str, Any], path: list[str], value: Any) -> None:
    cur = tree
    for segment in path[:-1]:
        nxt = cur.get(segment)
        if not isinstance(nxt, dict):
            # A deeper key replaces a scalar at an intermediate segment
            nxt = {}
            cur[segment] = nxt
        cur = nxt
    cur[path[-1]] = value


def env_key_path(key: str, env_config: EnvConfig) -> list[str]:
    """Splits a prefixed variable name into lower-cased key segments.

    ``env_key_path("MYAPP__DB__HOST", EnvConfig("MYAPP"))`` returns
    ``["db", "host"]``. Empty segments are dropped.
    """
    remainder = key[len(env_config.key_prefix) :]
    return [p.lower() for p in remainder.split(env_config.get_separator()) if p]


def build_env_layer(
    env_config: EnvConfig,
    environ: Mapping[str, str],
    logger: Logger | None = None,
) -> ConfigLayer:
    """Builds a layer from the variables under an environment prefix.

    Args:
        env_config: Prefix and separator to use.
        environ: Snapshot of the environment to read from.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        An environment layer with coerced values.

    Raises:
        EnvPrefixNotFoundError: If no variable starts with the prefix.
    """
    if logger is None:
        logger = get_global_logger()

    prefix = env_config.name
    if not any(key.startswith(prefix) for key in environ):
        raise EnvPrefixNotFoundError(prefix)

    key_prefix = env_config.key_prefix
    data: dict[str, Any] = {}
    raw: dict[str, Any] = {}
    for key in sorted(environ):
        if not key.startswith(key_prefix):
            continue
        path = env_key_path(key, env_config)
        if not path:
            logger.debug("ENV", f"Skipping {key}: no key after prefix")
            continue
        _set_path(data, path, coerce_env_value(environ[key]))
        _set_path(raw, path, environ[key])
        logger.verbose("ENV", f"{key} -> {'.'.join(path)}")

    logger.debug("ENV", f"--- Content from {key_prefix}* ---")
    log_yaml_content(logger, "ENV", data)
    return ConfigLayer(name=key_prefix, kind=LayerKind.ENV, data=data, raw=raw)


# -------------------------------
# Public API
# -------------------------------


def build_layers(
    param: LoadingParam,
    environ: Mapping[str, str] | None = None,
    logger: Logger | None = None,
) -> list[ConfigLayer]:
    """Builds every layer requested by ``param``, file layer first.

    Args:
        param: Validated loading parameters.
        environ: Environment snapshot. Defaults to a copy of os.environ.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        The ordered list of layers (one or two entries).

    Raises:
        ConfigFileNotFoundError: If the declared file is missing.
        EnvPrefixNotFoundError: If the prefix matches no variable.
        ConfigLoadError: If the file cannot be parsed.
    """
    layers: list[ConfigLayer] = []
    if param.file is not None:
        layers.append(build_file_layer(param.file, logger))
    if param.env_prefix is not None:
        if environ is None:
            environ = snapshot_environ()
        layers.append(build_env_layer(param.env_prefix, environ, logger))
    return layers
