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

"""Best-effort loading of conventionally named YAML files.

Files are searched in the following order:

1. ``config.{ENV}.yml``
2. ``config.{ENV}.yaml``

when the ``ENV`` environment variable is set and non-empty, otherwise:

1. ``config.yml``
2. ``config.yaml``

The first file that exists and decodes into the target type wins. There is
no environment variable merging and no error detail: anything that goes
wrong yields None. Use load_config_with_param for typed errors.

Example:
    ```python
    from dumbo_config import load_named_config

    settings = load_named_config(Settings)
    if settings is None:
        print("Failed to load configuration")
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TypeVar

from pydantic import TypeAdapter, ValidationError
import yaml

from dumbo_config.logging import Logger, get_global_logger
from dumbo_config.sources import snapshot_environ

T = TypeVar("T")

ENV_VAR = "ENV"


def named_config_candidates(environ: Mapping[str, str] | None = None) -> list[str]:
    """Returns the file names to try, in order."""
    if environ is None:
        environ = snapshot_environ()
    env = environ.get(ENV_VAR)
    if env:
        return [f"config.{env}.yml", f"config.{env}.yaml"]
    return ["config.yml", "config.yaml"]


def load_config_from_file(
    path: Path, target_type: type[T], logger: Logger | None = None
) -> T | None:
    """Reads a YAML file into ``target_type``.

    Returns:
        The decoded object, or None if the file cannot be read, parsed, or
            decoded.
    """
    if logger is None:
        logger = get_global_logger()
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return TypeAdapter(target_type).validate_python(data)
    except (OSError, UnicodeDecodeError, yaml.YAMLError, ValidationError) as err:
        logger.debug("NAMED", f"Skipping {path}: {err}")
        return None


def load_named_config(
    target_type: type[T],
    *,
    environ: Mapping[str, str] | None = None,
    search_dir: Path | None = None,
    logger: Logger | None = None,
) -> T | None:
    """Loads configuration from environment-specific or default YAML files.

    Args:
        target_type: Type to decode the file into.
        environ: Environment snapshot used to read ``ENV``.
        search_dir: Directory holding the files. Defaults to the current
            working directory.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        The first successfully decoded configuration, or None.
    """
    if logger is None:
        logger = get_global_logger()
    if search_dir is None:
        search_dir = Path.cwd()

    for file_name in named_config_candidates(environ):
        candidate = search_dir / file_name
        logger.verbose("NAMED", f"Trying {candidate}")
        config = load_config_from_file(candidate, target_type, logger)
        if config is not None:
            logger.verbose("NAMED", f"Loaded {candidate}")
            return config

    return None
