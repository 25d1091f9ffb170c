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

"""Layered configuration loading.

This module ties the pipeline together for one load call:

1. Log the loading parameters
2. Validate them (at least one source, prefix without separator)
3. Take one snapshot of the environment
4. Build the file layer and/or the environment layer
5. Merge (environment wins) and decode into the target type
6. Log the resolved configuration if SHOW_SETTINGS is enabled

Nothing is cached between calls, so two loads with different parameters
never see each other's state.

Example:
    Load from a file with environment overrides:
        ```python
        from pathlib import Path
        from pydantic import BaseModel
        from dumbo_config import EnvConfig, LoadingParam, load_config_with_param

        class Settings(BaseModel):
            database_url: str
            port: int
            debug: bool = False

        settings = load_config_with_param(
            LoadingParam(file=Path("settings.yaml"), env_prefix=EnvConfig("MYAPP")),
            Settings,
        )
        ```

    With ``MYAPP__PORT=5433`` exported, ``settings.port`` is 5433 whatever
    the file says.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeVar

from dumbo_config.diagnostics import emit_settings, should_show_settings
from dumbo_config.logging import Logger, get_global_logger
from dumbo_config.merge import resolve
from dumbo_config.models import LoadingParam
from dumbo_config.sources import build_layers, snapshot_environ
from dumbo_config.validation import validate_loading_params

T = TypeVar("T")


def _log_loading_params(param: LoadingParam, logger: Logger) -> None:
    if param.file is not None:
        logger.info("CONFIG", f"Loading configuration from file: {param.file}")
    if param.env_prefix is not None:
        logger.info(
            "CONFIG",
            "Loading configuration from environment variables with prefix: "
            f"'{param.env_prefix.name}' and separator: "
            f"'{param.env_prefix.get_separator()}'",
        )


def load_config_with_param(
    param: LoadingParam,
    target_type: type[T],
    *,
    environ: Mapping[str, str] | None = None,
    logger: Logger | None = None,
) -> T:
    """Loads configuration using the specified loading parameters.

    Environment variables have higher priority than the configuration
    file: a key present in both takes the environment value.

    Args:
        param: Where to load configuration from.
        target_type: Type to decode the merged configuration into.
        environ: Environment snapshot to read instead of os.environ.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        The fully populated configuration object.

    Raises:
        InvalidLoadingParamError: If neither a file nor a prefix is given.
        InvalidEnvConfigError: If the prefix contains its separator.
        ConfigFileNotFoundError: If the declared file does not exist.
        EnvPrefixNotFoundError: If no variable starts with the prefix.
        ConfigLoadError: On parse errors or if the merged configuration
            does not fit ``target_type``.
    """
    if logger is None:
        logger = get_global_logger()

    _log_loading_params(param, logger)
    validate_loading_params(param)

    if environ is None:
        environ = snapshot_environ()

    layers = build_layers(param, environ, logger)
    result = resolve(layers, target_type, logger)

    if should_show_settings(param, environ, logger):
        emit_settings(result, logger)

    return result


load = load_config_with_param
