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

"""Opt-in dump of the resolved configuration (SHOW_SETTINGS).

When a load uses an environment prefix, the variable
``{prefix}{separator}SHOW_SETTINGS`` decides whether the resolved
configuration is logged. Truthy values are "true", "1", "yes" and "on",
matched case-insensitively. Anything else, including an unset variable,
means "do not emit" and never raises.

File-only loads never emit: the flag belongs to the environment-driven
deployment flow.
"""

from __future__ import annotations

from collections.abc import Mapping
import json
from typing import Any

from pydantic import TypeAdapter

from dumbo_config.logging import Logger, get_global_logger
from dumbo_config.models import EnvConfig, LoadingParam
from dumbo_config.sources import snapshot_environ

SHOW_SETTINGS_KEY = "SHOW_SETTINGS"
TRUTHY_VALUES = frozenset({"true", "1", "yes", "on"})


def show_settings_var(env_config: EnvConfig) -> str:
    """Returns the name of the flag variable, e.g. "MYAPP__SHOW_SETTINGS"."""
    return f"{env_config.key_prefix}{SHOW_SETTINGS_KEY}"


def should_show_settings(
    param: LoadingParam,
    environ: Mapping[str, str] | None = None,
    logger: Logger | None = None,
) -> bool:
    """Checks whether the resolved configuration should be logged.

    Args:
        param: The loading parameters of the current load.
        environ: Environment snapshot. Defaults to a copy of os.environ.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        True only if an env prefix is configured and its SHOW_SETTINGS
            variable holds a truthy value.
    """
    if param.env_prefix is None:
        return False
    if logger is None:
        logger = get_global_logger()
    if environ is None:
        environ = snapshot_environ()

    var_name = show_settings_var(param.env_prefix)
    value = environ.get(var_name)
    if value is None:
        logger.debug("SETTINGS", f"{var_name} not set, settings will not be shown")
        return False
    return value.lower() in TRUTHY_VALUES


def render_settings(config: Any) -> str:
    """Renders a configuration object as indented JSON.

    Raises:
        Whatever pydantic or json raise for values they cannot serialize.
    """
    dumped = TypeAdapter(type(config)).dump_python(config, mode="json")
    return json.dumps(dumped, indent=2)


def emit_settings(config: Any, logger: Logger | None = None) -> None:
    """Logs the resolved configuration at info level.

    Rendering is best-effort: on failure a warning is logged followed by a
    plain "loaded successfully" notice, and the load is not aborted.
    """
    if logger is None:
        logger = get_global_logger()
    try:
        rendered = render_settings(config)
    except Exception as err:
        logger.warning("SETTINGS", f"Failed to serialize configuration for logging: {err}")
        logger.info("SETTINGS", "Configuration loaded successfully (SHOW_SETTINGS enabled)")
        return
    logger.info(
        "SETTINGS",
        f"Configuration loaded successfully (SHOW_SETTINGS enabled):\n{rendered}",
    )
