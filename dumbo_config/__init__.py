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

"""dumbo-config - layered configuration loading

Resolves a typed configuration object from a structured file
(YAML/JSON/TOML/INI) and/or prefixed environment variables, with
environment values overriding file values key by key.

dumbo-config provides:

- Validation of loading parameters before any I/O
- File format selection by extension
- Environment variables mapped to nested keys (PREFIX__DB__HOST -> db.host)
- Best-effort coercion of environment values (bool, int, float, string)
- Typed decoding via pydantic, with the library's diagnostics preserved
- Opt-in logging of the resolved settings (PREFIX__SHOW_SETTINGS=true)
- A best-effort config.{ENV}.yml lookup for simple applications

Quick Start:

    from pathlib import Path
    from pydantic import BaseModel
    from dumbo_config import EnvConfig, LoadingParam, load_config_with_param

    class Settings(BaseModel):
        name: str
        value: int

    settings = load_config_with_param(
        LoadingParam(file=Path("config.yaml"), env_prefix=EnvConfig("MYAPP")),
        Settings,
    )

For more details, see the individual module docstrings.
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "Layered configuration loading from files and environment variables"

from dumbo_config.exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigLoadError,
    EnvPrefixNotFoundError,
    ErrorKind,
    InvalidEnvConfigError,
    InvalidLoadingParamError,
)
from dumbo_config.legacy import load_config_from_file, load_named_config
from dumbo_config.loader import load, load_config_with_param
from dumbo_config.models import EnvConfig, LoadingParam

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "load",
    "load_config_with_param",
    "load_config_from_file",
    "load_named_config",
    "EnvConfig",
    "LoadingParam",
    "ErrorKind",
    "ConfigError",
    "InvalidLoadingParamError",
    "InvalidEnvConfigError",
    "ConfigFileNotFoundError",
    "EnvPrefixNotFoundError",
    "ConfigLoadError",
]
