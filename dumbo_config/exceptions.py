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

"""Exception hierarchy for dumbo-config.

Every failure of a layered load is raised as a subclass of ConfigError.
Each exception carries a ``kind`` attribute (an ErrorKind member) so callers
can branch on the failure without importing every class:

- INVALID_LOADING_PARAM: Neither a file nor an env prefix was given
- INVALID_ENV_CONFIG: The env prefix contains its own separator
- FILE_NOT_FOUND: The declared config file does not exist
- ENV_PREFIX_NOT_FOUND: No environment variable starts with the prefix
- CONFIG: A parse, merge, or deserialization failure (wraps the original)

Example:
    Catching specific error types:
        ```python
        from dumbo_config import load_config_with_param
        from dumbo_config.exceptions import ConfigFileNotFoundError, ConfigLoadError

        try:
            settings = load_config_with_param(param, AppSettings)
        except ConfigFileNotFoundError as e:
            print(f"Missing file: {e.path}")
        except ConfigLoadError as e:
            print(f"Bad configuration: {e}")
        ```

    Branching on the kind:
        ```python
        from dumbo_config.exceptions import ConfigError, ErrorKind

        try:
            settings = load_config_with_param(param, AppSettings)
        except ConfigError as e:
            if e.kind is ErrorKind.ENV_PREFIX_NOT_FOUND:
                print("Did you mistype the prefix?")
            raise
        ```
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

__all__ = [
    "ErrorKind",
    "ConfigError",
    "InvalidLoadingParamError",
    "InvalidEnvConfigError",
    "ConfigFileNotFoundError",
    "EnvPrefixNotFoundError",
    "ConfigLoadError",
]


class ErrorKind(str, Enum):
    """Discriminator shared by all configuration errors."""

    INVALID_LOADING_PARAM = "invalid_loading_param"
    INVALID_ENV_CONFIG = "invalid_env_config"
    FILE_NOT_FOUND = "file_not_found"
    ENV_PREFIX_NOT_FOUND = "env_prefix_not_found"
    CONFIG = "config"


class ConfigError(Exception):
    """Base exception for all dumbo-config errors.

    All dumbo-config exceptions inherit from this class, allowing users
    to catch every loading failure with a single except clause if needed.
    """

    kind: ErrorKind = ErrorKind.CONFIG


class InvalidLoadingParamError(ConfigError):
    """Raised when a LoadingParam names no source at all."""

    kind = ErrorKind.INVALID_LOADING_PARAM

    def __init__(self) -> None:
        super().__init__(
            "No configuration source provided. Please configure at least one of:\n"
            "- Configuration file (set the 'file' parameter)\n"
            "- Environment variables (set the 'env_prefix' parameter with a valid prefix)"
        )


class InvalidEnvConfigError(ConfigError):
    """Raised when the env prefix contains the key separator.

    Splitting ``PREFIX<sep>KEY<sep>SUBKEY`` into path segments would cut
    the prefix itself apart, so such a combination is rejected up front.

    Attributes:
        prefix: The offending environment prefix.
        separator: The effective separator.
    """

    kind = ErrorKind.INVALID_ENV_CONFIG

    def __init__(self, prefix: str, separator: str) -> None:
        self.prefix = prefix
        self.separator = separator
        super().__init__(
            f"Invalid environment configuration: env prefix '{prefix}' contains "
            f"separator '{separator}'.\n"
            "This will cause configuration loading to fail. Please choose a prefix "
            "that doesn't contain the separator,\n"
            "or use a different separator character."
        )


class ConfigFileNotFoundError(ConfigError):
    """Raised when the declared configuration file does not exist.

    Attributes:
        path: The path that was looked up.
    """

    kind = ErrorKind.FILE_NOT_FOUND

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Configuration file not found: {path}")


class EnvPrefixNotFoundError(ConfigError):
    """Raised when no environment variable starts with the prefix.

    This usually means the prefix was mistyped. It is reported separately
    from an env layer that exists but fails to deserialize.

    Attributes:
        prefix: The prefix that matched nothing.
    """

    kind = ErrorKind.ENV_PREFIX_NOT_FOUND

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        super().__init__(f"No environment variables found with prefix: '{prefix}'")


class ConfigLoadError(ConfigError):
    """Raised for parse, merge, or deserialization failures.

    The message keeps the underlying library's diagnostic text (PyYAML,
    json, tomllib, configparser, or pydantic). The original exception is
    available as ``inner`` and is also chained as ``__cause__``.

    Attributes:
        inner: The wrapped exception, if any.
    """

    kind = ErrorKind.CONFIG

    def __init__(self, message: str, inner: BaseException | None = None) -> None:
        self.inner = inner
        super().__init__(f"Config error: {message}")
