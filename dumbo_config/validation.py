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

"""Validation of loading parameters.

These checks run before any file or environment access. They are pure
functions of their input and raise on the first problem found.

Example:
    ```python
    from dumbo_config.models import EnvConfig, LoadingParam
    from dumbo_config.validation import validate_loading_params

    validate_loading_params(LoadingParam(env_prefix=EnvConfig("MYAPP")))
    ```
"""

from __future__ import annotations

from dumbo_config.exceptions import InvalidEnvConfigError, InvalidLoadingParamError
from dumbo_config.models import EnvConfig, LoadingParam


def validate_loading_params(param: LoadingParam) -> None:
    """Validates the loading parameters.

    Args:
        param: The loading parameters to check.

    Raises:
        InvalidLoadingParamError: If neither file nor env_prefix is set.
        InvalidEnvConfigError: If the env prefix contains its separator.
    """
    if param.file is None and param.env_prefix is None:
        raise InvalidLoadingParamError()

    if param.env_prefix is not None:
        validate_env_config(param.env_prefix)


def validate_env_config(env_config: EnvConfig) -> None:
    """Rejects a prefix that contains the separator.

    Raises:
        InvalidEnvConfigError: If ``env_config.name`` contains the separator.
    """
    separator = env_config.get_separator()
    if separator in env_config.name:
        raise InvalidEnvConfigError(env_config.name, separator)
