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

"""Source descriptors for a layered configuration load.

A load is described by a LoadingParam holding an optional file path and an
optional EnvConfig. Both types are frozen so a descriptor can be reused
across calls without any risk of one call altering the next.

Note:
    env_prefix has higher priority than file: when both are present,
    settings from the environment override those read from the file.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

DEFAULT_SEPARATOR = "__"


@dataclass(frozen=True)
class EnvConfig:
    """Environment source: which variables belong to this configuration.

    Attributes:
        name: Environment variable prefix (e.g., "MYAPP").
        separator: Delimiter between prefix and nested key segments.
            Defaults to "__" when None.
    """

    name: str
    separator: str | None = None

    def get_separator(self) -> str:
        """Returns the effective separator ("__" unless overridden)."""
        return self.separator if self.separator is not None else DEFAULT_SEPARATOR

    @property
    def key_prefix(self) -> str:
        """The full leading string of a contributing variable, e.g. "MYAPP__"."""
        return f"{self.name}{self.get_separator()}"


@dataclass(frozen=True)
class LoadingParam:
    """Loading parameters for one configuration load.

    Attributes:
        file: Configuration file path. Strings are converted to Path.
        env_prefix: Environment variable source.
    """

    file: Path | None = None
    env_prefix: EnvConfig | None = None

    def __post_init__(self) -> None:
        if self.file is not None and not isinstance(self.file, Path):
            object.__setattr__(self, "file", Path(os.fspath(self.file)))
