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

"""Logging interface for dumbo-config.

Library modules report what they load through a small prefix-tagged logger
instead of printing directly. The logger can be configured globally or
passed as a parameter for better isolation.

The logger supports four output levels:

- Info: Loading parameters and SHOW_SETTINGS dumps
- Warning: Best-effort features that degraded (e.g., settings rendering)
- Verbose: Layer construction details, only when verbose mode is enabled
- Debug: Raw layer contents, only when debug mode is enabled (implies verbose)

Example:
    Configure global logger:
        ```python
        from dumbo_config.logging import get_logger, set_global_logger

        set_global_logger(get_logger(verbose=True))
        ```

    Use with dependency injection:
        ```python
        def my_function(logger=None):
            if logger is None:
                logger = get_global_logger()
            logger.verbose("CONFIG", "Processing...")
        ```

Note:
    The default global logger is silent, so library functions won't print
    anything unless explicitly configured. The CLI configures the global
    logger when commands are executed.
"""

from __future__ import annotations

from typing import Any, Protocol

import yaml


class Logger(Protocol):
    """Protocol for logger implementations."""

    def info(self, prefix: str, message: str) -> None:
        """Print an informational message.

        Args:
            prefix: Message prefix (e.g., "CONFIG", "SETTINGS").
            message: Log message.
        """
        ...

    def warning(self, prefix: str, message: str) -> None:
        """Print a warning message.

        Args:
            prefix: Message prefix (e.g., "CONFIG", "SETTINGS").
            message: Log message.
        """
        ...

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message.

        Args:
            prefix: Message prefix (e.g., "FILE", "ENV").
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message.

        Args:
            prefix: Message prefix (e.g., "FILE", "ENV").
            message: Log message.
        """
        ...


class DefaultLogger:
    """Default logger implementation that prints to stdout.

    Info and warning messages are always printed. Verbose and debug
    messages respect the flags given at construction.
    """

    def __init__(self, verbose: bool = False, debug: bool = False) -> None:
        """Initialize logger with verbosity settings.

        Args:
            verbose: If True, print verbose messages.
            debug: If True, print debug messages (implies verbose).
        """
        self._verbose = verbose or debug
        self._debug = debug

    def info(self, prefix: str, message: str) -> None:
        """Print an informational message."""
        print(f"[{prefix}] {message}")

    def warning(self, prefix: str, message: str) -> None:
        """Print a warning message."""
        print(f"[WARNING] [{prefix}] {message}")

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message (only when verbose mode is active)."""
        if self._verbose:
            print(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message (only when debug mode is active)."""
        if self._debug:
            print(f"[{prefix}] {message}")


class SilentLogger:
    """Logger that suppresses all output.

    Useful for programmatic usage when output is not desired.
    """

    def info(self, prefix: str, message: str) -> None:
        pass

    def warning(self, prefix: str, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass


# Global logger instance (defaults to silent)
_global_logger: Logger = SilentLogger()


def get_logger(verbose: bool = False, debug: bool = False) -> Logger:
    """Get a logger instance with specified verbosity.

    Args:
        verbose: If True, logger will print verbose messages.
        debug: If True, logger will print debug messages (implies verbose).

    Returns:
        A logger instance configured with the specified verbosity.
    """
    return DefaultLogger(verbose=verbose, debug=debug)


def get_global_logger() -> Logger:
    """Get the global logger instance.

    Returns:
        The current global logger instance.
    """
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Set the global logger instance.

    Args:
        logger: Logger instance to use as the global logger.

    Note:
        This affects every library function that is not handed a logger
        explicitly. For better isolation, pass logger instances directly.
    """
    global _global_logger
    _global_logger = logger


def log_yaml_content(
    logger: Logger, prefix: str, data: dict[str, Any], indent: int = 2
) -> None:
    """Logs a configuration tree as YAML, one debug line per YAML line.

    The logger.debug() call only prints if debug mode is enabled.
    """
    yaml_str = yaml.dump(data, default_flow_style=False, sort_keys=False)
    for line in yaml_str.split("\n"):
        if line.strip():  # Skip empty lines
            logger.debug(prefix, " " * indent + line)
