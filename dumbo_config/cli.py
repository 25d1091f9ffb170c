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

"""Command-line interface for dumbo-config.

This module provides the ``dumbo-config`` entry point, used to inspect what
a layered load resolves to without writing any Python.

Commands:

    show: Resolve a file and/or env prefix and print the merged tree
    named: Run the config.{ENV}.yml lookup and print what it finds

Example:
    Show the merged configuration:
        ```bash
        $ dumbo-config show --file settings.yaml --env-prefix MYAPP
        ```

    Show layer details:
        ```bash
        $ dumbo-config show --file settings.yaml --env-prefix MYAPP --debug
        ```

    Find the conventionally named file for ENV=prod:
        ```bash
        $ ENV=prod dumbo-config named --dir deploy/
        ```

Exit Codes:

- 0: Success
- 1: Error (invalid parameters, missing source, or unparsable configuration)
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import sys
from typing import Any

import yaml

from dumbo_config.exceptions import ConfigError
from dumbo_config.legacy import load_named_config, named_config_candidates
from dumbo_config.loader import load_config_with_param
from dumbo_config.logging import get_logger, set_global_logger
from dumbo_config.models import EnvConfig, LoadingParam


def _print_tree(data: dict[str, Any]) -> None:
    print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")


def cmd_show(args: argparse.Namespace) -> int:
    """Handler for 'dumbo-config show' command.

    Args:
        args: Parsed command-line arguments containing the file, env
            prefix, separator, and verbosity flags.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    env_prefix = None
    if args.env_prefix is not None:
        env_prefix = EnvConfig(name=args.env_prefix, separator=args.separator)
    param = LoadingParam(
        file=Path(args.file) if args.file is not None else None,
        env_prefix=env_prefix,
    )

    try:
        data = load_config_with_param(param, dict[str, Any], logger=logger)
    except ConfigError as err:
        print(f"Error: {err}")
        return 1

    _print_tree(data)
    return 0


def cmd_named(args: argparse.Namespace) -> int:
    """Handler for 'dumbo-config named' command.

    Args:
        args: Parsed command-line arguments containing the search
            directory and verbose flag.

    Returns:
        Exit code (0 if a file was found, 1 otherwise).
    """
    logger = get_logger(verbose=args.verbose, debug=False)
    set_global_logger(logger)

    search_dir = Path(args.dir)
    data = load_named_config(dict[str, Any], search_dir=search_dir, logger=logger)
    if data is None:
        tried = ", ".join(named_config_candidates())
        print(f"Error: no loadable configuration in {search_dir} (tried: {tried})")
        return 1

    _print_tree(data)
    return 0


def _package_version() -> str:
    try:
        return version("dumbo-config")
    except PackageNotFoundError:
        return "unknown"


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for the dumbo-config CLI.

    This function is registered as the 'dumbo-config' console script in
    pyproject.toml.
    """
    parser = argparse.ArgumentParser(
        prog="dumbo-config",
        description="Inspect layered configuration resolved from files and environment variables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"dumbo-config {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'show' command
    parser_show = subparsers.add_parser(
        "show",
        help="Print the merged configuration",
        description="Load a file and/or environment variables and print the merged tree as YAML.",
    )
    parser_show.add_argument(
        "--file",
        default=None,
        help="Configuration file (.json, .yaml, .yml, .toml, .ini; others read as YAML)",
    )
    parser_show.add_argument(
        "--env-prefix",
        default=None,
        help="Environment variable prefix (e.g., MYAPP)",
    )
    parser_show.add_argument(
        "--separator",
        default=None,
        help="Separator between prefix and key segments (default: __)",
    )
    parser_show.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show which layers are loaded",
    )
    parser_show.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show raw layer contents (implies --verbose)",
    )
    parser_show.set_defaults(func=cmd_show)

    # 'named' command
    parser_named = subparsers.add_parser(
        "named",
        help="Find config.{ENV}.yml / config.yml and print it",
        description="Search for conventionally named YAML files, honoring the ENV variable.",
    )
    parser_named.add_argument(
        "--dir",
        default=".",
        help="Directory to search (default: current directory)",
    )
    parser_named.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show each candidate file as it is tried",
    )
    parser_named.set_defaults(func=cmd_named)

    # Parse and dispatch
    args = parser.parse_args(argv)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
