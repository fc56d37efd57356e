# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from typing import Any, List, Optional, Tuple

import click

from assemblyscan.configmanager import ConfigManager


def _split_key(key: str) -> Tuple[str, str]:
    try:
        section, option = key.split(".", 1)
    except ValueError as err:
        raise SystemExit("Invalid KEY given. Is it in the format 'section.option'?") from err
    return section, option


def _convert_value(value: str) -> Any:
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    return value


@click.command("config")
@click.argument("key", required=True)
@click.argument("values", nargs=-1)
def config(key: str, values: Optional[List[str]]):
    """Get or set a configuration value.

    If only KEY is provided, the current value is displayed.
    If both KEY and one or more VALUES are provided, the configuration value is set.
    KEY should be in the format 'section.option', e.g. 'assembly.dotnet_path'.
    """
    config_manager = ConfigManager()
    section, option = _split_key(key)

    if not values:
        result = config_manager.get(section, option)
        if result is None:
            click.echo(f"Configuration '{key}' not found.")
        else:
            click.echo(f"{key} = {result}")
        return

    converted_values = [_convert_value(value) for value in values]
    # a single value is stored as is, several values as a list
    final_value = converted_values[0] if len(converted_values) == 1 else converted_values
    config_manager.set(section, option, final_value)
    click.echo(f"Configuration '{key}' set to '{final_value}'.")
