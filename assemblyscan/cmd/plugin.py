# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from typing import List

import click

from assemblyscan.configmanager import ConfigManager
from assemblyscan.plugin.manager import get_plugin_manager, print_plugins

SECTION = "core"
SECTION_KEY = "disable_plugins"


def _get_blocked_plugins(config_manager: ConfigManager) -> List[str]:
    current_blocked_plugins = config_manager.get(SECTION, SECTION_KEY, [])
    if isinstance(current_blocked_plugins, str):
        return [current_blocked_plugins]
    return list(current_blocked_plugins)


@click.command(name="list")
def plugin_list_cmd():
    """Lists plugins."""
    pm = get_plugin_manager()
    print_plugins(pm)

    current_blocked_plugins = _get_blocked_plugins(ConfigManager())
    print("\nDISABLED PLUGINS")
    if not current_blocked_plugins:
        print("\tThere are no disabled plugins.")
    else:
        for disabled_plugin in current_blocked_plugins:
            print(f"\tname: {disabled_plugin}")


@click.command(name="enable")
@click.argument("plugin_names", nargs=-1)
def plugin_enable_cmd(plugin_names):
    """Enables one or more plugins."""
    if not plugin_names:
        raise click.UsageError("At least one plugin name must be specified.")
    config_manager = ConfigManager()
    current_blocked_plugins = [
        name for name in _get_blocked_plugins(config_manager) if name not in plugin_names
    ]
    config_manager.set(SECTION, SECTION_KEY, current_blocked_plugins)
    click.echo(f"Updated blocked plugins: {current_blocked_plugins}")


@click.command(name="disable")
@click.argument("plugin_names", nargs=-1)
def plugin_disable_cmd(plugin_names):
    """Disables one or more plugins."""
    if not plugin_names:
        raise click.UsageError("At least one plugin name must be specified.")
    config_manager = ConfigManager()
    current_blocked_plugins = _get_blocked_plugins(config_manager)
    for plugin_name in plugin_names:
        if plugin_name not in current_blocked_plugins:
            current_blocked_plugins.append(plugin_name)
    config_manager.set(SECTION, SECTION_KEY, current_blocked_plugins)
    click.echo(f"Updated blocked plugins: {current_blocked_plugins}")
