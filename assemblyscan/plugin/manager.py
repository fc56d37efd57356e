# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from typing import List

import pluggy
from loguru import logger

from assemblyscan.configmanager import ConfigManager
from assemblyscan.errors import InitializationError
from assemblyscan.plugin import hookspecs


def _register_plugins(pm: pluggy.PluginManager) -> None:
    # pylint: disable=import-outside-toplevel
    # don't want all these imports as part of the file-level scope
    from assemblyscan.analyzers import assembly

    internal_plugins = (assembly.analyzer,)
    for plugin in internal_plugins:
        pm.register(plugin, name=plugin.short_name())


def set_blocked_plugins(pm: pluggy.PluginManager) -> None:
    """Gets the current list of blocked plugins from the config manager, then blocks and unregisters them with the plugin manager."""
    config_manager = ConfigManager()

    current_blocked_plugins = config_manager.get("core", "disable_plugins", [])
    if isinstance(current_blocked_plugins, str):
        current_blocked_plugins = [current_blocked_plugins]
    for plugin_name in current_blocked_plugins:
        if pm.is_blocked(plugin_name):
            logger.info(f"Plugin '{plugin_name}' is already disabled.")
            continue

        plugin = pm.unregister(name=plugin_name)
        if plugin is None:
            logger.info(f"Disabled plugin '{plugin_name}' not found.")
            continue

        # Block the plugin to prevent future registration
        pm.set_blocked(plugin_name)


def get_plugin_manager() -> pluggy.PluginManager:
    pm = pluggy.PluginManager("assemblyscan")
    pm.add_hookspecs(hookspecs)
    pm.load_setuptools_entrypoints("assemblyscan")
    _register_plugins(pm)
    set_blocked_plugins(pm)
    pm.check_pending()
    return pm


def is_hook_implemented(pm: pluggy.PluginManager, plugin: object, hook_name: str) -> bool:
    """
    Checks if a specific hook is implemented by a given plugin.

    Args:
        pm (pluggy.PluginManager): The plugin manager instance.
        plugin (object): The plugin object to check.
        hook_name (str): The name of the hook to check for implementation.

    Returns:
        bool: True if the hook is implemented by the plugin, False otherwise.
    """
    hook_callers = pm.get_hookcallers(plugin)
    if hook_callers:
        for hook_caller in hook_callers:
            if hook_caller.name == hook_name:
                return True
    return False


def print_plugins(pm: pluggy.PluginManager) -> None:
    print("PLUGINS")
    for plugin in pm.get_plugins():
        plugin_name = pm.get_name(plugin) if pm.get_name(plugin) else ""
        print(f"\t> name: {plugin_name}")
        print(f"\t  canonical name: {pm.get_canonical_name(plugin)}")

        short_name = None
        if is_hook_implemented(pm, plugin, "short_name"):
            short_name = plugin.short_name()

        settings_name = None
        if is_hook_implemented(pm, plugin, "settings_name"):
            settings_name = plugin.settings_name()

        print(f"\t  short name: {short_name}")
        print(f"\t  settings: {settings_name}\n")


def call_init_hooks(
    pm: pluggy.PluginManager, hook_filter: List[str] = None, command_name: str = None
) -> List[InitializationError]:
    """
    Call the initialization hook for plugins that implement it.

    A plugin that fails to initialize disables itself; the error is logged and
    returned so the caller can report it, and the remaining plugins still get initialized.

    Args:
        pm (pluggy.PluginManager): The plugin manager instance.
        hook_filter (List[str]): A list of hook names to filter which plugins get initialized.
        command_name (str): The name of the command invoking the initialization.

    Returns:
        List[InitializationError]: The errors raised by plugins that failed to initialize.
    """
    failures = []
    for plugin in pm.get_plugins():
        if is_hook_implemented(pm, plugin, "init_hook"):
            if hook_filter:
                if not any(is_hook_implemented(pm, plugin, hook) for hook in hook_filter):
                    continue
            try:
                plugin.init_hook(command_name=command_name)
            except InitializationError as e:
                logger.error(f"Plugin '{pm.get_name(plugin)}' failed to initialize: {e}")
                failures.append(e)
    return failures


def call_shutdown_hooks(pm: pluggy.PluginManager) -> None:
    """
    Call the shutdown hook for every plugin that implements it. A failing hook is
    logged and does not prevent the remaining plugins from shutting down.

    Args:
        pm (pluggy.PluginManager): The plugin manager instance.
    """
    for plugin in pm.get_plugins():
        if is_hook_implemented(pm, plugin, "shutdown_hook"):
            try:
                plugin.shutdown_hook()
            except OSError as e:
                logger.error(f"Failed to shut down plugin '{pm.get_name(plugin)}': {e}")
