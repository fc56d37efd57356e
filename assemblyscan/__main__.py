# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import importlib.metadata
import sys

import click
from loguru import logger

from assemblyscan.cmd.analyze import analyze
from assemblyscan.cmd.config import config
from assemblyscan.cmd.plugin import plugin_disable_cmd, plugin_enable_cmd, plugin_list_cmd


@click.group()
@click.version_option(
    importlib.metadata.version("assemblyscan"),
    "--version",
    "-v",
    message="%(version)s",
)
@click.option(
    "--log-level",
    type=click.Choice(
        ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
        case_sensitive=False,
    ),
    default="INFO",
)
def main(log_level="INFO"):
    # Can't change the logging level; need to remove and add a new logger with the desired log level
    logger.remove()
    logger.add(sys.stderr, level=log_level.upper())


@main.group("plugin")
def plugin():
    """Manage plugins."""


main.add_command(analyze)
main.add_command(config)

plugin.add_command(plugin_list_cmd)
plugin.add_command(plugin_enable_cmd)
plugin.add_command(plugin_disable_cmd)


if __name__ == "__main__":
    main()
