# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import threading
from typing import List, Optional

from pluggy import HookspecMarker

from assemblyscan.dependency import Dependency

hookspec = HookspecMarker("assemblyscan")


@hookspec
def supported_extensions() -> Optional[List[str]]:
    """File extensions (without the leading '.') that the plugin analyzes. The scan engine
    only picks up files matching an extension returned by at least one plugin.

    Returns:
        Optional[List[str]]: Lowercase extensions, or None if the plugin does not analyze files.
    """


@hookspec
def analyze_dependency(dependency: Dependency, cancel_event: Optional[threading.Event]) -> None:
    """Collect evidence about the file behind a dependency.

    Plugins add evidence, and may set the name and version of the dependency if they
    are not already set. Plugins must check themselves whether the file is one they handle.

    Args:
        dependency (Dependency): The dependency to add evidence to.
        cancel_event (Optional[threading.Event]): Set by the engine when the scan is being
            cancelled. Long running plugins should stop and return without adding anything.

    Raises:
        AnalysisError: If analysis of this file failed. The engine records the error and
            continues with the next file.
    """


@hookspec
def init_hook(command_name: Optional[str] = None) -> None:
    """Initialization hook for plugins.

    Called once before any files are analyzed, to set up resources such as external
    tools. A plugin that raises `InitializationError` here should consider itself
    disabled for the rest of the run.

    Args:
        command_name (Optional[str]): The name of the command invoking the initialization,
                                      which can be used to conditionally initialize based on the context.
    """


@hookspec
def shutdown_hook() -> None:
    """Called once after all files were analyzed (including when the scan failed part way),
    to release anything acquired in `init_hook`."""


@hookspec
def short_name() -> Optional[str]:
    """A short name to register the hook as.

    Returns:
        Optional[str]: The name to register the hook with.
    """


@hookspec
def settings_name() -> Optional[str]:
    """The configuration section holding the plugin's settings, as documented in the
    "Config Options:" block of its docstring.

    Returns:
        Optional[str]: The section name.
    """
