# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT

"""
Gets company, product, and version information from .NET assemblies by running
GrokAssembly with the dotnet runtime.

Config Options:
    enabled(bool): Whether the Assembly Analyzer runs at all. [default=True]
    dotnet_path(str): Path to the dotnet executable. If empty, `dotnet` is looked up on the PATH.
    helper_path(str): GrokAssembly payload to deploy; a zip archive, a directory, or the
        GrokAssembly.dll file. If empty, GrokAssembly.zip is looked for in the assemblyscan
        package and then in the assemblyscan data directory; the analyzer is disabled if
        neither has one.
    temp_dir(str): Directory to deploy GrokAssembly under. Uses the system temp directory if empty.
"""

import atexit
import os
import pathlib
import threading
from typing import List, Optional, Union

from loguru import logger

import assemblyscan.plugin
from assemblyscan.analyzers import grok
from assemblyscan.configmanager import ConfigManager
from assemblyscan.dependency import Dependency
from assemblyscan.errors import AnalysisError, AnalyzerNotReady, InitializationError
from assemblyscan.utils.paths import get_file_extension

ANALYZER_NAME = "Assembly Analyzer"
SETTINGS_SECTION = "assembly"
SUPPORTED_EXTENSIONS = ["dll", "exe"]
PAYLOAD_NAME = "GrokAssembly.zip"
DEFAULT_PAYLOAD = pathlib.Path(__file__).parent / "resources" / PAYLOAD_NAME


def supports_file(filename: str) -> bool:
    return get_file_extension(filename) in SUPPORTED_EXTENSIONS


def find_default_payload(config: ConfigManager) -> Optional[pathlib.Path]:
    """The bundled payload, or one placed in the data directory by the user."""
    for candidate in (DEFAULT_PAYLOAD, config.get_data_dir_path() / PAYLOAD_NAME):
        if candidate.exists():
            return candidate
    return None


class AssemblyAnalyzer:
    """Plugin wrapping the GrokAssembly bootstrap and per-file analysis.

    `init_hook` runs the bootstrap once; its outcome (a ready helper, or the reason the
    analyzer is disabled) is kept for the lifetime of the analyzer and released by
    `shutdown_hook`.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None) -> None:
        self._config_manager = config_manager
        self._state: Union[grok.Ready, grok.Disabled, None] = None
        self._lock = threading.Lock()

    def _get_config(self) -> ConfigManager:
        return self._config_manager if self._config_manager is not None else ConfigManager()

    @property
    def enabled(self) -> bool:
        return isinstance(self._state, grok.Ready)

    @property
    def helper_path(self) -> Optional[pathlib.Path]:
        """The deployed GrokAssembly.dll, or None if the analyzer is not ready."""
        if isinstance(self._state, grok.Ready):
            return pathlib.Path(self._state.template.helper_path)
        return None

    @assemblyscan.plugin.hookimpl
    def short_name(self) -> Optional[str]:
        return "assembly"

    @assemblyscan.plugin.hookimpl
    def settings_name(self) -> Optional[str]:
        return SETTINGS_SECTION

    @assemblyscan.plugin.hookimpl
    def supported_extensions(self) -> Optional[List[str]]:
        return list(SUPPORTED_EXTENSIONS)

    @assemblyscan.plugin.hookimpl
    def init_hook(self, command_name: Optional[str] = None) -> None:
        """Deploy GrokAssembly and check that it works.

        Raises:
            InitializationError: If GrokAssembly could not be deployed or does not work. The
                analyzer stays disabled for the rest of the run.
        """
        with self._lock:
            if self._state is not None:
                return
            config = self._get_config()
            if not config.get_bool(SETTINGS_SECTION, "enabled", True):
                logger.info(f"{ANALYZER_NAME} is disabled by configuration")
                self._state = grok.Disabled("disabled by configuration")
                return

            logger.info(f"Initializing {ANALYZER_NAME}...")
            payload = config.get(SETTINGS_SECTION, "helper_path", None) or find_default_payload(config)
            if payload is None:
                logger.info(
                    f"{ANALYZER_NAME} is disabled; no {PAYLOAD_NAME} was found in {DEFAULT_PAYLOAD.parent} "
                    f"or {config.get_data_dir_path()}. Set assembly.helper_path to use one from elsewhere."
                )
                self._state = grok.Disabled(f"{PAYLOAD_NAME} not found")
                return
            try:
                self._state = grok.prepare(
                    payload,
                    interpreter=config.get(SETTINGS_SECTION, "dotnet_path", None) or None,
                    temp_dir=config.get_temp_dir_path(SETTINGS_SECTION),
                )
            except InitializationError as e:
                self._state = grok.Disabled(str(e))
                raise
            if isinstance(self._state, grok.Ready):
                atexit.register(self._state.close)
                logger.info(f"Initializing {ANALYZER_NAME} complete.")

    @assemblyscan.plugin.hookimpl
    def analyze_dependency(
        self, dependency: Dependency, cancel_event: Optional[threading.Event]
    ) -> None:
        if not supports_file(dependency.actual_file_path):
            return
        state = self._state
        if isinstance(state, grok.Disabled):
            return
        if not isinstance(state, grok.Ready):
            raise AnalyzerNotReady(f"{ANALYZER_NAME} was used before it was initialized")
        if not os.path.isfile(dependency.actual_file_path):
            raise AnalysisError(
                f"{dependency.actual_file_path} does not exist and cannot be analyzed"
            )
        grok.analyze(state.template, dependency, cancel_event)

    @assemblyscan.plugin.hookimpl
    def shutdown_hook(self) -> None:
        """Remove the GrokAssembly working directory. The analyzer needs `init_hook` again
        before it can be used after this."""
        with self._lock:
            state = self._state
            self._state = None
            if isinstance(state, grok.Ready):
                atexit.unregister(state.close)
                state.close()


analyzer = AssemblyAnalyzer()
