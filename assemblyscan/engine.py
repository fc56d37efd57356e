# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import os
import pathlib
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple, Union

import pluggy
from dataclasses_json import dataclass_json
from loguru import logger

from assemblyscan.configmanager import ConfigManager
from assemblyscan.dependency import Dependency
from assemblyscan.errors import AnalysisError
from assemblyscan.plugin.manager import call_init_hooks, call_shutdown_hooks, get_plugin_manager
from assemblyscan.utils.paths import get_file_extension


@dataclass_json
@dataclass
class ScanError:
    file: str
    message: str


@dataclass_json
@dataclass
class ScanResult:
    dependencies: List[Dependency] = field(default_factory=list)
    errors: List[ScanError] = field(default_factory=list)


def get_supported_extensions(pm: pluggy.PluginManager) -> Set[str]:
    extensions: Set[str] = set()
    for plugin_extensions in pm.hook.supported_extensions():
        if plugin_extensions:
            extensions.update(ext.lower().lstrip(".") for ext in plugin_extensions)
    return extensions


def collect_files(
    paths: Iterable[Union[str, os.PathLike]], extensions: Set[str], recurse: bool = True
) -> List[str]:
    """Find the files to analyze.

    Files given directly are always included; files found in directories are included
    only if their extension is in `extensions`.

    Args:
        paths (Iterable[Union[str, os.PathLike]]): Files and directories to search.
        extensions (Set[str]): Lowercase extensions without the leading '.'.
        recurse (bool): Whether subdirectories are searched.

    Returns:
        List[str]: Paths of the files found, in a stable order and without duplicates.
    """
    found: List[str] = []
    seen: Set[str] = set()

    def add(filepath: pathlib.Path) -> None:
        key = os.path.abspath(filepath)
        if key not in seen:
            seen.add(key)
            found.append(str(filepath))

    for path in paths:
        path = pathlib.Path(path)
        if path.is_dir():
            candidates = path.rglob("*") if recurse else path.glob("*")
            for candidate in sorted(candidates):
                if candidate.is_file() and get_file_extension(candidate.name) in extensions:
                    add(candidate)
        elif path.is_file():
            add(path)
        else:
            logger.warning(f"{path} does not exist, skipping")
    return found


def analyze_file(
    pm: pluggy.PluginManager, filepath: str, cancel_event: Optional[threading.Event] = None
) -> Tuple[Dependency, Optional[ScanError]]:
    """Run all analyzers on a single file. A failing analyzer only fails this file."""
    dependency = Dependency(actual_file_path=filepath)
    try:
        pm.hook.analyze_dependency(dependency=dependency, cancel_event=cancel_event)
    except AnalysisError as e:
        logger.error(f"Failed to analyze {filepath}: {e}")
        return dependency, ScanError(filepath, str(e))
    return dependency, None


def scan(
    paths: Iterable[Union[str, os.PathLike]],
    pm: Optional[pluggy.PluginManager] = None,
    *,  # arguments past this point are keyword-only
    recurse: bool = True,
    max_workers: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
    command_name: str = "analyze",
) -> ScanResult:
    """Analyze every supported file under the given paths.

    Plugins are initialized before the first file and always shut down afterwards,
    even if the scan is interrupted.

    Args:
        paths (Iterable[Union[str, os.PathLike]]): Files and directories to analyze.
        pm (Optional[pluggy.PluginManager]): Plugin manager to use; a new one is created if not given.
        recurse (bool): Whether subdirectories are searched.
        max_workers (Optional[int]): Number of files analyzed in parallel. Defaults to the
            `core.max_workers` setting, or 1.
        cancel_event (Optional[threading.Event]): Set to stop the scan; files not yet analyzed are skipped.
            The scan also sets it when interrupted with Ctrl-C.
        command_name (str): Passed on to the plugins' init hooks.

    Returns:
        ScanResult: The analyzed dependencies and the files that failed.
    """
    if pm is None:
        pm = get_plugin_manager()
    if max_workers is None:
        max_workers = int(ConfigManager().get("core", "max_workers", 1))

    result = ScanResult()
    for failure in call_init_hooks(pm, hook_filter=["analyze_dependency"], command_name=command_name):
        result.errors.append(ScanError("", str(failure)))

    try:
        files = collect_files(paths, get_supported_extensions(pm), recurse)
        logger.info(f"Analyzing {len(files)} file(s)")

        # set on Ctrl-C so plugins running on worker threads stop too
        stop_event = cancel_event if cancel_event is not None else threading.Event()

        def run(filepath: str) -> Optional[Tuple[Dependency, Optional[ScanError]]]:
            if stop_event.is_set():
                return None
            logger.debug(f"Analyzing {filepath}")
            return analyze_file(pm, filepath, stop_event)

        if max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                try:
                    outcomes = list(executor.map(run, files))
                except KeyboardInterrupt:
                    logger.warning("Scan interrupted, waiting for running analyses to stop")
                    stop_event.set()
                    executor.shutdown(cancel_futures=True)
                    raise
        else:
            outcomes = [run(filepath) for filepath in files]

        for outcome in outcomes:
            if outcome is None:
                continue
            dependency, error = outcome
            result.dependencies.append(dependency)
            if error is not None:
                result.errors.append(error)
    finally:
        call_shutdown_hooks(pm)
    return result
