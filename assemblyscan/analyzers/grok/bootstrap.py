# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import os
import pathlib
import shutil
import subprocess
import tempfile
import zipfile
from dataclasses import dataclass, field
from typing import Optional, Union

from loguru import logger

from assemblyscan.errors import BootstrapFailure, GrokParseError, SelfTestFailure

from . import parser
from .invoker import EXIT_NO_FILE, run_helper
from .models import InvocationTemplate

HELPER_NAME = "GrokAssembly.dll"
DEFAULT_INTERPRETER = "dotnet"
WORKDIR_PREFIX = "assemblyscan-grok"


@dataclass
class Ready:
    """A deployed, working helper. Use as a context manager, or call `close` when
    done, to remove the working directory it was deployed to."""

    template: InvocationTemplate
    workdir: pathlib.Path
    _closed: bool = field(default=False, repr=False)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        remove_workdir(self.workdir)

    def __enter__(self) -> "Ready":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


@dataclass(frozen=True)
class Disabled:
    reason: str


def remove_workdir(workdir: pathlib.Path) -> None:
    if workdir.exists():
        shutil.rmtree(workdir)
        logger.debug(f"Cleaned up GrokAssembly directory: {workdir}")


def _extract_zip(archive: pathlib.Path, dest: pathlib.Path) -> None:
    dest_root = dest.resolve()
    with zipfile.ZipFile(archive) as zf:
        for member in zf.infolist():
            target = (dest / member.filename).resolve()
            if dest_root != target and dest_root not in target.parents:
                raise BootstrapFailure(f"Refusing to extract {member.filename} outside of {dest}")
        zf.extractall(dest)


def deploy_helper(payload: Union[str, os.PathLike], temp_dir: Optional[Union[str, os.PathLike]] = None) -> pathlib.Path:
    """Copy or extract the helper payload into a new temporary directory.

    Args:
        payload (Union[str, os.PathLike]): A zip archive containing GrokAssembly.dll, a directory
            containing it, or the GrokAssembly.dll file itself.
        temp_dir (Optional[Union[str, os.PathLike]]): Where to create the working directory.

    Returns:
        pathlib.Path: The newly created working directory; the helper is at `<workdir>/GrokAssembly.dll`.

    Raises:
        BootstrapFailure: If the payload is missing or could not be deployed.
    """
    payload = pathlib.Path(payload)
    if not payload.exists():
        raise BootstrapFailure(f"GrokAssembly payload not found: {payload}")

    try:
        if temp_dir is not None:
            pathlib.Path(temp_dir).mkdir(parents=True, exist_ok=True)
        workdir = pathlib.Path(tempfile.mkdtemp(prefix=WORKDIR_PREFIX, dir=temp_dir))
    except OSError as e:
        raise BootstrapFailure(f"Unable to create temp directory for GrokAssembly: {e}") from e

    try:
        if payload.is_dir():
            shutil.copytree(payload, workdir, dirs_exist_ok=True)
        elif zipfile.is_zipfile(payload):
            _extract_zip(payload, workdir)
        else:
            shutil.copy2(payload, workdir / HELPER_NAME)
        if not (workdir / HELPER_NAME).is_file():
            raise BootstrapFailure(f"{HELPER_NAME} was not found in {payload}")
    except BootstrapFailure:
        remove_workdir(workdir)
        raise
    except (OSError, zipfile.BadZipFile) as e:
        remove_workdir(workdir)
        raise BootstrapFailure(f"Unable to extract {HELPER_NAME}: {e}") from e

    logger.debug(f"Deployed {HELPER_NAME} to {workdir}")
    return workdir


def is_interpreter_available(interpreter: str) -> bool:
    """Check whether `<interpreter> --version` runs and exits with code 0."""
    try:
        result = subprocess.run(
            [interpreter, "--version"],
            stdin=subprocess.DEVNULL,
            capture_output=True,
            check=False,
        )
    except OSError as e:
        logger.debug(f"Path search failed for {interpreter}: {e}")
        return False
    return result.returncode == 0


def resolve_interpreter(configured: Optional[str] = None) -> Optional[str]:
    """Pick the runtime used to run the helper: an explicitly configured path is
    used as is, otherwise `dotnet` is used if it can be found."""
    if configured:
        return configured
    if is_interpreter_available(DEFAULT_INTERPRETER):
        return DEFAULT_INTERPRETER
    return None


def self_test(template: InvocationTemplate) -> None:
    """Run the helper without a target file. A working install exits with code 1
    and reports the missing argument in its <error> element.

    Raises:
        SelfTestFailure: If the helper does anything else.
    """
    try:
        completed = run_helper(template.arguments())
        result = parser.parse(completed.stdout)
    except (OSError, GrokParseError) as e:
        logger.warning(
            "An error occurred with the .NET Assembly Analyzer; "
            "this can be ignored unless you are scanning .NET DLLs."
        )
        logger.debug(f"Could not execute GrokAssembly: {e}")
        raise SelfTestFailure(f"An error occurred with the .NET Assembly Analyzer: {e}") from e

    if completed.returncode != EXIT_NO_FILE or not result.error:
        logger.warning("An error occurred with the .NET Assembly Analyzer, please see the log for more details.")
        logger.debug(
            f"GrokAssembly is not working properly (exit code {completed.returncode}, error {result.error!r})"
        )
        raise SelfTestFailure("Could not execute .NET Assembly Analyzer")


def prepare(
    payload: Union[str, os.PathLike],
    interpreter: Optional[str] = None,
    temp_dir: Optional[Union[str, os.PathLike]] = None,
) -> Union[Ready, Disabled]:
    """Deploy the helper, find a runtime for it, and make sure it works.

    Args:
        payload (Union[str, os.PathLike]): The helper payload, see `deploy_helper`.
        interpreter (Optional[str]): Explicitly configured runtime path; probed for `dotnet` if not given.
        temp_dir (Optional[Union[str, os.PathLike]]): Where to create the working directory.

    Returns:
        Union[Ready, Disabled]: Ready with the invocation template, or Disabled if no runtime
        is available (which is expected on systems that never scan .NET binaries).

    Raises:
        BootstrapFailure: If the payload could not be deployed.
        SelfTestFailure: If the deployed helper does not work.
    """
    workdir = deploy_helper(payload, temp_dir)
    try:
        resolved = resolve_interpreter(interpreter)
        if resolved is not None:
            template = InvocationTemplate(resolved, str(workdir / HELPER_NAME))
            self_test(template)
    except BaseException:
        # includes KeyboardInterrupt while the self-test runs
        remove_workdir(workdir)
        raise

    if resolved is None:
        remove_workdir(workdir)
        logger.error("----------------------------------------------------")
        logger.error(
            ".NET Assembly Analyzer could not be initialized and at least one 'exe' or 'dll' "
            "may be scanned. The 'dotnet' executable could not be found on the path; either "
            "disable the Assembly Analyzer ('assemblyscan config assembly.enabled false') or "
            "configure the path to dotnet core ('assemblyscan config assembly.dotnet_path <path>')."
        )
        logger.error("----------------------------------------------------")
        return Disabled("The 'dotnet' executable could not be found")

    logger.info(f"GrokAssembly is ready, using runtime '{resolved}'")
    return Ready(template, workdir)
