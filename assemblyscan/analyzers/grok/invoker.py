# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import subprocess
import threading
from typing import IO, List, Optional

from loguru import logger

from assemblyscan.errors import AnalysisError, GrokParseError

from . import parser
from .models import (
    Cancelled,
    InvocationOutcome,
    InvocationTemplate,
    NotApplicable,
    ParseFailure,
    Success,
    ToolFailure,
)

# GrokAssembly exit codes
EXIT_OK = 0
EXIT_NO_FILE = 1
EXIT_NOT_ASSEMBLY = 3

# how often to check the cancel event while waiting on the helper
_CANCEL_POLL_SECONDS = 0.1


class _StreamDrain:
    """Reads a pipe to the end on a background thread."""

    def __init__(self, stream: IO[bytes], name: str) -> None:
        self._stream = stream
        self._chunks: List[bytes] = []
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        try:
            for chunk in iter(lambda: self._stream.read(8192), b""):
                self._chunks.append(chunk)
        except (OSError, ValueError):
            # pipe closed underneath us after the process was killed
            pass
        finally:
            self._stream.close()

    def result(self) -> bytes:
        self._thread.join()
        return b"".join(self._chunks)


def _kill(proc: subprocess.Popen) -> None:
    proc.kill()
    proc.wait()


def run_helper(
    args: List[str], cancel_event: Optional[threading.Event] = None
) -> Optional[subprocess.CompletedProcess]:
    """Run the helper and collect its output.

    Both output pipes are drained as soon as the process starts so the helper can
    never block on a full pipe. There is no timeout.

    Args:
        args (List[str]): Full argument list, including the interpreter.
        cancel_event (Optional[threading.Event]): When set, the helper is killed and None is returned.

    Returns:
        Optional[subprocess.CompletedProcess]: The exit code and raw output, or None if cancelled.

    Raises:
        OSError: If the process could not be started.
    """
    # pylint: disable-next=consider-using-with
    proc = subprocess.Popen(args, stdin=subprocess.DEVNULL, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    stderr = _StreamDrain(proc.stderr, "grok-stderr")
    stdout = _StreamDrain(proc.stdout, "grok-stdout")
    try:
        if cancel_event is None:
            returncode = proc.wait()
        else:
            while True:
                if cancel_event.is_set():
                    _kill(proc)
                    return None
                try:
                    returncode = proc.wait(timeout=_CANCEL_POLL_SECONDS)
                    break
                except subprocess.TimeoutExpired:
                    continue
    except KeyboardInterrupt:
        _kill(proc)
        raise
    return subprocess.CompletedProcess(args, returncode, stdout.result(), stderr.result())


def invoke(
    template: InvocationTemplate, file_path: str, cancel_event: Optional[threading.Event] = None
) -> InvocationOutcome:
    """Run GrokAssembly against one file and classify the result.

    Args:
        template (InvocationTemplate): The interpreter and helper to run.
        file_path (str): The file to analyze.
        cancel_event (Optional[threading.Event]): Cooperative cancellation flag for the calling worker.

    Returns:
        InvocationOutcome: Success with the parsed result for exit code 0, NotApplicable for
        exit code 3, ToolFailure for any other exit code, ParseFailure if the output of a
        successful run could not be read, or Cancelled.

    Raises:
        AnalysisError: If the helper process could not be started.
    """
    args = template.arguments(file_path)
    try:
        completed = run_helper(args, cancel_event)
    except OSError as e:
        raise AnalysisError(f"Unable to execute GrokAssembly for {file_path}: {e}") from e

    if completed is None:
        logger.debug(f"Analysis of {file_path} was cancelled")
        return Cancelled()

    stderr = completed.stderr.decode(errors="replace").strip()
    if stderr:
        logger.debug(f"Error from GrokAssembly: {stderr}")

    if completed.returncode == EXIT_NOT_ASSEMBLY:
        logger.debug(
            f"{file_path} is not a .NET assembly or executable and as such cannot be analyzed"
        )
        return NotApplicable()
    if completed.returncode != EXIT_OK:
        logger.debug(
            f"Return code {completed.returncode} from GrokAssembly; unable to analyze the library: {file_path}"
        )
        return ToolFailure(completed.returncode, stderr)

    try:
        return Success(parser.parse(completed.stdout))
    except GrokParseError as e:
        return ParseFailure(str(e))
