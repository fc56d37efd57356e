# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT


class AnalysisError(Exception):
    """Raised when a single dependency could not be analyzed. The scan engine
    records the failure for that file and moves on to the next one."""


class AnalyzerNotReady(AnalysisError):
    """Raised when an analyzer is asked to analyze a file before it was initialized."""


class ToolReportedError(AnalysisError):
    """The helper tool ran successfully but reported an error for the file."""


class GrokParseError(AnalysisError):
    """The helper tool exited successfully but its output could not be read."""


class InitializationError(Exception):
    """Raised when an analyzer cannot be initialized. Analyzers raising this are
    disabled for the rest of the run."""


class BootstrapFailure(InitializationError):
    """The helper payload could not be deployed to its working directory."""


class SelfTestFailure(InitializationError):
    """The helper was deployed but did not behave as expected when run without a target."""
