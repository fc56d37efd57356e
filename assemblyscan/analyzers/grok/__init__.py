# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from .bootstrap import Disabled, Ready, prepare
from .extractor import analyze, extract
from .invoker import invoke
from .models import (
    Cancelled,
    ExtractionResult,
    InvocationOutcome,
    InvocationTemplate,
    NotApplicable,
    ParseFailure,
    Success,
    ToolFailure,
)
from .namespaces import add_matching_values, match_namespaces
from .parser import parse

__all__ = [
    "Cancelled",
    "Disabled",
    "ExtractionResult",
    "InvocationOutcome",
    "InvocationTemplate",
    "NotApplicable",
    "ParseFailure",
    "Ready",
    "Success",
    "ToolFailure",
    "add_matching_values",
    "analyze",
    "extract",
    "invoke",
    "match_namespaces",
    "parse",
    "prepare",
]
