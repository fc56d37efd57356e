# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import threading
from typing import Optional, Tuple

from loguru import logger

from assemblyscan.dependency import Confidence, Dependency, EvidenceType, SoftwareIdentifier
from assemblyscan.errors import GrokParseError, ToolReportedError
from assemblyscan.utils.paths import strip_file_extension

from . import invoker
from .models import (
    Cancelled,
    ExtractionResult,
    InvocationTemplate,
    NotApplicable,
    ParseFailure,
    Success,
    ToolFailure,
)
from .namespaces import add_matching_values

EVIDENCE_SOURCE = "grokassembly"

# (ExtractionResult field, evidence name, evidence type, confidence)
FIELD_EVIDENCE: Tuple[Tuple[str, str, EvidenceType, Confidence], ...] = (
    ("product_version", "ProductVersion", EvidenceType.VERSION, Confidence.HIGHEST),
    ("file_version", "FileVersion", EvidenceType.VERSION, Confidence.HIGHEST),
    ("company_name", "CompanyName", EvidenceType.VENDOR, Confidence.HIGHEST),
    ("product_name", "ProductName", EvidenceType.PRODUCT, Confidence.HIGHEST),
    ("file_description", "FileDescription", EvidenceType.PRODUCT, Confidence.HIGH),
    ("internal_name", "InternalName", EvidenceType.PRODUCT, Confidence.MEDIUM),
    ("original_filename", "OriginalFilename", EvidenceType.PRODUCT, Confidence.MEDIUM),
)


def derive_version(file_version: Optional[str], product_version: Optional[str]) -> Optional[str]:
    """FileVersion is used as the version when it agrees with ProductVersion, meaning
    it is equal to it or extends it (FileVersion "1.2.3.4" with ProductVersion "1.2").
    The comparison is ordinal."""
    if not file_version or not product_version:
        return None
    if file_version == product_version or file_version.startswith(product_version):
        return file_version
    return None


def _derive_name(dependency: Dependency, candidate: str) -> None:
    if dependency.name:
        return
    if candidate.lower() in dependency.actual_file_name.lower():
        dependency.name = strip_file_extension(candidate)


def extract(dependency: Dependency, result: ExtractionResult) -> None:
    """Add the evidence from a GrokAssembly result to a dependency, and fill in its
    name and version when they can be derived and are not already set.

    Raises:
        ToolReportedError: If the helper reported an error for the file. Nothing is added in that case.
    """
    if result.error:
        raise ToolReportedError(result.error)
    if result.warning:
        logger.debug(result.warning)

    for attr, evidence_name, evidence_type, confidence in FIELD_EVIDENCE:
        value = getattr(result, attr)
        if value:
            dependency.add_evidence(evidence_type, EVIDENCE_SOURCE, evidence_name, value, confidence)

    if not dependency.version:
        version = derive_version(result.file_version, result.product_version)
        if version:
            dependency.version = version

    if result.internal_name:
        add_matching_values(dependency, result.namespaces, result.internal_name, EvidenceType.PRODUCT)
        add_matching_values(dependency, result.namespaces, result.internal_name, EvidenceType.VENDOR)
        _derive_name(dependency, result.internal_name)

    if result.original_filename:
        add_matching_values(dependency, result.namespaces, result.original_filename, EvidenceType.PRODUCT)
        _derive_name(dependency, result.original_filename)

    if dependency.name and dependency.version:
        dependency.add_software_identifier(
            SoftwareIdentifier.from_name_version(dependency.name, dependency.version, Confidence.MEDIUM)
        )


def analyze(
    template: InvocationTemplate,
    dependency: Dependency,
    cancel_event: Optional[threading.Event] = None,
) -> None:
    """Run GrokAssembly on the dependency's file and fold the result into it.

    Files that are not .NET assemblies, helper failures, and cancellation add nothing.

    Raises:
        GrokParseError: If the helper exited successfully but its output could not be parsed.
        ToolReportedError: If the helper reported an error for the file.
        AnalysisError: If the helper could not be started.
    """
    outcome = invoker.invoke(template, dependency.actual_file_path, cancel_event)
    if isinstance(outcome, Success):
        extract(dependency, outcome.result)
    elif isinstance(outcome, ParseFailure):
        logger.error("----------------------------------------------------")
        logger.error("Failed to read the Assembly Analyzer results.")
        logger.error("----------------------------------------------------")
        raise GrokParseError(outcome.message)
    elif not isinstance(outcome, (NotApplicable, ToolFailure, Cancelled)):
        raise TypeError(f"Unexpected GrokAssembly outcome: {outcome!r}")
