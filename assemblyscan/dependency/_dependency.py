# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from dataclasses_json import dataclass_json

from assemblyscan.utils.paths import basename_posix

from ._evidence import Confidence, Evidence, EvidenceType
from ._identifier import SoftwareIdentifier


@dataclass_json
@dataclass
class Dependency:
    """A file being analyzed, along with the evidence collected about it so far.

    Evidence is append-only; analyzers add entries but never remove or replace them.

    Attributes:
        actual_file_path (str): Path to the file on disk.
        name (Optional[str]): Name derived for the dependency, if any analyzer determined one.
        version (Optional[str]): Version derived for the dependency.
        evidence (List[Evidence]): Collected evidence, in the order it was added.
        software_identifiers (List[SoftwareIdentifier]): Identifiers derived from name and version.
    """

    actual_file_path: str
    name: Optional[str] = None
    version: Optional[str] = None
    evidence: List[Evidence] = field(default_factory=list)
    software_identifiers: List[SoftwareIdentifier] = field(default_factory=list)

    @property
    def actual_file_name(self) -> str:
        return basename_posix(self.actual_file_path)

    # pylint: disable-next=too-many-arguments,too-many-positional-arguments
    def add_evidence(
        self,
        evidence_type: EvidenceType,
        source: str,
        name: str,
        value: str,
        confidence: Confidence,
    ) -> Evidence:
        entry = Evidence(evidence_type, source, name, value, confidence)
        self.evidence.append(entry)
        return entry

    def get_evidence(self, evidence_type: Optional[EvidenceType] = None) -> List[Evidence]:
        if evidence_type is None:
            return list(self.evidence)
        return [e for e in self.evidence if e.type == evidence_type]

    def add_software_identifier(self, identifier: SoftwareIdentifier) -> None:
        if identifier not in self.software_identifiers:
            self.software_identifiers.append(identifier)
