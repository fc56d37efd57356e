# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import json

from assemblyscan.dependency import (
    Confidence,
    Dependency,
    Evidence,
    EvidenceType,
    SoftwareIdentifier,
)


def test_confidence_ordering():
    assert Confidence.HIGHEST > Confidence.HIGH > Confidence.MEDIUM > Confidence.LOW
    assert max([Confidence.MEDIUM, Confidence.HIGHEST, Confidence.LOW]) == Confidence.HIGHEST
    assert sorted(Confidence) == [Confidence.LOW, Confidence.MEDIUM, Confidence.HIGH, Confidence.HIGHEST]


def test_actual_file_name():
    assert Dependency("/opt/app/MyLib.dll").actual_file_name == "MyLib.dll"
    assert Dependency("C:\\app\\MyLib.dll").actual_file_name == "MyLib.dll"


def test_evidence_is_appended_in_order():
    dep = Dependency("/opt/app/MyLib.dll")
    first = dep.add_evidence(EvidenceType.VENDOR, "grokassembly", "CompanyName", "Contoso", Confidence.HIGHEST)
    dep.add_evidence(EvidenceType.PRODUCT, "grokassembly", "ProductName", "MyLib", Confidence.HIGHEST)
    # duplicates are kept
    dep.add_evidence(EvidenceType.VENDOR, "grokassembly", "CompanyName", "Contoso", Confidence.HIGHEST)
    assert first == Evidence(EvidenceType.VENDOR, "grokassembly", "CompanyName", "Contoso", Confidence.HIGHEST)
    assert len(dep.evidence) == 3
    assert dep.get_evidence(EvidenceType.VENDOR) == [first, first]
    assert [e.name for e in dep.get_evidence()] == ["CompanyName", "ProductName", "CompanyName"]


def test_software_identifier_not_duplicated():
    dep = Dependency("/opt/app/MyLib.dll")
    identifier = SoftwareIdentifier.from_name_version("MyLib", "1.0", Confidence.MEDIUM)
    assert identifier.value == "MyLib@1.0"
    dep.add_software_identifier(identifier)
    dep.add_software_identifier(SoftwareIdentifier("MyLib@1.0", Confidence.MEDIUM))
    assert dep.software_identifiers == [identifier]


def test_to_json():
    dep = Dependency("/opt/app/MyLib.dll", name="MyLib", version="1.0")
    dep.add_evidence(EvidenceType.PRODUCT, "dll", "namespace", "MyLib.Core", Confidence.HIGHEST)
    data = json.loads(dep.to_json())
    assert data["name"] == "MyLib"
    assert data["evidence"] == [
        {
            "type": "PRODUCT",
            "source": "dll",
            "name": "namespace",
            "value": "MyLib.Core",
            "confidence": "HIGHEST",
        }
    ]
    assert Dependency.from_dict(data) == dep
