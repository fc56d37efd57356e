# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from ._dependency import Dependency
from ._evidence import Confidence, Evidence, EvidenceType
from ._identifier import SoftwareIdentifier

__all__ = [
    "Confidence",
    "Dependency",
    "Evidence",
    "EvidenceType",
    "SoftwareIdentifier",
]
