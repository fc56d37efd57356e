# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

from dataclasses_json import dataclass_json


class EvidenceType(Enum):
    VENDOR = "VENDOR"
    PRODUCT = "PRODUCT"
    VERSION = "VERSION"


@total_ordering
class Confidence(Enum):
    """How much an evidence entry can be trusted, HIGHEST > HIGH > MEDIUM > LOW."""

    HIGHEST = "HIGHEST"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.rank < other.rank


_CONFIDENCE_RANKS = {
    Confidence.LOW: 0,
    Confidence.MEDIUM: 1,
    Confidence.HIGH: 2,
    Confidence.HIGHEST: 3,
}


@dataclass_json
@dataclass(frozen=True)
class Evidence:
    type: EvidenceType
    source: str
    name: str
    value: str
    confidence: Confidence
