# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from dataclasses import dataclass

from dataclasses_json import dataclass_json

from ._evidence import Confidence


@dataclass_json
@dataclass(frozen=True)
class SoftwareIdentifier:
    """A generic "name@version" coordinate for a dependency."""

    value: str
    confidence: Confidence

    @classmethod
    def from_name_version(cls, name: str, version: str, confidence: Confidence) -> "SoftwareIdentifier":
        return cls(f"{name}@{version}", confidence)
