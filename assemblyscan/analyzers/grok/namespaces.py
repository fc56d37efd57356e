# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import re
from typing import Iterable, List, Optional

from assemblyscan.dependency import Confidence, Dependency, EvidenceType

NAMESPACE_EVIDENCE_SOURCE = "dll"
NAMESPACE_EVIDENCE_NAME = "namespace"


def _is_boundary(value: str, index: int) -> bool:
    # just outside either end of the value counts as a boundary
    return index < 0 or index >= len(value) or not value[index].isalnum()


def match_namespaces(tokens: Optional[Iterable[str]], value: Optional[str]) -> List[str]:
    """Return the tokens that appear in value as a whole word, in the order given.

    Only the first case-insensitive occurrence of each token is checked; it counts
    if it is not directly preceded or followed by a letter or digit. So "Log" is
    found in "My.Log.Util" and "Log" but not in "Login".

    Args:
        tokens (Optional[Iterable[str]]): Candidate tokens, typically namespace names.
        value (Optional[str]): The string to search in.

    Returns:
        List[str]: The accepted tokens.
    """
    if not value or not tokens:
        return []
    matches = []
    for token in tokens:
        if not token:
            continue
        found = re.search(re.escape(token), value, re.IGNORECASE)
        if found is None:
            continue
        if _is_boundary(value, found.start() - 1) and _is_boundary(value, found.end()):
            matches.append(token)
    return matches


def add_matching_values(
    dependency: Dependency,
    tokens: Optional[Iterable[str]],
    value: Optional[str],
    evidence_type: EvidenceType,
) -> List[str]:
    """Add HIGHEST confidence evidence for every token found in value by `match_namespaces`."""
    matches = match_namespaces(tokens, value)
    for token in matches:
        dependency.add_evidence(
            evidence_type,
            NAMESPACE_EVIDENCE_SOURCE,
            NAMESPACE_EVIDENCE_NAME,
            token,
            Confidence.HIGHEST,
        )
    return matches
