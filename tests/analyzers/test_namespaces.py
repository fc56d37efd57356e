# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import pytest

from assemblyscan.analyzers.grok.namespaces import add_matching_values, match_namespaces
from assemblyscan.dependency import Confidence, Dependency, Evidence, EvidenceType


@pytest.mark.parametrize(
    "value,expected",
    [
        ("My.Log.Util", ["Log"]),
        ("Log", ["Log"]),
        ("Log.Util", ["Log"]),
        ("My.Log", ["Log"]),
        ("Login", []),
        ("Catalog", []),
        ("MyLog.Util", []),
        ("My Log", ["Log"]),
    ],
)
def test_boundaries(value, expected):
    assert match_namespaces(["Log"], value) == expected


def test_case_insensitive():
    assert match_namespaces(["NEWTONSOFT"], "Newtonsoft.Json") == ["NEWTONSOFT"]
    assert match_namespaces(["newtonsoft.json"], "Newtonsoft.Json.dll") == ["newtonsoft.json"]


def test_only_first_occurrence_is_checked():
    # the first "Log" is inside "Login", so the later standalone one is not considered
    assert match_namespaces(["Log"], "Login.Log") == []


def test_preserves_token_order():
    tokens = ["Json", "Newtonsoft", "Missing", "Newtonsoft.Json"]
    assert match_namespaces(tokens, "Newtonsoft.Json.dll") == ["Json", "Newtonsoft", "Newtonsoft.Json"]


def test_token_longer_than_value():
    assert match_namespaces(["MyLib.Core"], "MyLib") == []


@pytest.mark.parametrize("tokens,value", [([], "Value"), (None, "Value"), (["A"], ""), (["A"], None), ([""], "A")])
def test_empty_inputs(tokens, value):
    assert match_namespaces(tokens, value) == []


def test_regex_characters_are_literal():
    assert match_namespaces(["C++"], "C++.Runtime") == ["C++"]
    assert match_namespaces(["A.B"], "AxB") == []


def test_namespaces_that_do_not_boundary_match_dll_name():
    assert match_namespaces(["MyLib.Core", "MyLib.Utils"], "MyLib.dll") == []


def test_add_matching_values():
    dep = Dependency("/tmp/Newtonsoft.Json.dll")
    matches = add_matching_values(dep, ["Newtonsoft.Json", "Login"], "Newtonsoft.Json.dll", EvidenceType.VENDOR)
    assert matches == ["Newtonsoft.Json"]
    assert dep.evidence == [
        Evidence(EvidenceType.VENDOR, "dll", "namespace", "Newtonsoft.Json", Confidence.HIGHEST)
    ]


def test_add_matching_values_without_match_adds_nothing():
    dep = Dependency("/tmp/Login.dll")
    assert not add_matching_values(dep, ["Log"], "Login.dll", EvidenceType.PRODUCT)
    assert not dep.evidence
