# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import pathlib
import sys
import textwrap

import pytest

from assemblyscan.analyzers.grok import InvocationTemplate
from assemblyscan.configmanager import ConfigManager

# Stands in for GrokAssembly.dll; run with the current Python interpreter instead of dotnet.
# Behavior depends on the contents of the target file:
#   "<..."         -> written to stdout, exit 0
#   "exit:N\nTEXT" -> TEXT written to stderr, exit N
#   "noisy:XML"    -> 1 MiB written to stderr, then XML to stdout, exit 0
#   "sleep"        -> never finishes on its own
#   anything else  -> exit 3 (not a .NET assembly)
FAKE_GROK = textwrap.dedent(
    """\
    import sys
    import time

    if len(sys.argv) < 2:
        sys.stdout.write("<assembly><error>No file was specified</error></assembly>")
        sys.exit(1)
    with open(sys.argv[1], encoding="utf-8") as f:
        content = f.read()
    if content.startswith("exit:"):
        code, _, rest = content[len("exit:"):].partition("\\n")
        sys.stderr.write(rest)
        sys.exit(int(code))
    if content.startswith("noisy:"):
        sys.stderr.write("x" * (1 << 20))
        sys.stderr.flush()
        content = content[len("noisy:"):]
    if content == "sleep":
        time.sleep(60)
    if not content.startswith("<"):
        sys.exit(3)
    sys.stdout.write(content)
    """
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path):
    """Keep tests from reading or writing the user's configuration file."""
    ConfigManager.delete_instance("assemblyscan")
    config_manager = ConfigManager(config_dir=tmp_path / "config")
    yield config_manager
    ConfigManager.delete_instance("assemblyscan")


@pytest.fixture(name="write_helper")
def fixture_write_helper(tmp_path):
    def write_helper(source: str = FAKE_GROK, name: str = "GrokAssembly.dll") -> pathlib.Path:
        payload_dir = tmp_path / "payload"
        payload_dir.mkdir(exist_ok=True)
        helper = payload_dir / name
        helper.write_text(source, encoding="utf-8")
        return helper

    return write_helper


@pytest.fixture(name="grok_payload")
def fixture_grok_payload(write_helper):
    """Directory containing a working fake GrokAssembly.dll."""
    return write_helper().parent


@pytest.fixture(name="template")
def fixture_template(write_helper):
    return InvocationTemplate(sys.executable, str(write_helper()))


@pytest.fixture(name="make_assembly")
def fixture_make_assembly(tmp_path):
    """Create a file to analyze; its contents tell the fake helper how to respond."""

    def make_assembly(name: str, content: str) -> pathlib.Path:
        target_dir = tmp_path / "specimen"
        target_dir.mkdir(exist_ok=True)
        target = target_dir / name
        target.write_text(content, encoding="utf-8")
        return target

    return make_assembly


def _grok_xml(**fields) -> str:
    parts = ["<assembly>"]
    for tag, value in fields.items():
        if tag == "namespaces":
            parts.append("<namespaces>")
            parts.extend(f"<namespace>{ns}</namespace>" for ns in value)
            parts.append("</namespaces>")
        else:
            parts.append(f"<{tag}>{value}</{tag}>")
    parts.append("</assembly>")
    return "".join(parts)


@pytest.fixture(name="grok_xml")
def fixture_grok_xml():
    """Builds a GrokAssembly response; the `namespaces` keyword takes a list."""
    return _grok_xml
