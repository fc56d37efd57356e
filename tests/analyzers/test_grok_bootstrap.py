# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import subprocess
import sys
import textwrap
import zipfile
from unittest.mock import patch

import pytest

from assemblyscan.analyzers.grok import Disabled, Ready, bootstrap, prepare
from assemblyscan.analyzers.grok.bootstrap import HELPER_NAME, deploy_helper, resolve_interpreter
from assemblyscan.errors import BootstrapFailure, SelfTestFailure


def _helper(body: str) -> str:
    return textwrap.dedent(body)


def test_prepare_ready(grok_payload, tmp_path):
    state = prepare(grok_payload, interpreter=sys.executable, temp_dir=tmp_path / "work")
    assert isinstance(state, Ready)
    with state:
        assert state.template.interpreter == sys.executable
        assert state.template.helper_path == str(state.workdir / HELPER_NAME)
        assert state.workdir.parent == tmp_path / "work"
        assert (state.workdir / HELPER_NAME).is_file()
    assert not state.workdir.exists()


def test_close_is_idempotent(grok_payload, tmp_path):
    state = prepare(grok_payload, interpreter=sys.executable, temp_dir=tmp_path)
    state.close()
    state.close()
    assert not state.workdir.exists()


def test_prepare_from_zip(grok_payload, tmp_path):
    archive = tmp_path / "GrokAssembly.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.write(grok_payload / HELPER_NAME, HELPER_NAME)
    with prepare(archive, interpreter=sys.executable, temp_dir=tmp_path / "work") as state:
        assert (state.workdir / HELPER_NAME).is_file()


def test_prepare_from_helper_file(grok_payload, tmp_path):
    with prepare(grok_payload / HELPER_NAME, interpreter=sys.executable, temp_dir=tmp_path) as state:
        assert (state.workdir / HELPER_NAME).is_file()


def test_missing_payload(tmp_path):
    with pytest.raises(BootstrapFailure):
        prepare(tmp_path / "missing.zip", interpreter=sys.executable, temp_dir=tmp_path)


def test_zip_without_helper(tmp_path):
    archive = tmp_path / "empty.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("README.txt", "nothing here")
    work = tmp_path / "work"
    with pytest.raises(BootstrapFailure):
        deploy_helper(archive, work)
    assert not any(work.iterdir())


def test_zip_escaping_workdir(tmp_path):
    archive = tmp_path / "evil.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("../escaped.txt", "nope")
        zf.writestr(HELPER_NAME, "")
    work = tmp_path / "work"
    with pytest.raises(BootstrapFailure):
        deploy_helper(archive, work)
    assert not (tmp_path / "escaped.txt").exists()
    assert not any(work.iterdir())


def test_no_interpreter_disables(grok_payload, tmp_path):
    work = tmp_path / "work"
    with patch.object(bootstrap, "is_interpreter_available", return_value=False):
        state = prepare(grok_payload, temp_dir=work)
    assert isinstance(state, Disabled)
    assert not any(work.iterdir())


def test_self_test_exit_0_fails(write_helper, tmp_path):
    write_helper(_helper(
        """\
        import sys
        sys.stdout.write("<assembly><error>No file</error></assembly>")
        """
    ))
    work = tmp_path / "work"
    with pytest.raises(SelfTestFailure):
        prepare(tmp_path / "payload", interpreter=sys.executable, temp_dir=work)
    assert not any(work.iterdir())


def test_self_test_without_error_fails(write_helper, tmp_path):
    write_helper(_helper(
        """\
        import sys
        sys.stdout.write("<assembly></assembly>")
        sys.exit(1)
        """
    ))
    with pytest.raises(SelfTestFailure):
        prepare(tmp_path / "payload", interpreter=sys.executable, temp_dir=tmp_path / "work")


def test_self_test_unreadable_output_fails(write_helper, tmp_path):
    write_helper("import sys\nsys.exit(1)\n")
    with pytest.raises(SelfTestFailure):
        prepare(tmp_path / "payload", interpreter=sys.executable, temp_dir=tmp_path / "work")


def test_self_test_cannot_start(grok_payload, tmp_path):
    with pytest.raises(SelfTestFailure):
        prepare(grok_payload, interpreter=str(tmp_path / "no-such-dotnet"), temp_dir=tmp_path / "work")


@pytest.mark.parametrize("error", [KeyboardInterrupt, RuntimeError("unexpected")])
def test_interrupted_self_test_removes_workdir(grok_payload, tmp_path, error):
    work = tmp_path / "work"
    with patch.object(bootstrap, "run_helper", side_effect=error):
        with pytest.raises((KeyboardInterrupt, RuntimeError)):
            prepare(grok_payload, interpreter=sys.executable, temp_dir=work)
    assert not any(work.iterdir())


def test_resolve_interpreter_prefers_configured():
    with patch.object(bootstrap, "is_interpreter_available") as probe:
        assert resolve_interpreter("/usr/share/dotnet/dotnet") == "/usr/share/dotnet/dotnet"
    probe.assert_not_called()


def test_resolve_interpreter_probes_dotnet():
    completed = subprocess.CompletedProcess(["dotnet", "--version"], 0, b"8.0.100\n", b"")
    with patch.object(bootstrap.subprocess, "run", return_value=completed) as run:
        assert resolve_interpreter() == "dotnet"
    assert run.call_args.args[0] == ["dotnet", "--version"]


def test_probe_uses_exit_code_only():
    # output on stdout does not make up for a failing exit code
    completed = subprocess.CompletedProcess(["dotnet", "--version"], 1, b"8.0.100\n", b"")
    with patch.object(bootstrap.subprocess, "run", return_value=completed):
        assert resolve_interpreter() is None


def test_probe_missing_executable():
    with patch.object(bootstrap.subprocess, "run", side_effect=FileNotFoundError("dotnet")):
        assert resolve_interpreter() is None
