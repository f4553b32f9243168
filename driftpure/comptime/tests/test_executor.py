# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Isolated executor tests.

Most tests use an in-process FakeToolchain; the last group runs a fake
`drift` executable as a real child process.
"""

from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from driftpure.comptime.call_site import ConstantArgument, PureCallSite
from driftpure.comptime.config import EvalConfig
from driftpure.comptime.errors import ToolchainTimeout
from driftpure.comptime.executor import IsolatedExecutor, ScratchWorkspace, default_runner_factory
from driftpure.comptime.synthesize import synthesize
from driftpure.comptime.toolchain import build_child_env, locate_toolchain
from driftpure.core.types_core import INT, STRING, ScalarKind
from driftpure.test_support import POSIX_ONLY, FakeToolchain, make_signature, scratch_dirs, write_fake_drift


def _lower_program(text: str = "HELLO"):
	sig = make_signature("std.strings", "lower", {"s": STRING}, STRING)
	return synthesize(PureCallSite(signature=sig), [ConstantArgument(ScalarKind.STRING, text)])


def _program(module: str, name: str, ret=STRING):
	sig = make_signature(module, name, {}, ret)
	return synthesize(PureCallSite(signature=sig), [])


def test_scratch_workspace_is_unique_and_removed(tmp_path: Path):
	with ScratchWorkspace(parent=tmp_path) as a, ScratchWorkspace(parent=tmp_path) as b:
		assert a.path != b.path
		src = a.write_source("module m\n")
		assert src.read_text() == "module m\n"
		assert [p.name for p in a.path.iterdir()] == ["main.drift"]
	assert scratch_dirs(tmp_path) == []


def test_scratch_workspace_removed_when_block_raises(tmp_path: Path):
	with pytest.raises(RuntimeError):
		with ScratchWorkspace(parent=tmp_path) as ws:
			ws.write_source("x")
			raise RuntimeError("boom")
	assert scratch_dirs(tmp_path) == []


def test_success_captures_raw_stdout_and_writes_single_source(tmp_path: Path):
	fake = FakeToolchain(stdout=b"hello", stderr=b"warning: unused\n")
	executor = IsolatedExecutor(EvalConfig(), runner=fake, scratch_parent=tmp_path, base_env={})
	outcome = executor.run(_lower_program())
	assert outcome.ok
	assert outcome.stdout == b"hello"
	assert outcome.stderr == "warning: unused\n"
	assert len(fake.calls) == 1
	run = fake.calls[0]
	assert run.path.name == "main.drift"
	assert 'strings.lower("HELLO")' in run.source
	assert not run.path.exists()
	assert scratch_dirs(tmp_path) == []


def test_child_env_carries_guard_and_overrides_without_touching_base(tmp_path: Path):
	base = {"PATH": "/usr/bin", "DRIFT_ROOT": "/elsewhere"}
	cfg = EvalConfig(toolchain_root=tmp_path / "tc", module_paths=(tmp_path / "a", tmp_path / "b"))
	fake = FakeToolchain(stdout=b"x")
	IsolatedExecutor(cfg, runner=fake, scratch_parent=tmp_path, base_env=base).run(_lower_program())
	env = fake.calls[0].env
	assert env["PATH"] == "/usr/bin"
	assert env["DRIFT_PURE_EVAL_HELPER"] == "1"
	assert env["DRIFT_ROOT"] == str(tmp_path / "tc")
	assert env["DRIFT_MODULE_PATH"].split(os.pathsep) == [str(tmp_path / "a"), str(tmp_path / "b")]
	assert base == {"PATH": "/usr/bin", "DRIFT_ROOT": "/elsewhere"}


def test_build_child_env_keeps_ambient_root_when_not_pinned():
	env = build_child_env({"DRIFT_ROOT": "/opt/drift"}, guard_env="G")
	assert env == {"DRIFT_ROOT": "/opt/drift", "G": "1"}


def test_nonzero_exit_is_a_failure_with_stderr(tmp_path: Path):
	fake = FakeToolchain(stdout=b"partial", stderr=b"error: no such module\n", exit_code=1)
	outcome = IsolatedExecutor(EvalConfig(), runner=fake, scratch_parent=tmp_path).run(_lower_program())
	assert not outcome.ok
	assert outcome.exit_code == 1
	assert outcome.stdout == b""
	assert "no such module" in outcome.stderr
	assert "status 1" in outcome.reason
	assert scratch_dirs(tmp_path) == []


def test_spawn_error_is_a_failure(tmp_path: Path):
	fake = FakeToolchain(raises=FileNotFoundError(2, "No such file", "drift"))
	outcome = IsolatedExecutor(EvalConfig(), runner=fake, scratch_parent=tmp_path).run(_lower_program())
	assert not outcome.ok
	assert "cannot run toolchain" in outcome.reason
	assert scratch_dirs(tmp_path) == []


def test_timeout_is_a_failure(tmp_path: Path):
	fake = FakeToolchain(raises=ToolchainTimeout(0.5, stderr=b"still compiling"))
	outcome = IsolatedExecutor(EvalConfig(), runner=fake, scratch_parent=tmp_path).run(_lower_program())
	assert not outcome.ok
	assert "timed out" in outcome.reason
	assert outcome.stderr == "still compiling"
	assert scratch_dirs(tmp_path) == []


def test_missing_toolchain_is_a_failure(tmp_path: Path):
	executor = IsolatedExecutor(EvalConfig(), runner_factory=lambda cfg: None, scratch_parent=tmp_path)
	outcome = executor.run(_lower_program())
	assert not outcome.ok
	assert "toolchain not found" in outcome.reason


def test_locate_prefers_pinned_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
	pinned = write_fake_drift(tmp_path / "pinned")
	other = write_fake_drift(tmp_path / "onpath")
	monkeypatch.setenv("PATH", str(other.parent))
	assert locate_toolchain(tmp_path / "pinned") == pinned
	assert locate_toolchain(tmp_path / "missing") == other
	assert locate_toolchain(None) == other
	monkeypatch.setenv("PATH", str(tmp_path / "nothing-here"))
	assert locate_toolchain(tmp_path / "missing") is None


@pytest.mark.skipif(POSIX_ONLY, reason="fake toolchain is a POSIX script")
class TestSubprocessToolchain:
	def _executor(self, tmp_path: Path, **cfg) -> IsolatedExecutor:
		root = tmp_path / "tc"
		write_fake_drift(root)
		config = EvalConfig(toolchain_root=root, **cfg)
		return IsolatedExecutor(config, runner_factory=default_runner_factory, scratch_parent=tmp_path)

	def test_runs_program_and_captures_stdout(self, tmp_path: Path):
		outcome = self._executor(tmp_path).run(_lower_program("HELLO WORLD"))
		assert outcome.ok, outcome.stderr
		assert outcome.stdout == b"hello world"
		assert scratch_dirs(tmp_path) == []

	def test_child_sees_pinned_root(self, tmp_path: Path):
		outcome = self._executor(tmp_path).run(_program("m_env", "root"))
		assert outcome.ok, outcome.stderr
		assert outcome.stdout.decode() == str(tmp_path / "tc")

	def test_source_file_is_gone_after_run(self, tmp_path: Path):
		outcome = self._executor(tmp_path).run(_program("m_env", "where"))
		assert outcome.ok, outcome.stderr
		source = Path(outcome.stdout.decode())
		assert source.name == "main.drift"
		assert not source.exists()
		assert not source.parent.exists()

	def test_failing_program_reports_stderr(self, tmp_path: Path):
		outcome = self._executor(tmp_path).run(_program("m_err", "fail"))
		assert not outcome.ok
		assert "panic: fail() called" in outcome.stderr
		assert scratch_dirs(tmp_path) == []

	def test_timeout_kills_child(self, tmp_path: Path):
		outcome = self._executor(tmp_path, timeout_s=0.5).run(_program("m_slow", "spin", INT))
		assert not outcome.ok
		assert "timed out" in outcome.reason
		assert scratch_dirs(tmp_path) == []

	def test_timeout_kills_the_whole_process_group(self, tmp_path: Path):
		marker = tmp_path / "grandchild-survived"
		sig = make_signature("m_slow", "linger", {"path": STRING}, STRING)
		program = synthesize(PureCallSite(signature=sig), [ConstantArgument(ScalarKind.STRING, str(marker))])
		started = time.monotonic()
		outcome = self._executor(tmp_path, timeout_s=0.5).run(program)
		assert time.monotonic() - started < 10
		assert not outcome.ok
		assert "timed out" in outcome.reason
		# the grandchild would write the marker two seconds after starting
		time.sleep(3)
		assert not marker.exists()
		assert scratch_dirs(tmp_path) == []
