# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
The build-and-run toolchain as an injectable capability.

The executor only needs "run this source file and give me stdout, stderr and
the exit status". `ToolchainRunner` is that contract; `SubprocessToolchain`
is the real implementation (`drift run <path>`), and tests substitute fakes
that never spawn a process.
"""

from __future__ import annotations

import os
import shutil
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, Sequence

from .errors import ToolchainTimeout

TOOLCHAIN_NAME = "drift"

_POSIX = os.name == "posix"


@dataclass(frozen=True)
class ToolchainResult:
	"""Raw result of one toolchain invocation."""

	stdout: bytes
	stderr: bytes
	exit_code: int


class ToolchainRunner(Protocol):
	"""Build-and-run contract used by the isolated executor."""

	def run(self, source_path: Path, env: Mapping[str, str]) -> ToolchainResult:
		"""
		Build and run `source_path` with exactly `env` as the child environment.

		May raise `OSError` when the child cannot be spawned and
		`ToolchainTimeout` when it exceeds its budget.
		"""
		...


def locate_toolchain(root: Optional[Path] = None) -> Optional[Path]:
	"""
	Find the `drift` executable.

	A binary under the pinned toolchain root (`<root>/bin/drift`) wins so the
	child is built by the same toolchain as the host; otherwise fall back to
	whatever `drift` is on PATH.
	"""
	if root is not None:
		pinned = root / "bin" / TOOLCHAIN_NAME
		if pinned.is_file():
			return pinned
	found = shutil.which(TOOLCHAIN_NAME)
	return Path(found) if found else None


def build_child_env(
	base_env: Mapping[str, str],
	*,
	guard_env: str,
	toolchain_root: Optional[Path] = None,
	module_paths: Sequence[Path] = (),
	module_path_env: str = "DRIFT_MODULE_PATH",
	toolchain_root_env: str = "DRIFT_ROOT",
) -> Dict[str, str]:
	"""
	Build the child's environment: ambient env plus explicit overrides.

	Returns a fresh dict; `base_env` (typically `os.environ`) is never
	modified, which keeps the recursion guard scoped to the child.
	"""
	env = dict(base_env)
	if toolchain_root is not None:
		env[toolchain_root_env] = str(toolchain_root)
	if module_paths:
		env[module_path_env] = os.pathsep.join(str(p) for p in module_paths)
	env[guard_env] = "1"
	return env


class SubprocessToolchain:
	"""Runs `<binary> run <source>` as a child process."""

	def __init__(self, binary: Path, *, timeout_s: Optional[float] = None, cwd: Optional[Path] = None) -> None:
		self.binary = binary
		self.timeout_s = timeout_s
		self.cwd = cwd

	def command(self, source_path: Path) -> list[str]:
		return [str(self.binary), "run", str(source_path)]

	def run(self, source_path: Path, env: Mapping[str, str]) -> ToolchainResult:
		# `drift run` builds and then runs the helper as a grandchild; a new
		# session lets a timeout take down the whole process group.
		proc = subprocess.Popen(
			self.command(source_path),
			cwd=self.cwd or source_path.parent,
			env=dict(env),
			stdin=subprocess.DEVNULL,
			stdout=subprocess.PIPE,
			stderr=subprocess.PIPE,
			start_new_session=_POSIX,
		)
		try:
			out, err = proc.communicate(timeout=self.timeout_s)
		except subprocess.TimeoutExpired:
			_kill_tree(proc)
			_out, err = proc.communicate()
			raise ToolchainTimeout(self.timeout_s or 0.0, stderr=err or b"") from None
		return ToolchainResult(stdout=out, stderr=err, exit_code=proc.returncode)


def _kill_tree(proc: "subprocess.Popen[bytes]") -> None:
	if not _POSIX:
		proc.kill()
		return
	try:
		os.killpg(proc.pid, signal.SIGKILL)
	except ProcessLookupError:
		# group already gone; reaped below
		pass


__all__ = [
	"TOOLCHAIN_NAME",
	"ToolchainResult",
	"ToolchainRunner",
	"locate_toolchain",
	"build_child_env",
	"SubprocessToolchain",
]
