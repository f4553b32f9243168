# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Isolated executor: run a synthesized program in a child process.

Each run owns a freshly allocated scratch directory (unique per call, so
concurrent evaluations in separate threads or processes never collide)
containing a single `main.drift`. The directory is removed before `run`
returns on every path: success, build or run failure, timeout, spawn error.

Failures never escape as exceptions; they come back as a failed
`ExecutionOutcome` carrying the reason and the child's stderr.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Callable, Mapping, Optional, Type

from .call_site import SynthesizedProgram
from .config import MODULE_PATH_ENV, TOOLCHAIN_ROOT_ENV, EvalConfig
from .errors import ToolchainTimeout
from .toolchain import SubprocessToolchain, ToolchainRunner, build_child_env, locate_toolchain
from .trace import Tracer

SCRATCH_PREFIX = "drift-pure-eval-"
SOURCE_FILE_NAME = "main.drift"


@dataclass(frozen=True)
class ExecutionOutcome:
	"""Captured stdout on success, or an opaque failure with diagnostics."""

	ok: bool
	stdout: bytes = b""
	stderr: str = ""
	exit_code: Optional[int] = None
	reason: str = ""

	@classmethod
	def success(cls, stdout: bytes, stderr: str = "", exit_code: int = 0) -> "ExecutionOutcome":
		return cls(ok=True, stdout=stdout, stderr=stderr, exit_code=exit_code)

	@classmethod
	def failure(cls, reason: str, *, stderr: str = "", exit_code: Optional[int] = None) -> "ExecutionOutcome":
		return cls(ok=False, stderr=stderr, exit_code=exit_code, reason=reason)


class ScratchWorkspace:
	"""
	Uniquely named temporary directory owning exactly one source file.

	Use as a context manager; the directory and everything in it is deleted
	on exit regardless of how the block ends.
	"""

	def __init__(self, *, parent: Optional[Path] = None, prefix: str = SCRATCH_PREFIX) -> None:
		self._parent = parent
		self._prefix = prefix
		self.path: Optional[Path] = None

	def __enter__(self) -> "ScratchWorkspace":
		self.path = Path(tempfile.mkdtemp(prefix=self._prefix, dir=self._parent))
		return self

	def __exit__(
		self,
		exc_type: Optional[Type[BaseException]],
		exc: Optional[BaseException],
		tb: Optional[TracebackType],
	) -> None:
		self.cleanup()

	@property
	def source_path(self) -> Path:
		if self.path is None:
			raise RuntimeError("scratch workspace is not active")
		return self.path / SOURCE_FILE_NAME

	def write_source(self, text: str) -> Path:
		path = self.source_path
		path.write_text(text, encoding="utf-8")
		return path

	def cleanup(self) -> None:
		if self.path is None:
			return
		path, self.path = self.path, None
		try:
			shutil.rmtree(path)
		except FileNotFoundError:
			pass


RunnerFactory = Callable[[EvalConfig], Optional[ToolchainRunner]]


def default_runner_factory(config: EvalConfig) -> Optional[ToolchainRunner]:
	"""Locate `drift` (pinned root first, then PATH); None when there is none."""
	binary = locate_toolchain(config.toolchain_root)
	if binary is None:
		return None
	return SubprocessToolchain(binary, timeout_s=config.timeout_s)


def _decode_stderr(raw: bytes) -> str:
	return raw.decode("utf-8", errors="replace")


class IsolatedExecutor:
	"""
	Runs synthesized programs through a `ToolchainRunner`.

	`runner` pins a specific runner (tests pass fakes here); otherwise
	`runner_factory` is consulted on every run so a toolchain that appears or
	disappears between runs is picked up.
	"""

	def __init__(
		self,
		config: EvalConfig,
		*,
		runner: Optional[ToolchainRunner] = None,
		runner_factory: RunnerFactory = default_runner_factory,
		base_env: Optional[Mapping[str, str]] = None,
		scratch_parent: Optional[Path] = None,
		tracer: Optional[Tracer] = None,
	) -> None:
		self.config = config
		self._runner = runner
		self._runner_factory = runner_factory
		self._base_env = base_env
		self._scratch_parent = scratch_parent
		self._tracer = tracer or Tracer(config.verbosity)

	def child_env(self) -> dict[str, str]:
		base = os.environ if self._base_env is None else self._base_env
		return build_child_env(
			base,
			guard_env=self.config.guard_env,
			toolchain_root=self.config.toolchain_root,
			module_paths=self.config.module_paths,
			module_path_env=MODULE_PATH_ENV,
			toolchain_root_env=TOOLCHAIN_ROOT_ENV,
		)

	def run(self, program: SynthesizedProgram) -> ExecutionOutcome:
		runner = self._runner if self._runner is not None else self._runner_factory(self.config)
		if runner is None:
			return ExecutionOutcome.failure("toolchain not found (set DRIFT_ROOT or put `drift` on PATH)")
		try:
			with ScratchWorkspace(parent=self._scratch_parent) as ws:
				source_path = ws.write_source(program.source)
				self._tracer.trace(2, f"running toolchain on {source_path}")
				result = runner.run(source_path, self.child_env())
		except ToolchainTimeout as err:
			return ExecutionOutcome.failure(str(err), stderr=_decode_stderr(err.stderr))
		except OSError as err:
			return ExecutionOutcome.failure(f"cannot run toolchain: {err}")
		stderr = _decode_stderr(result.stderr)
		if result.exit_code != 0:
			return ExecutionOutcome.failure(
				f"helper program exited with status {result.exit_code}",
				stderr=stderr,
				exit_code=result.exit_code,
			)
		return ExecutionOutcome.success(result.stdout, stderr=stderr, exit_code=result.exit_code)


__all__ = [
	"SCRATCH_PREFIX",
	"SOURCE_FILE_NAME",
	"ExecutionOutcome",
	"ScratchWorkspace",
	"RunnerFactory",
	"default_runner_factory",
	"IsolatedExecutor",
]
