# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Evaluator configuration.

The environment is read once, at the edge (`EvalConfig.from_env`), and the
resulting frozen value is threaded through the evaluator. In particular the
recursion guard is never consulted through `os.environ` inside the pass, so
concurrent evaluations in one host process stay independent.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional, Tuple

# Set in the child's environment only; a compiler started with it set must not
# evaluate anything at compile time.
GUARD_ENV = "DRIFT_PURE_EVAL_HELPER"
TOOLCHAIN_ROOT_ENV = "DRIFT_ROOT"
MODULE_PATH_ENV = "DRIFT_MODULE_PATH"
TIMEOUT_ENV = "DRIFT_PURE_EVAL_TIMEOUT"
VERBOSE_ENV = "DRIFT_PURE_EVAL_VERBOSE"

DEFAULT_TIMEOUT_S = 60.0


@dataclass(frozen=True)
class EvalConfig:
	"""
	Knobs for one evaluator instance.

	- `toolchain_root`: pinned toolchain root; `<root>/bin/drift` is preferred
	  and the child gets `DRIFT_ROOT=<root>`.
	- `module_paths`: module roots handed to the child as `DRIFT_MODULE_PATH`.
	- `timeout_s`: wall-clock budget per child; `None` disables the limit.
	- `verbosity`: 0 silent, 1 results, 2 every stage.
	- `accept_empty_string`: treat empty stdout from a String-returning call as
	  the empty string instead of a failed evaluation.
	- `recursion_guard_active`: this process is itself a helper child.
	"""

	toolchain_root: Optional[Path] = None
	module_paths: Tuple[Path, ...] = ()
	timeout_s: Optional[float] = DEFAULT_TIMEOUT_S
	verbosity: int = 0
	accept_empty_string: bool = False
	recursion_guard_active: bool = False
	guard_env: str = GUARD_ENV

	@classmethod
	def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> "EvalConfig":
		"""
		Build a config from environment variables, then apply keyword overrides.

		Malformed numeric values raise `ValueError`; this is a configuration
		error of the host, not an evaluation failure.
		"""
		env = os.environ if environ is None else environ
		root = env.get(TOOLCHAIN_ROOT_ENV) or None
		module_paths = tuple(Path(p) for p in (env.get(MODULE_PATH_ENV) or "").split(os.pathsep) if p)
		timeout_s: Optional[float] = DEFAULT_TIMEOUT_S
		raw_timeout = env.get(TIMEOUT_ENV)
		if raw_timeout:
			timeout_s = float(raw_timeout)
			if timeout_s <= 0:
				timeout_s = None
		verbosity = int(env.get(VERBOSE_ENV) or 0)
		cfg = cls(
			toolchain_root=Path(root) if root else None,
			module_paths=module_paths,
			timeout_s=timeout_s,
			verbosity=verbosity,
			recursion_guard_active=bool(env.get(GUARD_ENV)),
		)
		if overrides:
			cfg = replace(cfg, **overrides)  # type: ignore[arg-type]
		return cfg


__all__ = [
	"EvalConfig",
	"GUARD_ENV",
	"TOOLCHAIN_ROOT_ENV",
	"MODULE_PATH_ENV",
	"TIMEOUT_ENV",
	"VERBOSE_ENV",
	"DEFAULT_TIMEOUT_S",
]
