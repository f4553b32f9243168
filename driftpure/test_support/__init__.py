# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared helpers for evaluator tests.

Two toolchain stand-ins:
  - `FakeToolchain`: in-process `ToolchainRunner` that records what it was
    asked to run and answers from a canned result or a handler.
  - `write_fake_drift(root)`: writes an executable `<root>/bin/drift` that
    understands `drift run main.drift` for synthesized caller programs and
    implements a handful of pure functions, so the real subprocess path can
    be exercised without a Drift installation.
"""

from __future__ import annotations

import os
import stat
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional

from driftpure.comptime.toolchain import ToolchainResult
from driftpure.core.function_id import FunctionId
from driftpure.core.types_core import FnSignature, ParamSig, TypeRef


def make_signature(
	module: str,
	name: str,
	params: Mapping[str, TypeRef] | None = None,
	ret: TypeRef = TypeRef("String"),
	*,
	pure: bool = True,
) -> FnSignature:
	"""Build an FnSignature from a name -> type mapping of parameters."""
	return FnSignature(
		fn_id=FunctionId(module=module, name=name),
		params=tuple(ParamSig(name=n, type=t) for n, t in (params or {}).items()),
		return_type=ret,
		is_pure=pure,
	)


@dataclass
class FakeRun:
	source: str
	path: Path
	env: Dict[str, str]


@dataclass
class FakeToolchain:
	"""In-process ToolchainRunner double."""

	stdout: bytes = b""
	stderr: bytes = b""
	exit_code: int = 0
	raises: Optional[BaseException] = None
	handler: Optional[Callable[[str, Mapping[str, str]], ToolchainResult]] = None
	calls: List[FakeRun] = field(default_factory=list)

	def run(self, source_path: Path, env: Mapping[str, str]) -> ToolchainResult:
		self.calls.append(FakeRun(source=source_path.read_text(encoding="utf-8"), path=source_path, env=dict(env)))
		if self.raises is not None:
			raise self.raises
		if self.handler is not None:
			return self.handler(self.calls[-1].source, env)
		return ToolchainResult(stdout=self.stdout, stderr=self.stderr, exit_code=self.exit_code)


_FAKE_DRIFT = r'''
import codecs
import os
import re
import subprocess
import sys
import time

_CALL = re.compile(r"val result: (\w+) = (\w+)\.(\w+)\((.*)\);")
_ARG = re.compile(r'"(?:\\.|[^"\\])*"|-?[0-9]+\.[0-9]+(?:e-?[0-9]+)?|-?[0-9]+|true|false')
_LINGER = "import sys, time; time.sleep(2); open(sys.argv[1], 'w').close()"


def _decode(tok):
	if tok.startswith('"'):
		return codecs.decode(tok[1:-1], "unicode_escape").encode("latin-1").decode("utf-8")
	if tok in ("true", "false"):
		return tok == "true"
	if "." in tok:
		return float(tok)
	return int(tok)


def _fmt(value):
	if isinstance(value, bool):
		return "true" if value else "false"
	return str(value)


FUNCS = {
	"lower": lambda s: s.lower(),
	"upper": lambda s: s.upper(),
	"echo": lambda s: s,
	"itoa": lambda n: str(n),
	"add": lambda a, b: a + b,
	"add_pure": lambda a, b: a + b,
	"is_even": lambda n: n % 2 == 0,
	"half": lambda n: n / 2.0,
	"empty": lambda: "",
	"root": lambda: os.environ.get("DRIFT_ROOT", ""),
	"modpath": lambda: os.environ.get("DRIFT_MODULE_PATH", ""),
	"where": lambda: os.path.abspath(sys.argv[2]),
}


def main():
	if len(sys.argv) != 3 or sys.argv[1] != "run":
		sys.stderr.write("usage: drift run <file>\n")
		return 2
	if os.environ.get("DRIFT_PURE_EVAL_HELPER") != "1":
		sys.stderr.write("recursion guard missing\n")
		return 3
	with open(sys.argv[2], encoding="utf-8") as f:
		src = f.read()
	m = _CALL.search(src)
	if m is None:
		sys.stderr.write("error: cannot parse helper program\n")
		return 1
	ret, _alias, name, raw_args = m.groups()
	args = [_decode(t) for t in _ARG.findall(raw_args)]
	if name == "fail":
		sys.stderr.write("panic: fail() called\n")
		return 1
	if name == "spin":
		time.sleep(30)
		return 0
	if name == "linger":
		# outlives its parent unless the whole process group is killed
		subprocess.Popen([sys.executable, "-c", _LINGER, args[0]])
		time.sleep(30)
		return 0
	if name == "garbage":
		sys.stdout.write("not a number")
		return 0
	if name not in FUNCS:
		sys.stderr.write("error: unknown function %s\n" % name)
		return 1
	value = FUNCS[name](*args)
	sys.stdout.write(value if ret == "String" else _fmt(value))
	return 0


if __name__ == "__main__":
	sys.exit(main())
'''


def write_fake_drift(root: Path) -> Path:
	"""Write an executable fake `drift` under `<root>/bin` and return its path."""
	bin_dir = root / "bin"
	bin_dir.mkdir(parents=True, exist_ok=True)
	path = bin_dir / "drift"
	path.write_text(f"#!{sys.executable}\n{_FAKE_DRIFT.lstrip()}", encoding="utf-8")
	path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
	return path


def scratch_dirs(parent: Path) -> List[Path]:
	"""Scratch directories left under `parent` (should always be empty after a run)."""
	return sorted(p for p in parent.iterdir() if p.is_dir() and p.name.startswith("drift-pure-eval-"))


POSIX_ONLY = os.name != "posix"

__all__ = [
	"make_signature",
	"FakeRun",
	"FakeToolchain",
	"write_fake_drift",
	"scratch_dirs",
	"POSIX_ONLY",
]
