# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Leveled trace output for compile-time evaluation.

Trace lines are observational: they are recorded as `comptime` notes and, when
the host's verbosity allows, echoed to a stream. Nothing reads them back to
make decisions.
"""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from driftpure.core.diagnostics import Diagnostic
from driftpure.core.span import Span


class Tracer:
	def __init__(self, verbosity: int = 0, stream: Optional[TextIO] = None) -> None:
		self.verbosity = verbosity
		self._stream = stream
		self.diagnostics: List[Diagnostic] = []

	def enabled(self, level: int) -> bool:
		return self.verbosity >= level

	def trace(self, level: int, message: str, *, span: Span | None = None, code: str | None = None) -> None:
		"""Record `message` when `level` is enabled and echo it to the stream."""
		if not self.enabled(level):
			return
		diag = Diagnostic(message=message, code=code, phase="comptime", severity="note", span=span or Span())
		self.diagnostics.append(diag)
		stream = self._stream if self._stream is not None else sys.stderr
		print(f"comptime: {message}", file=stream)


__all__ = ["Tracer"]
