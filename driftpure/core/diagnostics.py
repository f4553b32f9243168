# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the evaluator and its driver.

Compile-time evaluation never produces user-facing errors; everything it
reports is a `note` in the `comptime` phase. The structure is shared with the
CLI's JSON output so both renderings stay in sync.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a compiler diagnostic (error/warning/note)."""

	message: str
	code: str | None = None
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def to_json(self) -> Dict[str, Any]:
		"""Structured form used by `--json` (phase/message/severity/file/line/column)."""
		return {
			"phase": self.phase,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
		}

	def render(self) -> str:
		"""Human-readable single line: `file:line:col: severity: message`."""
		text = f"{self.span}: {self.severity}: {self.message}"
		for note in self.notes:
			text += f"\n  note: {note}"
		return text


__all__ = ["Diagnostic"]
