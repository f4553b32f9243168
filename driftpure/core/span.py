# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span representation used by diagnostics.

A Span carries best-effort file/line/column info plus the raw parser location
object it was built from (lark tokens and tree metadata both work).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from an existing parser/location object.

		If `loc` is already a Span, it is returned unchanged. Lark tree meta
		objects without positions (empty rules) produce an unknown span.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			return loc
		if getattr(loc, "empty", False):
			return cls(file=file)
		return cls(
			file=file or getattr(loc, "file", None) or getattr(loc, "filename", None) or None,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			raw=loc,
		)

	@property
	def is_known(self) -> bool:
		return self.line is not None

	def __str__(self) -> str:
		file = self.file or "<unknown>"
		line = self.line if self.line is not None else "?"
		column = self.column if self.column is not None else "?"
		return f"{file}:{line}:{column}"


__all__ = ["Span"]
