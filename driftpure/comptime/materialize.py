# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Result materializer: captured stdout → typed compile-time literal.

Decoding is keyed by the call's static return kind. The synthesized program
prints the value and nothing else, so stdout is taken whole; a String result
is never trimmed. Numbers and booleans are parsed strictly: stray output
around them means the evaluation is not trustworthy and the call stays a
runtime call.

Empty stdout is a failure unless the config opts into treating it as the
empty string for String-returning calls. A zero exit status is already
required before we get here, so that opt-in only changes how a successful
run that printed nothing is read.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from driftpure.core.span import Span
from driftpure.core.types_core import ScalarKind, TypeRef, is_unsigned
from driftpure.stage1 import hir_nodes as H

from .call_site import PureCallSite
from .errors import MaterializationFailure
from .executor import ExecutionOutcome
from .literals import INT_MAX, INT_MIN, UINT_MAX, ConstValue

_INT_RE = re.compile(r"-?[0-9]+")
_FLOAT_RE = re.compile(r"-?[0-9]+(\.[0-9]+)?([eE][+-]?[0-9]+)?")


@dataclass(frozen=True)
class EvaluatedConstant:
	"""A typed literal ready to replace the call it was computed from."""

	value: ConstValue
	kind: ScalarKind
	type: TypeRef
	loc: Span = field(default_factory=Span)
	type_checked: bool = True
	origin: str = ""

	def to_literal(self) -> H.HExpr:
		"""Build the HIR literal; `ty` is set because the value is already checked."""
		ty = self.type if self.type_checked else None
		if self.kind is ScalarKind.STRING:
			return H.HLiteralString(value=str(self.value), loc=self.loc, ty=ty)
		if self.kind is ScalarKind.BOOL:
			return H.HLiteralBool(value=bool(self.value), loc=self.loc, ty=ty)
		if self.kind is ScalarKind.FLOAT:
			return H.HLiteralFloat(value=float(self.value), loc=self.loc, ty=ty)
		return H.HLiteralInt(value=int(self.value), loc=self.loc, ty=ty)


def decode_value(text: str, kind: ScalarKind) -> ConstValue:
	"""Parse `text` as a value of `kind`, raising `MaterializationFailure`."""
	if kind is ScalarKind.STRING:
		return text
	if kind is ScalarKind.INT:
		if not _INT_RE.fullmatch(text):
			raise MaterializationFailure(f"output {text!r} is not an integer")
		return int(text)
	if kind is ScalarKind.FLOAT:
		if not _FLOAT_RE.fullmatch(text):
			raise MaterializationFailure(f"output {text!r} is not a float")
		return float(text)
	if kind is ScalarKind.BOOL:
		if text == "true":
			return True
		if text == "false":
			return False
		raise MaterializationFailure(f"output {text!r} is not a boolean")
	raise MaterializationFailure(f"unsupported result kind {kind.name}")


def check_int_range(value: int, ty: TypeRef) -> None:
	"""Reject integers the declared return type cannot hold."""
	low = 0 if is_unsigned(ty) else INT_MIN
	high = UINT_MAX if is_unsigned(ty) else INT_MAX
	if not low <= value <= high:
		raise MaterializationFailure(f"output {value} is out of range for {ty}")


def materialize(
	outcome: ExecutionOutcome,
	site: PureCallSite,
	*,
	loc: Optional[Span] = None,
	accept_empty_string: bool = False,
) -> EvaluatedConstant:
	"""Turn a successful outcome into an `EvaluatedConstant` or raise."""
	if not outcome.ok:
		raise MaterializationFailure(f"no output to materialize: {outcome.reason}")
	kind = site.return_kind
	if kind is None:
		raise MaterializationFailure(f"return type {site.return_type} is not a scalar kind")
	if not outcome.stdout and not (accept_empty_string and kind is ScalarKind.STRING):
		raise MaterializationFailure("helper program produced no output")
	try:
		text = outcome.stdout.decode("utf-8")
	except UnicodeDecodeError as err:
		raise MaterializationFailure(f"output is not valid UTF-8: {err}") from err
	value = decode_value(text, kind)
	if kind is ScalarKind.INT:
		check_int_range(int(value), site.return_type)
	return EvaluatedConstant(
		value=value,
		kind=kind,
		type=site.return_type,
		loc=loc if loc is not None else site.loc,
		type_checked=True,
		origin=site.signature.symbol,
	)


def try_materialize(
	outcome: ExecutionOutcome,
	site: PureCallSite,
	*,
	loc: Optional[Span] = None,
	accept_empty_string: bool = False,
) -> Optional[EvaluatedConstant]:
	"""Constant-or-nothing form of `materialize`."""
	try:
		return materialize(outcome, site, loc=loc, accept_empty_string=accept_empty_string)
	except MaterializationFailure:
		return None


__all__ = ["EvaluatedConstant", "decode_value", "check_int_range", "materialize", "try_materialize"]
