# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Value types passed between the evaluator stages.

All of them are immutable: a call site is read-only to the evaluator, constant
arguments are built once by the eligibility checker, and a synthesized program
is consumed once by the executor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from driftpure.core.function_id import FunctionId
from driftpure.core.span import Span
from driftpure.core.types_core import FnSignature, ScalarKind, TypeRef, scalar_kind_of

from .literals import ConstValue, render_literal


@dataclass(frozen=True)
class PureCallSite:
	"""A call to a module-level function together with its resolved signature."""

	signature: FnSignature
	loc: Span = field(default_factory=Span)

	@property
	def fn_id(self) -> FunctionId:
		return self.signature.fn_id

	@property
	def param_types(self) -> Tuple[TypeRef, ...]:
		return self.signature.param_types

	@property
	def return_type(self) -> TypeRef:
		return self.signature.return_type

	@property
	def return_kind(self) -> ScalarKind | None:
		return scalar_kind_of(self.signature.return_type)

	@property
	def is_pure(self) -> bool:
		return self.signature.is_pure


@dataclass(frozen=True)
class ConstantArgument:
	"""One literal argument: its kind and value, plus its Drift source rendering."""

	kind: ScalarKind
	value: ConstValue

	@property
	def text(self) -> str:
		"""Source rendering; raises `SynthesisUnsupportedError` when there is none."""
		return render_literal(self.kind, self.value)


@dataclass(frozen=True)
class SynthesizedProgram:
	"""A complete standalone compilation unit (`main.drift`)."""

	source: str
	site: PureCallSite
	args: Tuple[ConstantArgument, ...] = ()


__all__ = ["PureCallSite", "ConstantArgument", "SynthesizedProgram"]
