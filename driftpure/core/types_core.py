# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Minimal type model for compile-time evaluation.

The evaluator only ever needs to know whether a declared type is one of the
four scalar kinds it can render as a source literal and print back. Every
other type (generics, references, arrays, structs) is "compound" and makes a
call ineligible.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple

from .function_id import FunctionId, function_symbol
from .span import Span


class ScalarKind(Enum):
	"""Literal kinds that survive a trip through source text and stdout."""
	STRING = auto()
	INT = auto()
	FLOAT = auto()
	BOOL = auto()


@dataclass(frozen=True)
class TypeRef:
	"""Surface type reference: `Int`, `String`, `Array<Int>`, `&String`, ..."""
	name: str
	args: Tuple["TypeRef", ...] = ()
	is_ref: bool = False

	def __str__(self) -> str:
		prefix = "&" if self.is_ref else ""
		if not self.args:
			return f"{prefix}{self.name}"
		inner = ", ".join(str(a) for a in self.args)
		return f"{prefix}{self.name}<{inner}>"


_SCALAR_NAMES = {
	"String": ScalarKind.STRING,
	"Int": ScalarKind.INT,
	"Uint": ScalarKind.INT,
	"Float": ScalarKind.FLOAT,
	"Bool": ScalarKind.BOOL,
}

STRING = TypeRef("String")
INT = TypeRef("Int")
UINT = TypeRef("Uint")
FLOAT = TypeRef("Float")
BOOL = TypeRef("Bool")


def scalar_kind_of(ty: TypeRef | None) -> Optional[ScalarKind]:
	"""Return the scalar kind for `ty`, or None when the type is compound/unknown."""
	if ty is None or ty.is_ref or ty.args:
		return None
	return _SCALAR_NAMES.get(ty.name)


def is_unsigned(ty: TypeRef) -> bool:
	return ty.name == "Uint" and not ty.args and not ty.is_ref


@dataclass(frozen=True)
class ParamSig:
	name: str
	type: TypeRef


@dataclass(frozen=True)
class FnSignature:
	"""
	Resolved signature of a callable as seen by the call walker.

	`is_pure` comes from the `@pure` attribute. It is a trusted assertion by the
	author of the function; nothing here checks the body for side effects.
	"""

	fn_id: FunctionId
	params: Tuple[ParamSig, ...]
	return_type: TypeRef
	is_pure: bool = False
	loc: Span = field(default_factory=Span)

	@property
	def symbol(self) -> str:
		return function_symbol(self.fn_id)

	@property
	def param_types(self) -> Tuple[TypeRef, ...]:
		return tuple(p.type for p in self.params)


__all__ = [
	"ScalarKind",
	"TypeRef",
	"STRING",
	"INT",
	"UINT",
	"FLOAT",
	"BOOL",
	"scalar_kind_of",
	"is_unsigned",
	"ParamSig",
	"FnSignature",
]
