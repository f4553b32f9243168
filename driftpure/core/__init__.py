# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared core types: spans, diagnostics, function ids and the scalar type model."""

from .diagnostics import Diagnostic
from .function_id import FunctionId, function_symbol
from .span import Span
from .types_core import (
	BOOL,
	FLOAT,
	INT,
	STRING,
	UINT,
	FnSignature,
	ParamSig,
	ScalarKind,
	TypeRef,
	is_unsigned,
	scalar_kind_of,
)

__all__ = [
	"Diagnostic",
	"FunctionId",
	"function_symbol",
	"Span",
	"BOOL",
	"FLOAT",
	"INT",
	"STRING",
	"UINT",
	"FnSignature",
	"ParamSig",
	"ScalarKind",
	"TypeRef",
	"is_unsigned",
	"scalar_kind_of",
]
