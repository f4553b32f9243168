# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Stage 1 package: HIR nodes and HIR-level rewrites.

Public API:
  - HIR node classes (expressions, statements, operator enums)

The pure-call folding pass lives in `driftpure.stage1.pure_fold` and is
imported explicitly by drivers.
"""

from .hir_nodes import (
	HNode,
	HExpr,
	HStmt,
	HVar,
	HLiteralInt,
	HLiteralString,
	HLiteralBool,
	HLiteralFloat,
	HLiteral,
	HCall,
	HMethodCall,
	HField,
	HUnary,
	HBinary,
	HFStringHole,
	HFString,
	HBlock,
	HExprStmt,
	HLet,
	HAssign,
	HIf,
	HLoop,
	HBreak,
	HContinue,
	HReturn,
	UnaryOp,
	BinaryOp,
)

__all__ = [
	"HNode",
	"HExpr",
	"HStmt",
	"HVar",
	"HLiteralInt",
	"HLiteralString",
	"HLiteralBool",
	"HLiteralFloat",
	"HLiteral",
	"HCall",
	"HMethodCall",
	"HField",
	"HUnary",
	"HBinary",
	"HFStringHole",
	"HFString",
	"HBlock",
	"HExprStmt",
	"HLet",
	"HAssign",
	"HIf",
	"HLoop",
	"HBreak",
	"HContinue",
	"HReturn",
	"UnaryOp",
	"BinaryOp",
]
