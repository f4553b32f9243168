# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
High-level Intermediate Representation (HIR) subset seen by the pure-call folder.

Pipeline placement:
  AST → HIR (this file) → [pure_fold replaces eligible pure calls] → MIR → ...

Guiding rules:
- Nodes are syntactic; the only type information embedded here is the
  optional `ty` on literals, which is set once a literal has been checked.
  Literals produced by compile-time evaluation are born checked.
- Calls to module-level functions carry their target as `HVar(name, module_id)`.
- Blocks are explicit statements (`HBlock`), used for `HIf`/`HLoop` bodies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from driftpure.core.span import Span
from driftpure.core.types_core import TypeRef

NodeId = int


# Base node kinds

class HNode:
	"""Base class for all HIR nodes."""
	node_id: NodeId = 0


class HExpr(HNode):
	"""Base class for all HIR expressions."""
	pass


class HStmt(HNode):
	"""Base class for all HIR statements."""
	pass


# Operator enums

class UnaryOp(Enum):
	NEG = auto()      # numeric negation: -x
	NOT = auto()      # logical not: !x
	BIT_NOT = auto()  # bitwise not: ~x


class BinaryOp(Enum):
	ADD = auto()
	SUB = auto()
	MUL = auto()
	DIV = auto()
	MOD = auto()

	EQ = auto()
	NE = auto()
	LT = auto()
	LE = auto()
	GT = auto()
	GE = auto()

	AND = auto()  # logical and (&&)
	OR = auto()   # logical or (||)


# Expressions

@dataclass
class HVar(HExpr):
	"""Reference to a local binding, or to a function when `module_id` is set."""
	name: str
	module_id: Optional[str] = None
	loc: Span = field(default_factory=Span)


@dataclass
class HLiteralInt(HExpr):
	"""Integer literal (as parsed)."""
	value: int
	loc: Span = field(default_factory=Span)
	ty: Optional[TypeRef] = None


@dataclass
class HLiteralString(HExpr):
	"""String literal (already unescaped)."""
	value: str
	loc: Span = field(default_factory=Span)
	ty: Optional[TypeRef] = None


@dataclass
class HLiteralBool(HExpr):
	"""Boolean literal."""
	value: bool
	loc: Span = field(default_factory=Span)
	ty: Optional[TypeRef] = None


@dataclass
class HLiteralFloat(HExpr):
	"""Float literal (IEEE-754 double)."""
	value: float
	loc: Span = field(default_factory=Span)
	ty: Optional[TypeRef] = None


HLiteral = (HLiteralInt, HLiteralString, HLiteralBool, HLiteralFloat)


@dataclass
class HCall(HExpr):
	"""Plain function call: fn(args...)."""
	fn: HExpr
	args: List[HExpr]
	loc: Span = field(default_factory=Span)


@dataclass
class HMethodCall(HExpr):
	receiver: HExpr
	method_name: str
	args: List[HExpr]


@dataclass
class HField(HExpr):
	"""Field access: subject.name"""
	subject: HExpr
	name: str


@dataclass
class HUnary(HExpr):
	op: UnaryOp
	expr: HExpr


@dataclass
class HBinary(HExpr):
	op: BinaryOp
	left: HExpr
	right: HExpr


@dataclass
class HFStringHole(HNode):
	"""Single `{expr[:spec]}` hole inside an f-string."""
	expr: HExpr
	spec: str = ""


@dataclass
class HFString(HExpr):
	"""f-string literal; `len(parts) == len(holes) + 1`."""
	parts: list[str]
	holes: list[HFStringHole]


# Statements

@dataclass
class HBlock(HStmt):
	statements: List[HStmt]


@dataclass
class HExprStmt(HStmt):
	expr: HExpr


@dataclass
class HLet(HStmt):
	name: str
	value: HExpr
	declared_type: Optional[TypeRef] = None


@dataclass
class HAssign(HStmt):
	target: HExpr
	value: HExpr


@dataclass
class HIf(HStmt):
	cond: HExpr
	then_block: HBlock
	else_block: Optional[HBlock]


@dataclass
class HLoop(HStmt):
	body: HBlock


@dataclass
class HBreak(HStmt):
	pass


@dataclass
class HContinue(HStmt):
	pass


@dataclass
class HReturn(HStmt):
	value: Optional[HExpr]


__all__ = [
	"HNode", "HExpr", "HStmt",
	"UnaryOp", "BinaryOp",
	"HVar", "HLiteralInt", "HLiteralString", "HLiteralBool", "HLiteralFloat", "HLiteral",
	"HCall", "HMethodCall", "HField", "HUnary", "HBinary",
	"HFStringHole", "HFString",
	"HBlock", "HExprStmt", "HLet", "HAssign", "HIf", "HLoop",
	"HBreak", "HContinue", "HReturn",
]
