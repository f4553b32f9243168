# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Pure-call folding (stage1).

Pipeline placement:
  AST → HIR → [this pass replaces eligible pure calls with literals] → MIR → ...

The pass walks HIR blocks/statements/expressions and, for every `HCall` whose
target resolves to a known signature, asks the evaluator for a replacement
literal. It is the call-walking half of compile-time evaluation; all the
actual decisions live in `driftpure.comptime`.

Notes:
  * The outer call is decided on its *original* arguments before they are
    visited. `f(g(1))` therefore never folds `f`, even when `g(1)` folds.
  * Subtrees with nothing to fold are returned as the very same objects, so a
    call the evaluator declines keeps its node identity.
  * Target resolution: `HVar(name, module_id)`, where `module_id` may be an
    import alias (`module_aliases`) or None (`default_module`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Tuple

from driftpure.core.types_core import FnSignature
from . import hir_nodes as H

if TYPE_CHECKING:
	from driftpure.comptime.coordinator import PureCallEvaluator

SignatureKey = Tuple[str, str]


class PureCallFolder:
	def __init__(
		self,
		evaluator: "PureCallEvaluator",
		signatures: Mapping[SignatureKey, FnSignature],
		*,
		module_aliases: Optional[Mapping[str, str]] = None,
		default_module: str = "main",
	) -> None:
		self.evaluator = evaluator
		self.signatures = signatures
		self.module_aliases: Dict[str, str] = dict(module_aliases or {})
		self.default_module = default_module
		self.attempted = 0
		self.folded = 0

	# Public entry points ------------------------------------------------

	def fold_block(self, block: H.HBlock) -> H.HBlock:
		new_stmts: List[H.HStmt] = []
		changed = False
		for stmt in block.statements:
			new_stmt = self._fold_stmt(stmt)
			changed = changed or new_stmt is not stmt
			new_stmts.append(new_stmt)
		if not changed:
			return block
		return H.HBlock(statements=new_stmts)

	def fold_expr(self, expr: H.HExpr) -> H.HExpr:
		return self._fold_expr(expr)

	def resolve(self, call: H.HCall) -> Optional[FnSignature]:
		"""Find the signature of a direct call target, if any."""
		fn = call.fn
		if not isinstance(fn, H.HVar):
			return None
		module = fn.module_id
		if module is None:
			module = self.default_module
		else:
			module = self.module_aliases.get(module, module)
		return self.signatures.get((module, fn.name))

	# Statement folding -------------------------------------------------

	def _fold_stmt(self, stmt: H.HStmt) -> H.HStmt:
		if isinstance(stmt, H.HExprStmt):
			expr = self._fold_expr(stmt.expr)
			return stmt if expr is stmt.expr else H.HExprStmt(expr=expr)
		if isinstance(stmt, H.HLet):
			value = self._fold_expr(stmt.value)
			if value is stmt.value:
				return stmt
			return H.HLet(name=stmt.name, value=value, declared_type=stmt.declared_type)
		if isinstance(stmt, H.HAssign):
			value = self._fold_expr(stmt.value)
			return stmt if value is stmt.value else H.HAssign(target=stmt.target, value=value)
		if isinstance(stmt, H.HReturn):
			if stmt.value is None:
				return stmt
			value = self._fold_expr(stmt.value)
			return stmt if value is stmt.value else H.HReturn(value=value)
		if isinstance(stmt, H.HIf):
			cond = self._fold_expr(stmt.cond)
			then_block = self.fold_block(stmt.then_block)
			else_block = self.fold_block(stmt.else_block) if stmt.else_block else None
			if cond is stmt.cond and then_block is stmt.then_block and else_block is stmt.else_block:
				return stmt
			return H.HIf(cond=cond, then_block=then_block, else_block=else_block)
		if isinstance(stmt, H.HLoop):
			body = self.fold_block(stmt.body)
			return stmt if body is stmt.body else H.HLoop(body=body)
		if isinstance(stmt, H.HBlock):
			return self.fold_block(stmt)
		if isinstance(stmt, (H.HBreak, H.HContinue)):
			return stmt
		raise NotImplementedError(f"PureCallFolder does not handle stmt {type(stmt).__name__}")

	# Expression folding ------------------------------------------------

	def _fold_expr(self, expr: H.HExpr) -> H.HExpr:
		if isinstance(expr, (H.HVar, *H.HLiteral)):
			return expr
		if isinstance(expr, H.HCall):
			return self._fold_call(expr)
		if isinstance(expr, H.HMethodCall):
			receiver = self._fold_expr(expr.receiver)
			args = self._fold_list(expr.args)
			if receiver is expr.receiver and args is expr.args:
				return expr
			return H.HMethodCall(receiver=receiver, method_name=expr.method_name, args=args)
		if isinstance(expr, H.HField):
			subject = self._fold_expr(expr.subject)
			return expr if subject is expr.subject else H.HField(subject=subject, name=expr.name)
		if isinstance(expr, H.HUnary):
			inner = self._fold_expr(expr.expr)
			return expr if inner is expr.expr else H.HUnary(op=expr.op, expr=inner)
		if isinstance(expr, H.HBinary):
			left = self._fold_expr(expr.left)
			right = self._fold_expr(expr.right)
			if left is expr.left and right is expr.right:
				return expr
			return H.HBinary(op=expr.op, left=left, right=right)
		if isinstance(expr, H.HFString):
			holes: List[H.HFStringHole] = []
			changed = False
			for hole in expr.holes:
				inner = self._fold_expr(hole.expr)
				changed = changed or inner is not hole.expr
				holes.append(hole if inner is hole.expr else H.HFStringHole(expr=inner, spec=hole.spec))
			return expr if not changed else H.HFString(parts=list(expr.parts), holes=holes)
		raise NotImplementedError(f"PureCallFolder does not handle expr {type(expr).__name__}")

	def _fold_list(self, exprs: List[H.HExpr]) -> List[H.HExpr]:
		new = [self._fold_expr(e) for e in exprs]
		if all(a is b for a, b in zip(new, exprs)):
			return exprs
		return new

	def _fold_call(self, call: H.HCall) -> H.HExpr:
		sig = self.resolve(call)
		if sig is not None and sig.is_pure:
			self.attempted += 1
			replacement = self.evaluator.try_evaluate(call, sig)
			if replacement is not None:
				self.folded += 1
				return replacement
		args = self._fold_list(call.args)
		if args is call.args:
			return call
		return H.HCall(fn=call.fn, args=args, loc=call.loc)


__all__ = ["PureCallFolder", "SignatureKey"]
