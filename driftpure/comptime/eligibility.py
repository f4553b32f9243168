# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Eligibility checker: may this call be evaluated ahead of time?

A site qualifies when the callee is declared pure, the arity matches, and every
argument is a literal whose kind equals the declared parameter kind exactly.
Anything else (variables, nested calls even when they are foldable themselves,
f-strings, arithmetic) leaves the call alone. There is no widening between
kinds here: an `Int` literal passed to a `Float` parameter disqualifies.

Purity is trusted. The `@pure` attribute is an assertion made by the author of
the callee and nothing in this module looks at the callee's body.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from driftpure.core.types_core import FnSignature, ScalarKind, TypeRef, is_unsigned, scalar_kind_of
from driftpure.stage1 import hir_nodes as H

from .call_site import ConstantArgument
from .errors import IneligibleCallError


def literal_constant(expr: H.HExpr) -> Optional[Tuple[ScalarKind, object]]:
	"""
	Return `(kind, value)` when `expr` is a literal of a supported kind.

	A unary minus applied directly to an int/float literal is a signed literal
	(that is how `-100` reaches HIR); no other expression shape counts.
	"""
	if isinstance(expr, H.HLiteralString):
		return ScalarKind.STRING, expr.value
	if isinstance(expr, H.HLiteralBool):
		return ScalarKind.BOOL, expr.value
	if isinstance(expr, H.HLiteralInt):
		return ScalarKind.INT, expr.value
	if isinstance(expr, H.HLiteralFloat):
		return ScalarKind.FLOAT, expr.value
	if isinstance(expr, H.HUnary) and expr.op is H.UnaryOp.NEG:
		if isinstance(expr.expr, H.HLiteralInt):
			return ScalarKind.INT, -expr.expr.value
		if isinstance(expr.expr, H.HLiteralFloat):
			return ScalarKind.FLOAT, -expr.expr.value
	return None


def _check_argument(index: int, arg: H.HExpr, param_ty: TypeRef) -> ConstantArgument:
	lit = literal_constant(arg)
	if lit is None:
		raise IneligibleCallError(f"argument {index} is not a literal ({type(arg).__name__})")
	kind, value = lit
	param_kind = scalar_kind_of(param_ty)
	if param_kind is None:
		raise IneligibleCallError(f"parameter {index} has unsupported type {param_ty}")
	if param_kind is not kind:
		raise IneligibleCallError(f"argument {index} is a {kind.name} literal but parameter is {param_ty}")
	if is_unsigned(param_ty) and isinstance(value, int) and value < 0:
		raise IneligibleCallError(f"argument {index} is negative but parameter is {param_ty}")
	return ConstantArgument(kind=kind, value=value)  # type: ignore[arg-type]


def constant_arguments(call: H.HCall, signature: FnSignature) -> List[ConstantArgument]:
	"""
	Collect the call's arguments as constants, or raise `IneligibleCallError`.

	The reason carried by the error is only used for trace output.
	"""
	if not signature.is_pure:
		raise IneligibleCallError(f"{signature.symbol} is not declared pure")
	if len(call.args) != len(signature.params):
		raise IneligibleCallError(
			f"{signature.symbol} takes {len(signature.params)} argument(s), call passes {len(call.args)}"
		)
	return [_check_argument(i, arg, param.type) for i, (arg, param) in enumerate(zip(call.args, signature.params))]


def is_eligible(call: H.HCall, signature: FnSignature) -> bool:
	"""Pure predicate: True when `constant_arguments` would succeed."""
	try:
		constant_arguments(call, signature)
	except IneligibleCallError:
		return False
	return True


__all__ = ["literal_constant", "constant_arguments", "is_eligible"]
