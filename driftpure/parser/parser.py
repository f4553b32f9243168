# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parser for pure-call signatures and call expressions.

Drivers and tests use this to describe a candidate call the way source code
spells it instead of assembling HIR by hand:

  - `parse_signature("@pure fn lower(s: String) -> String", module="std.strings")`
  - `parse_call('strings.lower("HELLO")')`

Calls lower straight to HIR (`HCall` with `HVar(name, module_id)` targets and
literal nodes carrying spans).
"""

from __future__ import annotations

import codecs
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from driftpure.core.function_id import FunctionId
from driftpure.core.span import Span
from driftpure.core.types_core import FnSignature, ParamSig, TypeRef
from driftpure.stage1 import hir_nodes as H

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	start=["signature", "call"],
	propagate_positions=True,
	maybe_placeholders=False,
)


class ParseError(ValueError):
	"""
	Error raised for malformed signatures or calls.

	A `ValueError` subclass carrying a best-effort location (`loc`) so callers
	can turn it into a structured diagnostic.
	"""

	def __init__(self, message: str, *, loc: Span) -> None:
		super().__init__(message)
		self.loc = loc


def _name(node: Tree) -> str:
	return node.data if isinstance(node.data, str) else node.data.value


def _decode_string_token(tok: Token) -> str:
	"""
	Decode STRING tokens, including \\xHH hex byte escapes. We first interpret
	Python-style escapes (unicode_escape), then reinterpret the resulting code
	points as raw bytes (latin-1) and decode as UTF-8 to recover the intended
	byte sequence.
	"""
	content = tok.value[1:-1]
	unescaped = codecs.decode(content, "unicode_escape")
	raw_bytes = unescaped.encode("latin-1")
	return raw_bytes.decode("utf-8")


def _parse(text: str, start: str, file: Optional[str]) -> Tree:
	try:
		return _PARSER.parse(text, start=start)
	except UnexpectedInput as err:
		loc = Span(file=file, line=getattr(err, "line", None), column=getattr(err, "column", None))
		raise ParseError(f"invalid {start}: {err}", loc=loc) from err


def _build_type_ref(node: Tree) -> TypeRef:
	is_ref = False
	name = ""
	args: List[TypeRef] = []
	for child in node.children:
		if isinstance(child, Token):
			if child.type == "AMP":
				is_ref = True
			elif child.type == "NAME":
				name = child.value
		elif _name(child) == "type_args":
			args = [_build_type_ref(c) for c in child.children if isinstance(c, Tree)]
	return TypeRef(name=name, args=tuple(args), is_ref=is_ref)


def parse_signature(text: str, *, module: str, ordinal: int = 0, file: Optional[str] = None) -> FnSignature:
	"""
	Parse a function declaration header into an `FnSignature`.

	`@pure` marks the function pure; other attributes are accepted and
	ignored here.
	"""
	return _signature_from_tree(_parse(text, "signature", file), module=module, ordinal=ordinal, file=file)


def _signature_from_tree(tree: Tree, *, module: str, ordinal: int, file: Optional[str]) -> FnSignature:
	attrs: List[str] = []
	params: List[ParamSig] = []
	fn_name: Optional[str] = None
	ret: Optional[TypeRef] = None
	for child in tree.children:
		if isinstance(child, Token):
			if child.type == "NAME":
				fn_name = child.value
			continue
		kind = _name(child)
		if kind == "attribute":
			attrs.append(child.children[0].value)
		elif kind == "param":
			pname = child.children[0].value
			params.append(ParamSig(name=pname, type=_build_type_ref(child.children[1])))
		elif kind == "type_ref":
			ret = _build_type_ref(child)
	if fn_name is None or ret is None:
		raise ParseError("signature is missing a function name or return type", loc=Span.from_loc(tree.meta, file=file))
	return FnSignature(
		fn_id=FunctionId(module=module, name=fn_name, ordinal=ordinal),
		params=tuple(params),
		return_type=ret,
		is_pure="pure" in attrs,
		loc=Span.from_loc(tree.meta, file=file),
	)


def _build_arg(node: Tree | Token, file: Optional[str]) -> H.HExpr:
	kind = _name(node)  # type: ignore[arg-type]
	loc = Span.from_loc(node.meta, file=file)  # type: ignore[union-attr]
	tok = node.children[0]  # type: ignore[union-attr]
	if kind == "call":
		return _build_call(node, file)  # type: ignore[arg-type]
	if kind == "string_lit":
		return H.HLiteralString(value=_decode_string_token(tok), loc=loc)
	if kind == "int_lit":
		return H.HLiteralInt(value=int(tok.value), loc=loc)
	if kind == "float_lit":
		return H.HLiteralFloat(value=float(tok.value), loc=loc)
	if kind == "true_lit":
		return H.HLiteralBool(value=True, loc=loc)
	if kind == "false_lit":
		return H.HLiteralBool(value=False, loc=loc)
	if kind == "neg_int":
		return H.HUnary(op=H.UnaryOp.NEG, expr=H.HLiteralInt(value=int(tok.value), loc=Span.from_loc(tok, file=file)))
	if kind == "neg_float":
		return H.HUnary(
			op=H.UnaryOp.NEG, expr=H.HLiteralFloat(value=float(tok.value), loc=Span.from_loc(tok, file=file))
		)
	if kind == "var_ref":
		return H.HVar(name=tok.value, loc=loc)
	raise ParseError(f"unsupported argument form {kind}", loc=loc)


def _build_call(tree: Tree, file: Optional[str]) -> H.HCall:
	callee, *arg_nodes = tree.children
	parts = [t.value for t in callee.children if isinstance(t, Token)]
	module_id = ".".join(parts[:-1]) or None
	fn = H.HVar(name=parts[-1], module_id=module_id, loc=Span.from_loc(callee.meta, file=file))
	args = [_build_arg(a, file) for a in arg_nodes]
	return H.HCall(fn=fn, args=args, loc=Span.from_loc(tree.meta, file=file))


def parse_call(text: str, *, file: Optional[str] = None) -> H.HCall:
	"""Parse a call expression such as `strings.lower("HELLO")` into HIR."""
	tree = _parse(text, "call", file)
	return _build_call(tree, file)


__all__ = ["ParseError", "parse_signature", "parse_call"]
