# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: evaluate one pure call ahead of time.

  python -m driftpure --module std.strings \\
      --signature '@pure pub fn lower(s: String) -> String' \\
      'strings.lower("HELLO WORLD")'

Prints the folded literal in Drift source form and exits 0, or exits 1 when
the call would stay a runtime call. With --json, prints a single object with
`exit_code`, `value`, `literal` and `diagnostics` (phase/message/severity/
file/line/column) instead.
"""

from __future__ import annotations

import argparse
import io
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from driftpure.comptime import EvalConfig, PureCallEvaluator, Tracer
from driftpure.comptime.literals import render_literal
from driftpure.comptime.eligibility import literal_constant
from driftpure.core.diagnostics import Diagnostic
from driftpure.core.types_core import FnSignature
from driftpure.parser import ParseError, parse_call, parse_signature
from driftpure.stage1 import hir_nodes as H
from driftpure.stage1.pure_fold import PureCallFolder


def _build_arg_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="driftpure", description="Compile-time evaluation of a pure Drift call")
	parser.add_argument("call", help="Call expression, e.g. 'strings.lower(\"HELLO\")'")
	parser.add_argument("--module", required=True, help="Owning module of the declared signatures (e.g. std.strings)")
	parser.add_argument(
		"-s",
		"--signature",
		dest="signatures",
		action="append",
		required=True,
		help="Function declaration header, e.g. '@pure fn lower(s: String) -> String' (repeatable)",
	)
	parser.add_argument(
		"-M",
		"--module-path",
		dest="module_paths",
		action="append",
		type=Path,
		help="Module root directory handed to the helper program (repeatable)",
	)
	parser.add_argument("--toolchain-root", type=Path, help="Pinned toolchain root (default: $DRIFT_ROOT)")
	parser.add_argument("--timeout", type=float, help="Seconds before the helper program is killed (<= 0 disables)")
	parser.add_argument(
		"--accept-empty-string",
		action="store_true",
		help="Treat empty output from a String-returning call as the empty string",
	)
	parser.add_argument("-v", "--verbose", action="count", default=0, help="Trace evaluation stages (-vv for more)")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit the result and diagnostics as JSON",
	)
	return parser


def _config_from_args(args: argparse.Namespace) -> EvalConfig:
	overrides: Dict[str, Any] = {"accept_empty_string": bool(args.accept_empty_string)}
	if args.toolchain_root is not None:
		overrides["toolchain_root"] = args.toolchain_root
	if args.module_paths:
		overrides["module_paths"] = tuple(args.module_paths)
	if args.timeout is not None:
		overrides["timeout_s"] = args.timeout if args.timeout > 0 else None
	if args.verbose:
		overrides["verbosity"] = args.verbose
	return EvalConfig.from_env(**overrides)


def _emit(args: argparse.Namespace, exit_code: int, diagnostics: List[Diagnostic], result: Optional[H.HExpr]) -> int:
	value: Any = None
	literal: Optional[str] = None
	if result is not None:
		lit = literal_constant(result)
		if lit is not None:
			kind, value = lit
			literal = render_literal(kind, value)  # type: ignore[arg-type]
	if args.json:
		print(
			json.dumps(
				{
					"exit_code": exit_code,
					"value": value,
					"literal": literal,
					"diagnostics": [d.to_json() for d in diagnostics],
				}
			)
		)
		return exit_code
	for diag in diagnostics:
		if diag.severity != "note":
			print(diag.render(), file=sys.stderr)
	if literal is not None:
		print(literal)
	elif exit_code != 0 and not any(d.severity == "error" for d in diagnostics):
		print("call left as a runtime call", file=sys.stderr)
	return exit_code


def main(argv: list[str] | None = None) -> int:
	args = _build_arg_parser().parse_args(argv)
	try:
		config = _config_from_args(args)
	except ValueError as err:
		return _emit(args, 2, [Diagnostic(message=f"invalid configuration: {err}", phase="config")], None)

	diagnostics: List[Diagnostic] = []
	signatures: Dict[tuple[str, str], FnSignature] = {}
	try:
		for text in args.signatures:
			sig = parse_signature(text, module=args.module, file="<signature>")
			signatures[(sig.fn_id.module, sig.fn_id.name)] = sig
		call = parse_call(args.call, file="<call>")
	except ParseError as err:
		diagnostics.append(Diagnostic(message=str(err), phase="parser", span=err.loc))
		return _emit(args, 2, diagnostics, None)

	# Without --json the tracer writes to stderr as it goes; with --json the
	# trace is carried in the payload instead.
	tracer = Tracer(config.verbosity, stream=io.StringIO() if args.json else None)
	evaluator = PureCallEvaluator(config, tracer=tracer)
	alias = args.module.rsplit(".", 1)[-1]
	folder = PureCallFolder(evaluator, signatures, module_aliases={alias: args.module}, default_module=args.module)
	result = folder.fold_expr(call)
	diagnostics.extend(tracer.diagnostics)
	if result is call or isinstance(result, H.HCall):
		return _emit(args, 1, diagnostics, None)
	return _emit(args, 0, diagnostics, result)


__all__ = ["main"]
