# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Program synthesizer: build a standalone Drift program that performs one call.

Shape of the generated unit (String return shown):

    module m_pure_eval

    import std.strings as strings;

    fn main() nothrow -> Int {
    	val result: String = strings.lower("HELLO");
    	print(result);
    	return 0;
    }

The program imports exactly the callee's owning module, calls the function
with the rendered literals and writes the raw value to stdout with `print`
(no newline, no decoration), so the whole of stdout is the value. Non-string
results go through a single f-string hole, which formats Int/Float/Bool the
same way the runtime would.

Only a *caller* is generated. The callee's body is never looked at.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from driftpure.core.types_core import ScalarKind

from .call_site import ConstantArgument, PureCallSite, SynthesizedProgram
from .errors import SynthesisUnsupportedError

PROGRAM_MODULE = "m_pure_eval"
RESULT_BINDING = "result"


def _import_alias(site: PureCallSite) -> str:
	alias = site.fn_id.module_alias
	if alias in (PROGRAM_MODULE, RESULT_BINDING, "main"):
		alias = f"{alias}_mod"
	return alias


def _print_stmt(kind: ScalarKind) -> str:
	if kind is ScalarKind.STRING:
		return f"print({RESULT_BINDING});"
	return f'print(f"{{{RESULT_BINDING}}}");'


def synthesize(site: PureCallSite, args: Sequence[ConstantArgument]) -> SynthesizedProgram:
	"""
	Generate the caller program for `site` applied to `args`.

	Raises `SynthesisUnsupportedError` when the return type is not a scalar
	kind or an argument has no literal rendering.
	"""
	ret_kind = site.return_kind
	if ret_kind is None:
		raise SynthesisUnsupportedError(f"return type {site.return_type} is not a scalar kind")
	if not site.fn_id.module or site.fn_id.module == "main":
		raise SynthesisUnsupportedError(f"{site.signature.symbol} has no importable owning module")
	rendered: List[str] = [arg.text for arg in args]
	alias = _import_alias(site)
	call_text = f"{alias}.{site.fn_id.name}({', '.join(rendered)})"
	lines = [
		f"module {PROGRAM_MODULE}",
		"",
		f"import {site.fn_id.module} as {alias};",
		"",
		"fn main() nothrow -> Int {",
		f"\tval {RESULT_BINDING}: {site.return_type} = {call_text};",
		f"\t{_print_stmt(ret_kind)}",
		"\treturn 0;",
		"}",
		"",
	]
	return SynthesizedProgram(source="\n".join(lines), site=site, args=tuple(args))


def try_synthesize(site: PureCallSite, args: Sequence[ConstantArgument]) -> Optional[SynthesizedProgram]:
	"""Program-or-nothing form of `synthesize`."""
	try:
		return synthesize(site, args)
	except SynthesisUnsupportedError:
		return None


__all__ = ["PROGRAM_MODULE", "RESULT_BINDING", "synthesize", "try_synthesize"]
