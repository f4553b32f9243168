# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rendering constant values back into Drift source literals.

The string escapes mirror the parser's decoder: the body of a STRING token is
run through Python-style `unicode_escape` and the result reinterpreted as
UTF-8 bytes. Emitting every non-ASCII byte as `\\xHH` keeps the rendered text
pure ASCII and decodes back to exactly the original string.
"""

from __future__ import annotations

import math
from typing import Union

from driftpure.core.types_core import ScalarKind

from .errors import SynthesisUnsupportedError

ConstValue = Union[str, int, float, bool]

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1
UINT_MAX = 2**64 - 1

_SIMPLE_ESCAPES = {
	"\\": "\\\\",
	'"': '\\"',
	"\n": "\\n",
	"\r": "\\r",
	"\t": "\\t",
}


def render_string(value: str) -> str:
	out: list[str] = ['"']
	for ch in value:
		esc = _SIMPLE_ESCAPES.get(ch)
		if esc is not None:
			out.append(esc)
		elif " " <= ch <= "~":
			out.append(ch)
		else:
			out.extend(f"\\x{b:02x}" for b in ch.encode("utf-8"))
	out.append('"')
	return "".join(out)


def render_int(value: int) -> str:
	if not INT_MIN <= value <= UINT_MAX:
		raise SynthesisUnsupportedError(f"integer {value} does not fit in 64 bits")
	return str(value)


def render_float(value: float) -> str:
	"""
	Render a float using the literal forms the parser accepts.

	Digits are required on both sides of the dot and an exponent is only
	allowed in dot form, so `1e+20` becomes `1.0e20`. There is no literal
	syntax for NaN or infinities.
	"""
	if not math.isfinite(value):
		raise SynthesisUnsupportedError(f"float {value!r} has no literal form")
	text = repr(float(value))
	if "e" in text:
		mantissa, exponent = text.split("e")
		if "." not in mantissa:
			mantissa += ".0"
		return f"{mantissa}e{int(exponent)}"
	if "." not in text:
		text += ".0"
	return text


def render_bool(value: bool) -> str:
	return "true" if value else "false"


def render_literal(kind: ScalarKind, value: ConstValue) -> str:
	"""Render `value` as a source literal of `kind`."""
	if kind is ScalarKind.STRING and isinstance(value, str):
		return render_string(value)
	if kind is ScalarKind.BOOL and isinstance(value, bool):
		return render_bool(value)
	if kind is ScalarKind.INT and isinstance(value, int) and not isinstance(value, bool):
		return render_int(value)
	if kind is ScalarKind.FLOAT and isinstance(value, float):
		return render_float(value)
	raise SynthesisUnsupportedError(f"cannot render {type(value).__name__} value as {kind.name} literal")


__all__ = [
	"ConstValue",
	"INT_MIN",
	"INT_MAX",
	"UINT_MAX",
	"render_string",
	"render_int",
	"render_float",
	"render_bool",
	"render_literal",
]
