# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from .parser import ParseError, parse_call, parse_signature

__all__ = ["ParseError", "parse_call", "parse_signature"]
